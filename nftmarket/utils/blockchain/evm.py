import asyncio
import json
from typing import Any, Dict, Iterable, List, Mapping, Optional

from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract
from web3.exceptions import TransactionNotFound
from eth_utils import event_abi_to_log_topic
from eth_utils.address import to_checksum_address
from tenacity import AsyncRetrying, retry_if_exception_type, wait_fixed

from nftmarket.services.base import MarketplaceError
from nftmarket.utils.logging import get_logger
from .types import DecodedEvent, Receipt

logger = get_logger(__name__)

# Position of the token id in the first event emitted by `createToken`
# (ERC-721 Transfer(from, to, tokenId)).
MINT_EVENT_INDEX = 0
MINT_TOKEN_ID_ARG_INDEX = 2


class MintEventError(MarketplaceError):
    """Raised when a mint receipt does not carry the expected event layout"""
    pass


def get_web3_client(rpc_url: str) -> AsyncWeb3:
    """Helper function to create Web3 client."""
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))


def load_contract(w3: AsyncWeb3, address: str, abi: str) -> AsyncContract:
    return w3.eth.contract(address=to_checksum_address(address), abi=json.loads(abi))


async def wait_for_receipt(
    w3: AsyncWeb3,
    tx_hash: Any,
    poll_interval: float = 1.0,
    timeout: Optional[float] = None,
):
    """
    Poll the node until the transaction is included.

    Args:
        w3: Web3 client
        tx_hash: Hash returned when the transaction was submitted
        poll_interval: Seconds between receipt lookups
        timeout: Seconds to wait before giving up, None waits indefinitely

    Raises:
        asyncio.TimeoutError: If `timeout` elapses first
    """

    async def _poll():
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(TransactionNotFound),
            wait=wait_fixed(poll_interval),
            reraise=True,
        ):
            with attempt:
                receipt = await w3.eth.get_transaction_receipt(tx_hash)
        return receipt

    return await asyncio.wait_for(_poll(), timeout)


def _event_index(contracts: Iterable[AsyncContract]) -> Dict[tuple, tuple]:
    index = {}
    for contract in contracts:
        for abi in contract.abi:
            if abi.get("type") != "event" or abi.get("anonymous"):
                continue
            key = (contract.address.lower(), bytes(event_abi_to_log_topic(abi)))
            index[key] = (contract, abi)
    return index


def decode_logs(contracts: Iterable[AsyncContract], logs: Iterable[Mapping]) -> List[DecodedEvent]:
    """
    Decode receipt logs against the given contracts.

    Event arguments are returned in the event ABI's declaration order.
    """
    index = _event_index(contracts)
    events = []
    for log in logs:
        address = to_checksum_address(log["address"])
        topics = log.get("topics") or []
        match = index.get((address.lower(), bytes(topics[0]))) if topics else None
        if match is None:
            events.append(DecodedEvent(name=None, address=address, args=()))
            continue

        contract, abi = match
        decoded = getattr(contract.events, abi["name"])().process_log(log)
        args = tuple(decoded["args"][i["name"]] for i in abi["inputs"])
        events.append(DecodedEvent(name=abi["name"], address=address, args=args))
    return events


def to_receipt(raw: Mapping, contracts: Iterable[AsyncContract]) -> Receipt:
    tx_hash = raw["transactionHash"]
    return Receipt(
        transaction_hash=Web3.to_hex(tx_hash) if isinstance(tx_hash, (bytes, bytearray)) else str(tx_hash),
        block_number=raw.get("blockNumber") or 0,
        status=raw.get("status", 1),
        events=decode_logs(contracts, raw.get("logs", [])),
    )


def extract_minted_token_id(receipt: Receipt) -> int:
    """
    Read the newly minted token id from a `createToken` receipt.

    The token contract emits Transfer(from, to, tokenId) first, so the id is
    the third argument of the first event.

    Raises:
        MintEventError: If the receipt has no such event or argument
    """
    if len(receipt.events) <= MINT_EVENT_INDEX:
        raise MintEventError(
            "Mint receipt has no events", detail=receipt.transaction_hash
        )

    event = receipt.events[MINT_EVENT_INDEX]
    if len(event.args) <= MINT_TOKEN_ID_ARG_INDEX:
        raise MintEventError(
            f"Mint event {event.name} has no token id argument",
            detail=receipt.transaction_hash,
        )

    token_id = int(event.args[MINT_TOKEN_ID_ARG_INDEX])
    logger.debug(f"Minted token {token_id} in {receipt.transaction_hash}")
    return token_id
