import asyncio
from typing import Any, Optional

from web3 import AsyncWeb3
from web3.contract import AsyncContract
from web3.exceptions import ContractLogicError

from nftmarket.abis import NFT_ABI, NFT_MARKET_ABI
from nftmarket.config import Settings
from nftmarket.utils.blockchain.evm import (
    get_web3_client,
    load_contract,
    to_receipt,
    wait_for_receipt,
)
from nftmarket.utils.blockchain.types import Receipt
from nftmarket.utils.logging import get_logger
from .base import MarketplaceError
from .wallet import Wallet, WalletError, wallet_from_settings

logger = get_logger(__name__)


class ChainError(MarketplaceError):
    """Raised when a contract call fails"""
    pass

class TransactionError(ChainError):
    """Raised when a state-changing call fails"""
    pass

class TransactionRevertedError(TransactionError):
    """Raised when a transaction reverts or is mined with a failed status"""
    pass

class TransactionTimeoutError(TransactionError):
    """Raised when a receipt does not arrive within the caller's timeout"""
    pass

class NetworkConfigError(ChainError):
    """Raised when the configured network or its RPC endpoint cannot be resolved"""
    pass


class ChainSession:
    """Short-lived wallet session bound to the token and marketplace contracts.

    Obtained through `acquire_session` at the start of each workflow.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        wallet: Wallet,
        account: str,
        token: AsyncContract,
        market: AsyncContract,
        poll_interval: float = 1.0,
    ):
        self.w3 = w3
        self.wallet = wallet
        self.account = account
        self.token = token
        self.market = market
        self.poll_interval = poll_interval

    @property
    def token_address(self) -> str:
        return self.token.address

    @property
    def market_address(self) -> str:
        return self.market.address

    async def call_read(self, contract: AsyncContract, method: str, *args) -> Any:
        """Read-only call, sent from the session account."""
        function = getattr(contract.functions, method)(*args)
        try:
            return await function.call({"from": self.account})
        except Exception as e:
            logger.error(f"Read {method} on {contract.address} failed: {str(e)}")
            raise ChainError(f"{method} call failed: {str(e)}") from e

    async def call_write(
        self,
        contract: AsyncContract,
        method: str,
        *args,
        value: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Receipt:
        """
        Submit a state-changing call and wait for its inclusion.

        Args:
            contract: Contract handle from this session
            method: Contract function name
            *args: Function arguments
            value: Payment in wei attached to the call
            timeout: Seconds to wait for the receipt, None waits indefinitely

        Raises:
            WalletError: If the wallet refuses to sign
            TransactionRevertedError: If the call reverts
            TransactionTimeoutError: If `timeout` elapses before inclusion
        """
        function = getattr(contract.functions, method)(*args)
        tx_params = {"from": self.account}
        if value is not None:
            tx_params["value"] = int(value)

        logger.info(f"Submitting {method} to {contract.address} (value={tx_params.get('value', 0)})")
        try:
            tx_hash = await self.wallet.send_transaction(self.w3, function, tx_params)
        except WalletError:
            raise
        except ContractLogicError as e:
            logger.error(f"{method} reverted: {str(e)}")
            raise TransactionRevertedError(f"{method} reverted: {str(e)}") from e
        except Exception as e:
            logger.error(f"Failed to submit {method}: {str(e)}")
            raise TransactionError(f"Failed to submit {method}: {str(e)}") from e

        try:
            raw_receipt = await wait_for_receipt(self.w3, tx_hash, self.poll_interval, timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{method} not mined within {timeout}s")
            raise TransactionTimeoutError(f"{method} not mined within {timeout}s") from e

        receipt = to_receipt(raw_receipt, [self.token, self.market])
        if not receipt.succeeded:
            logger.error(f"{method} reverted in {receipt.transaction_hash}")
            raise TransactionRevertedError(f"{method} reverted", detail=receipt.transaction_hash)

        logger.info(f"{method} included in block {receipt.block_number}")
        return receipt

    async def close(self):
        disconnect = getattr(self.w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()


async def acquire_session(settings: Settings, wallet: Optional[Wallet] = None) -> ChainSession:
    """
    Connect the wallet and build contract handles.

    Raises:
        WalletNotFoundError: If no wallet is configured or reachable
        WalletRejectedError: If the user rejects the connection
        NetworkConfigError: If contract addresses or the RPC endpoint are missing
    """
    if not settings.nft_address or not settings.nft_market_address:
        logger.error("NFT_ADDRESS and NFT_MARKET_ADDRESS must both be set")
        raise NetworkConfigError("Contract addresses are not configured")

    try:
        rpc_url = settings.get_rpc_url()
    except ValueError as e:
        logger.error(f"Cannot resolve RPC endpoint for {settings.network}: {str(e)}")
        raise NetworkConfigError(f"Network {settings.network} is not configured: {str(e)}") from e

    w3 = get_web3_client(rpc_url)
    wallet = wallet or wallet_from_settings(settings)
    account = await wallet.request_accounts(w3)
    logger.info(f"Wallet connected: {account} on {settings.network}")

    return ChainSession(
        w3=w3,
        wallet=wallet,
        account=account,
        token=load_contract(w3, settings.nft_address, NFT_ABI),
        market=load_contract(w3, settings.nft_market_address, NFT_MARKET_ABI),
        poll_interval=settings.receipt_poll_interval,
    )
