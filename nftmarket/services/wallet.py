from typing import Any, Dict, Optional

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils.address import to_checksum_address
from web3 import AsyncWeb3

from nftmarket.config import Settings
from nftmarket.utils.logging import get_logger
from .base import MarketplaceError

logger = get_logger(__name__)

# EIP-1193 / JSON-RPC error codes
USER_REJECTED_CODE = 4001
METHOD_NOT_FOUND_CODE = -32601


class WalletError(MarketplaceError):
    """Base exception for wallet connection and signing errors"""
    pass

class WalletNotFoundError(WalletError):
    """Raised when no wallet is configured or reachable"""
    pass

class WalletRejectedError(WalletError):
    """Raised when the wallet refuses to connect or sign"""
    pass


def _rpc_error_code(error: Any) -> Optional[int]:
    """Extract a JSON-RPC error code from a response dict or a web3 exception."""
    if isinstance(error, dict):
        return error.get("code")

    rpc_response = getattr(error, "rpc_response", None)
    if isinstance(rpc_response, dict) and isinstance(rpc_response.get("error"), dict):
        return rpc_response["error"].get("code")

    for arg in getattr(error, "args", ()):
        if isinstance(arg, dict):
            return arg.get("code")
    return None


class Wallet:
    """Signer used by a chain session"""

    async def request_accounts(self, w3: AsyncWeb3) -> str:
        raise NotImplementedError

    async def send_transaction(self, w3: AsyncWeb3, function, tx_params: Dict[str, Any]):
        raise NotImplementedError


class ProviderWallet(Wallet):
    """Accounts managed by the connected provider (browser-style wallet or dev node)."""

    def __init__(self, account_index: int = 0):
        self.account_index = account_index

    async def _request(self, w3: AsyncWeb3, method: str) -> Dict[str, Any]:
        try:
            return await w3.provider.make_request(method, [])
        except (aiohttp.ClientError, OSError) as e:
            logger.error(f"Wallet provider unreachable: {str(e)}")
            raise WalletNotFoundError("No wallet provider available", detail=str(e)) from e

    async def request_accounts(self, w3: AsyncWeb3) -> str:
        response = await self._request(w3, "eth_requestAccounts")

        # Dev nodes expose unlocked accounts without the connect handshake
        if _rpc_error_code(response.get("error") or {}) == METHOD_NOT_FOUND_CODE:
            response = await self._request(w3, "eth_accounts")

        error = response.get("error")
        if error:
            if _rpc_error_code(error) == USER_REJECTED_CODE:
                raise WalletRejectedError("User rejected the connection request")
            raise WalletNotFoundError("Wallet provider refused account request", detail=str(error))

        accounts = response.get("result") or []
        if len(accounts) <= self.account_index:
            raise WalletNotFoundError("No accounts exposed by wallet provider")

        return to_checksum_address(accounts[self.account_index])

    async def send_transaction(self, w3: AsyncWeb3, function, tx_params: Dict[str, Any]):
        try:
            return await function.transact(tx_params)
        except Exception as e:
            if _rpc_error_code(e) == USER_REJECTED_CODE:
                raise WalletRejectedError("User rejected the transaction") from e
            raise


class LocalAccountWallet(Wallet):
    """Signs transactions locally with a private key."""

    def __init__(self, private_key: str):
        try:
            self.account: LocalAccount = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise WalletNotFoundError("Invalid private key") from e

    async def request_accounts(self, w3: AsyncWeb3) -> str:
        return self.account.address

    async def send_transaction(self, w3: AsyncWeb3, function, tx_params: Dict[str, Any]):
        params = dict(tx_params)
        params["nonce"] = await w3.eth.get_transaction_count(self.account.address)
        tx = await function.build_transaction(params)

        signed_tx = self.account.sign_transaction(tx)
        return await w3.eth.send_raw_transaction(signed_tx.raw_transaction)


def wallet_from_settings(settings: Settings) -> Wallet:
    """Local key signer when a private key is configured, provider accounts otherwise."""
    if settings.private_key:
        return LocalAccountWallet(settings.private_key)
    return ProviderWallet()
