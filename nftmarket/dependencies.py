from typing import AsyncIterator

from fastapi import Depends, HTTPException, status

from nftmarket.config import Settings, get_settings
from nftmarket.services.ipfs import IPFSService
from nftmarket.services.wallet import Wallet, WalletError, wallet_from_settings


def get_wallet(settings: Settings = Depends(get_settings)) -> Wallet:
    try:
        return wallet_from_settings(settings)
    except WalletError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)


async def get_content_store(settings: Settings = Depends(get_settings)) -> AsyncIterator[IPFSService]:
    async with IPFSService.from_settings(settings) as content_store:
        yield content_store
