from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from nftmarket.config import Settings, get_settings
from nftmarket.dependencies import get_content_store, get_wallet
from nftmarket.models.schemas.card import CardResponse
from nftmarket.services.base import MarketplaceError
from nftmarket.services.ipfs import IPFSService
from nftmarket.services.market import MarketWorkflow
from nftmarket.services.wallet import Wallet, WalletError

router = APIRouter(tags=["Market"])


class PurchaseResponse(BaseModel):
    item_id: int
    transaction_hash: str
    block_number: int


@router.get("/", response_model=List[CardResponse])
async def get_market_items(
    settings: Settings = Depends(get_settings),
    content_store: IPFSService = Depends(get_content_store),
    wallet: Wallet = Depends(get_wallet),
):
    """Unsold items currently listed on the marketplace."""
    workflow = MarketWorkflow(settings, content_store, wallet)
    try:
        cards = await workflow.cards()
    except WalletError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except MarketplaceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return [CardResponse.from_card(card) for card in cards]


@router.post("/items/{item_id}/purchase", response_model=PurchaseResponse)
async def purchase_item(
    item_id: int,
    settings: Settings = Depends(get_settings),
    content_store: IPFSService = Depends(get_content_store),
    wallet: Wallet = Depends(get_wallet),
):
    workflow = MarketWorkflow(settings, content_store, wallet)
    try:
        cards = await workflow.cards()
        card = next((c for c in cards if c.item_id == item_id), None)
        if card is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
        receipt = await card.purchase()
    except WalletError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except MarketplaceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return PurchaseResponse(
        item_id=item_id,
        transaction_hash=receipt.transaction_hash,
        block_number=receipt.block_number,
    )
