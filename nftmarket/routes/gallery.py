from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from nftmarket.config import Settings, get_settings
from nftmarket.dependencies import get_content_store, get_wallet
from nftmarket.models.enums import GalleryState
from nftmarket.models.schemas.card import CardResponse, render_card
from nftmarket.services.base import MarketplaceError
from nftmarket.services.gallery import GalleryWorkflow
from nftmarket.services.ipfs import IPFSService
from nftmarket.services.wallet import Wallet, WalletError

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


class DashboardResponse(BaseModel):
    state: GalleryState
    created: List[CardResponse]
    sold: List[CardResponse]
    empty: bool


@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    settings: Settings = Depends(get_settings),
    content_store: IPFSService = Depends(get_content_store),
    wallet: Wallet = Depends(get_wallet),
):
    """Items created by the connected account and the subset already sold."""
    workflow = GalleryWorkflow(settings, content_store, wallet)
    try:
        gallery = await workflow.load()
    except WalletError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except MarketplaceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return DashboardResponse(
        state=gallery.state,
        created=[CardResponse.from_card(render_card(item)) for item in gallery.items],
        sold=[CardResponse.from_card(render_card(item)) for item in gallery.sold],
        empty=gallery.is_empty,
    )
