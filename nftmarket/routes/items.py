from fastapi import APIRouter, Depends, HTTPException, status

from nftmarket.config import Settings, get_settings
from nftmarket.dependencies import get_content_store, get_wallet
from nftmarket.models.enums import CreationStatus
from nftmarket.models.schemas.item import CreateItemRequest, ItemCreation, ListingDraft
from nftmarket.services.base import MarketplaceError
from nftmarket.services.creation import CreateItemWorkflow, OrphanedTokenError
from nftmarket.services.ipfs import IPFSService
from nftmarket.services.wallet import Wallet, WalletError

router = APIRouter(prefix="/items", tags=["Items"])


@router.post("/", response_model=ItemCreation)
async def create_item(
    req: CreateItemRequest,
    settings: Settings = Depends(get_settings),
    content_store: IPFSService = Depends(get_content_store),
    wallet: Wallet = Depends(get_wallet),
):
    """Upload metadata, mint the token and list it at the requested price."""
    workflow = CreateItemWorkflow(settings, content_store, wallet)
    workflow.draft = ListingDraft(**req.model_dump())

    try:
        result = await workflow.create_market()
    except OrphanedTokenError as e:
        # Minted but not listed, the caller needs the token id to recover
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": e.message, "creation": e.creation.model_dump(mode="json")},
        )
    except WalletError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except MarketplaceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    if result.status == CreationStatus.ABORTED:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="name, description, a valid price and file_url are required",
        )
    if result.status == CreationStatus.UPLOAD_FAILED:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Error uploading metadata")

    return result
