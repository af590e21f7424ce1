from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from nftmarket.config import Settings, get_settings
from nftmarket.dependencies import get_content_store
from nftmarket.services.creation import CreateItemWorkflow
from nftmarket.services.ipfs import IPFSService

router = APIRouter(prefix="/assets", tags=["Assets"])


class AssetUploadResponse(BaseModel):
    file_url: str


@router.post("/", response_model=AssetUploadResponse)
async def upload_asset(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
    content_store: IPFSService = Depends(get_content_store),
):
    """Upload the item's media to IPFS. The returned URL goes into the item draft."""
    workflow = CreateItemWorkflow(settings, content_store)
    data = await file.read()
    file_url = await workflow.upload_asset(
        data,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )
    if file_url is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Error uploading file")

    return AssetUploadResponse(file_url=file_url)
