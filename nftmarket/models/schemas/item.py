from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from nftmarket.abis import MARKET_ITEM_FIELDS
from nftmarket.models.enums import CreationStatus, GalleryState


class ItemMetadata(BaseModel):
    name: str = Field(examples=["Sunset #1"])
    description: str = Field(examples=["A sunset over the bay"])
    image: str = Field(examples=["https://ipfs.io/ipfs/QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"])


class ListingDraft(BaseModel):
    """Mutable form state for a new item."""
    name: str = ""
    description: str = ""
    price: str = Field(default="", examples=["0.05"])
    file_url: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.description and self.price and self.file_url)

    def to_metadata(self) -> ItemMetadata:
        return ItemMetadata(name=self.name, description=self.description, image=self.file_url)


class CreateItemRequest(BaseModel):
    name: str = Field(examples=["Sunset #1"])
    description: str = Field(examples=["A sunset over the bay"])
    price: str = Field(examples=["0.05"], description="Price in ether")
    file_url: Optional[str] = Field(default=None, description="URL returned by the asset upload")


class MarketItemRecord(BaseModel):
    """MarketItem struct as returned by the marketplace contract."""
    model_config = ConfigDict(populate_by_name=True)

    item_id: int = Field(alias="itemId")
    nft_contract: str = Field(alias="nftContract")
    token_id: int = Field(alias="tokenId")
    seller: str
    owner: str
    price: int = Field(description="Price in wei")
    sold: bool

    @classmethod
    def from_chain(cls, raw: Any) -> "MarketItemRecord":
        """Build from a decoded struct, either positional or keyed by field name."""
        if hasattr(raw, "keys"):
            data = {name: raw[name] for name in MARKET_ITEM_FIELDS}
        else:
            data = dict(zip(MARKET_ITEM_FIELDS, raw))
        return cls(**data)


class MarketItem(BaseModel):
    """Display record: on-chain item joined with its metadata."""
    item_id: int
    token_id: int
    seller: str
    owner: str
    price: str = Field(examples=["0.05"], description="Price in ether")
    sold: bool
    image: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class Gallery(BaseModel):
    state: GalleryState = GalleryState.NOT_LOADED
    items: List[MarketItem] = []

    @computed_field
    @property
    def sold(self) -> List[MarketItem]:
        return [item for item in self.items if item.sold]

    @property
    def is_empty(self) -> bool:
        return self.state == GalleryState.LOADED and not self.items


class ItemCreation(BaseModel):
    status: CreationStatus
    token_id: Optional[int] = None
    metadata_url: Optional[str] = None
    price_wei: Optional[int] = None
    listing_fee: Optional[int] = None
    transaction_hash: Optional[str] = None
