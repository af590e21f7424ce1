import inspect
from typing import Any, Callable, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from .item import MarketItem

CURRENCY_LABEL = "ETH"


class NFTCard(BaseModel):
    """One item's card. Actionable only when a purchase handler is bound."""
    model_config = ConfigDict(frozen=True)

    item_id: int
    image: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price_label: str = Field(examples=["0.05 ETH"])
    on_purchase: Optional[Callable[[], Any]] = Field(default=None, exclude=True)

    @computed_field
    @property
    def purchasable(self) -> bool:
        return self.on_purchase is not None

    async def purchase(self) -> Any:
        if self.on_purchase is None:
            raise ValueError(f"Card for item {self.item_id} has no purchase action")
        result = self.on_purchase()
        if inspect.isawaitable(result):
            result = await result
        return result


def render_card(item: MarketItem, on_purchase: Optional[Callable[[], Any]] = None) -> NFTCard:
    return NFTCard(
        item_id=item.item_id,
        image=item.image,
        name=item.name,
        description=item.description,
        price_label=f"{item.price} {CURRENCY_LABEL}",
        on_purchase=on_purchase,
    )


class CardResponse(BaseModel):
    item_id: int
    image: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price_label: str
    purchasable: bool

    @classmethod
    def from_card(cls, card: NFTCard) -> "CardResponse":
        return cls(**card.model_dump())
