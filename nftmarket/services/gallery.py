import asyncio
from typing import Any, Iterable, List, Optional

from nftmarket.config import Settings
from nftmarket.models.enums import GalleryState
from nftmarket.models.schemas.item import Gallery, MarketItem, MarketItemRecord
from nftmarket.utils.logging import get_logger
from nftmarket.utils.units import format_units
from .chain import ChainSession, acquire_session
from .ipfs import IPFSService
from .wallet import Wallet

logger = get_logger(__name__)


async def build_display_item(
    session: ChainSession, content_store: IPFSService, record: MarketItemRecord
) -> MarketItem:
    """Join one on-chain item with the metadata its token URI points to."""
    token_uri = await session.call_read(session.token, "tokenURI", record.token_id)
    metadata = await content_store.fetch_json(token_uri)
    return MarketItem(
        item_id=record.item_id,
        token_id=record.token_id,
        seller=record.seller,
        owner=record.owner,
        price=format_units(record.price),
        sold=record.sold,
        image=metadata.get("image"),
        name=metadata.get("name"),
        description=metadata.get("description"),
    )


async def load_display_items(
    session: ChainSession, content_store: IPFSService, raw_items: Iterable[Any]
) -> List[MarketItem]:
    """
    Build display records for all items concurrently.

    Contract order is kept. The first failing fetch fails the whole load and
    the remaining fetches are cancelled before the error propagates.
    """
    records = [MarketItemRecord.from_chain(raw) for raw in raw_items]
    tasks = [
        asyncio.ensure_future(build_display_item(session, content_store, record))
        for record in records
    ]
    try:
        items = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return list(items)


class GalleryWorkflow:
    """Items created by the connected account, split into all and sold."""

    def __init__(
        self,
        settings: Settings,
        content_store: IPFSService,
        wallet: Optional[Wallet] = None,
    ):
        self.settings = settings
        self.content_store = content_store
        self.wallet = wallet
        self.gallery = Gallery()

    async def load(self) -> Gallery:
        session = await acquire_session(self.settings, self.wallet)
        try:
            raw_items = await session.call_read(session.market, "fetchItemsCreated")
            items = await load_display_items(session, self.content_store, raw_items)
        finally:
            await session.close()

        self.gallery = Gallery(state=GalleryState.LOADED, items=items)
        logger.info(
            f"Loaded {len(self.gallery.items)} created items for {session.account} "
            f"({len(self.gallery.sold)} sold)"
        )
        return self.gallery
