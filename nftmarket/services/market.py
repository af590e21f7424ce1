from functools import partial
from typing import List, Optional

from nftmarket.config import Settings
from nftmarket.models.schemas.card import NFTCard, render_card
from nftmarket.models.schemas.item import MarketItem
from nftmarket.utils.blockchain.types import Receipt
from nftmarket.utils.logging import get_logger
from nftmarket.utils.units import parse_units
from .chain import acquire_session
from .gallery import load_display_items
from .ipfs import IPFSService
from .wallet import Wallet

logger = get_logger(__name__)


class MarketWorkflow:
    """Landing view: unsold items on the marketplace and their purchase."""

    def __init__(
        self,
        settings: Settings,
        content_store: IPFSService,
        wallet: Optional[Wallet] = None,
    ):
        self.settings = settings
        self.content_store = content_store
        self.wallet = wallet

    async def load(self) -> List[MarketItem]:
        session = await acquire_session(self.settings, self.wallet)
        try:
            raw_items = await session.call_read(session.market, "fetchMarketItems")
            items = await load_display_items(session, self.content_store, raw_items)
        finally:
            await session.close()

        logger.info(f"Loaded {len(items)} market items")
        return items

    async def purchase(self, item: MarketItem, timeout: Optional[float] = None) -> Receipt:
        """
        Buy an item, paying its listed price.

        Raises:
            WalletError: If the wallet is missing or refuses
            TransactionError: If the sale reverts or times out
        """
        price_wei = parse_units(item.price)
        session = await acquire_session(self.settings, self.wallet)
        try:
            receipt = await session.call_write(
                session.market,
                "createMarketSale",
                session.token_address,
                item.item_id,
                value=price_wei,
                timeout=timeout,
            )
        finally:
            await session.close()

        logger.info(f"Purchased item {item.item_id} (token {item.token_id}) for {item.price}")
        return receipt

    async def cards(self) -> List[NFTCard]:
        items = await self.load()
        return [render_card(item, on_purchase=partial(self.purchase, item)) for item in items]
