import inspect
from typing import Any, Callable, Optional

from nftmarket.config import Settings
from nftmarket.models.enums import CreationStatus
from nftmarket.models.schemas.item import ItemCreation, ListingDraft
from nftmarket.utils.blockchain.evm import extract_minted_token_id
from nftmarket.utils.logging import get_logger
from nftmarket.utils.units import parse_units
from .base import MarketplaceError
from .chain import acquire_session
from .ipfs import ContentStoreError, IPFSService
from .wallet import Wallet

logger = get_logger(__name__)

LANDING_PATH = "/"


class OrphanedTokenError(MarketplaceError):
    """Raised when a token was minted but listing it on the marketplace failed.

    The token stays minted and unlisted; `creation` records its id.
    """
    def __init__(self, message: str, creation: ItemCreation):
        self.creation = creation
        super().__init__(message, detail=f"token_id={creation.token_id}")


class CreateItemWorkflow:
    """Upload an asset, mint it and list it on the marketplace."""

    def __init__(
        self,
        settings: Settings,
        content_store: IPFSService,
        wallet: Optional[Wallet] = None,
        navigate: Optional[Callable[[str], Any]] = None,
    ):
        self.settings = settings
        self.content_store = content_store
        self.wallet = wallet
        self.navigate = navigate
        self.draft = ListingDraft()
        self.uploading = False

    async def upload_asset(
        self,
        data: bytes,
        filename: Optional[str] = None,
        content_type: str = "application/octet-stream",
    ) -> Optional[str]:
        """
        Upload the selected file and remember its URL on the draft.

        On failure the error is logged, the draft goes back to having no
        file and None is returned. The user has to pick the file again.
        """
        self.uploading = True
        try:
            url = await self.content_store.upload(data, filename=filename, content_type=content_type)
        except ContentStoreError as e:
            logger.error(f"Error uploading file: {e.message}")
            self.draft.file_url = None
            return None
        finally:
            self.uploading = False

        self.draft.file_url = url
        return url

    async def create_market(self) -> ItemCreation:
        """
        Upload metadata for the draft, mint the token and list it.

        Returns ABORTED without touching the network when the draft is
        incomplete, and UPLOAD_FAILED when the metadata upload fails.

        Raises:
            WalletError: If the wallet is missing or refuses
            TransactionError: If minting fails
            OrphanedTokenError: If listing fails after a successful mint
        """
        draft = self.draft
        if not draft.is_complete:
            logger.debug("Draft incomplete, nothing to create")
            return ItemCreation(status=CreationStatus.ABORTED)

        try:
            price_wei = parse_units(draft.price)
        except ValueError as e:
            logger.warning(f"Invalid price {draft.price!r}: {str(e)}")
            return ItemCreation(status=CreationStatus.ABORTED)

        try:
            metadata_url = await self.content_store.upload_json(draft.to_metadata())
        except ContentStoreError as e:
            logger.error(f"Error uploading metadata: {e.message}")
            return ItemCreation(status=CreationStatus.UPLOAD_FAILED)

        return await self.create_sale(metadata_url, price_wei)

    async def create_sale(self, metadata_url: str, price_wei: int) -> ItemCreation:
        """Mint a token for `metadata_url` and list it at `price_wei`."""
        try:
            session = await acquire_session(self.settings, self.wallet)
        except MarketplaceError as e:
            logger.error(f"Error connecting wallet: {e.message}")
            raise

        try:
            mint_receipt = await session.call_write(session.token, "createToken", metadata_url)
            token_id = extract_minted_token_id(mint_receipt)
            logger.info(f"Minted token {token_id} with metadata {metadata_url}")

            minted = ItemCreation(
                status=CreationStatus.MINTED,
                token_id=token_id,
                metadata_url=metadata_url,
                price_wei=price_wei,
                transaction_hash=mint_receipt.transaction_hash,
            )

            try:
                # Read fresh for every listing, the fee can change between listings
                listing_fee = int(await session.call_read(session.market, "getListingPrice"))
                listing_receipt = await session.call_write(
                    session.market,
                    "createMarketItem",
                    session.token_address,
                    token_id,
                    price_wei,
                    value=listing_fee,
                )
            except MarketplaceError as e:
                logger.error(f"Token {token_id} minted but not listed: {e.message}")
                raise OrphanedTokenError(
                    f"Token {token_id} was minted but listing failed: {e.message}",
                    creation=minted,
                ) from e
        except OrphanedTokenError:
            raise
        except MarketplaceError as e:
            logger.error(f"Error creating item: {e.message}")
            raise
        finally:
            await session.close()

        logger.info(f"Listed token {token_id} for {price_wei} wei (fee {listing_fee})")
        created = minted.model_copy(
            update={
                "status": CreationStatus.LISTED,
                "listing_fee": listing_fee,
                "transaction_hash": listing_receipt.transaction_hash,
            }
        )
        await self._navigate(LANDING_PATH)
        return created

    async def _navigate(self, path: str):
        if self.navigate is None:
            return
        result = self.navigate(path)
        if inspect.isawaitable(result):
            await result
