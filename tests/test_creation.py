from __future__ import annotations

import pytest

from conftest import (
    GATEWAY,
    TOKEN_ADDRESS,
    FakeContentStore,
    FakeSession,
    SessionRecorder,
    mint_receipt,
    plain_receipt,
)
from nftmarket.models.enums import CreationStatus
from nftmarket.models.schemas.item import ListingDraft
from nftmarket.services import creation
from nftmarket.services.chain import TransactionRevertedError
from nftmarket.services.creation import CreateItemWorkflow, OrphanedTokenError
from nftmarket.services.wallet import WalletRejectedError
from nftmarket.utils.units import parse_units

LISTING_FEE = 1_000_000_000_000_000


def _session(listing_fee=LISTING_FEE, list_result=None, mint_result=None) -> FakeSession:
    return FakeSession(
        reads={("market", "getListingPrice"): listing_fee},
        writes={
            "createToken": mint_result or mint_receipt(7),
            "createMarketItem": list_result or plain_receipt(),
        },
    )


def _workflow(settings, store, navigated=None) -> CreateItemWorkflow:
    return CreateItemWorkflow(
        settings,
        store,
        navigate=(navigated.append if navigated is not None else None),
    )


@pytest.mark.asyncio
async def test_end_to_end_creation(monkeypatch, settings):
    store = FakeContentStore(cids=["cid1", "cid2"])
    session = _session()
    recorder = SessionRecorder(session)
    monkeypatch.setattr(creation, "acquire_session", recorder)
    navigated: list[str] = []

    workflow = _workflow(settings, store, navigated)
    file_url = await workflow.upload_asset(b"\x89PNG", filename="a.png")
    assert file_url == f"{GATEWAY}/cid1"

    workflow.draft.name = "A"
    workflow.draft.description = "d"
    workflow.draft.price = "0.05"
    result = await workflow.create_market()

    assert store.json_uploads == [{"name": "A", "description": "d", "image": f"{GATEWAY}/cid1"}]
    assert session.chain_calls("createToken")[0][3] == (f"{GATEWAY}/cid2",)

    listing = session.chain_calls("createMarketItem")
    assert listing == [
        ("write", "market", "createMarketItem", (TOKEN_ADDRESS, 7, parse_units("0.05")), LISTING_FEE)
    ]

    assert result.status == CreationStatus.LISTED
    assert result.token_id == 7
    assert isinstance(result.token_id, int)
    assert result.metadata_url == f"{GATEWAY}/cid2"
    assert result.listing_fee == LISTING_FEE
    assert result.transaction_hash == "0xlist"
    assert navigated == ["/"]
    assert session.closed


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "draft",
    [
        ListingDraft(name="", description="d", price="1", file_url=f"{GATEWAY}/cid1"),
        ListingDraft(name="A", description="", price="1", file_url=f"{GATEWAY}/cid1"),
        ListingDraft(name="A", description="d", price="", file_url=f"{GATEWAY}/cid1"),
        ListingDraft(name="A", description="d", price="1", file_url=None),
    ],
)
async def test_incomplete_draft_makes_no_calls(monkeypatch, settings, draft):
    store = FakeContentStore(cids=["cid2"])
    recorder = SessionRecorder(_session())
    monkeypatch.setattr(creation, "acquire_session", recorder)

    workflow = _workflow(settings, store)
    workflow.draft = draft
    result = await workflow.create_market()

    assert result.status == CreationStatus.ABORTED
    assert recorder.acquired == 0
    assert recorder.session.calls == []
    assert store.json_uploads == []


@pytest.mark.asyncio
async def test_invalid_price_aborts_before_upload(monkeypatch, settings):
    store = FakeContentStore(cids=["cid2"])
    recorder = SessionRecorder(_session())
    monkeypatch.setattr(creation, "acquire_session", recorder)

    workflow = _workflow(settings, store)
    workflow.draft = ListingDraft(name="A", description="d", price="abc", file_url=f"{GATEWAY}/cid1")
    result = await workflow.create_market()

    assert result.status == CreationStatus.ABORTED
    assert store.json_uploads == []
    assert recorder.acquired == 0


@pytest.mark.asyncio
async def test_listing_fee_is_read_for_every_listing(monkeypatch, settings):
    fees = iter([LISTING_FEE, 2 * LISTING_FEE])
    session = FakeSession(
        reads={("market", "getListingPrice"): lambda: next(fees)},
        writes={
            "createToken": [mint_receipt(1), mint_receipt(2)],
            "createMarketItem": plain_receipt(),
        },
    )
    monkeypatch.setattr(creation, "acquire_session", SessionRecorder(session))

    workflow = _workflow(settings, FakeContentStore(cids=["m1", "m2"]))
    workflow.draft = ListingDraft(name="A", description="d", price="1", file_url=f"{GATEWAY}/cid1")
    first = await workflow.create_market()
    second = await workflow.create_market()

    values = [call[4] for call in session.chain_calls("createMarketItem")]
    assert values == [LISTING_FEE, 2 * LISTING_FEE]
    assert (first.listing_fee, second.listing_fee) == (LISTING_FEE, 2 * LISTING_FEE)
    assert [call[3][1] for call in session.chain_calls("createMarketItem")] == [1, 2]


@pytest.mark.asyncio
async def test_listing_revert_after_mint_surfaces_orphaned_token(monkeypatch, settings):
    revert = TransactionRevertedError("createMarketItem reverted: Price must be at least 1 wei")
    session = _session(list_result=revert)
    monkeypatch.setattr(creation, "acquire_session", SessionRecorder(session))
    navigated: list[str] = []

    workflow = _workflow(settings, FakeContentStore(cids=["cid2"]), navigated)
    workflow.draft = ListingDraft(name="A", description="d", price="1", file_url=f"{GATEWAY}/cid1")

    with pytest.raises(OrphanedTokenError) as exc_info:
        await workflow.create_market()

    assert exc_info.value.__cause__ is revert
    assert exc_info.value.creation.status == CreationStatus.MINTED
    assert exc_info.value.creation.token_id == 7
    assert len(session.chain_calls("createMarketItem")) == 1
    assert navigated == []
    assert session.closed


@pytest.mark.asyncio
async def test_mint_failure_propagates_without_listing(monkeypatch, settings):
    session = _session(mint_result=TransactionRevertedError("createToken reverted"))
    monkeypatch.setattr(creation, "acquire_session", SessionRecorder(session))

    workflow = _workflow(settings, FakeContentStore(cids=["cid2"]))
    workflow.draft = ListingDraft(name="A", description="d", price="1", file_url=f"{GATEWAY}/cid1")

    with pytest.raises(TransactionRevertedError):
        await workflow.create_market()

    assert session.chain_calls("getListingPrice") == []
    assert session.chain_calls("createMarketItem") == []


@pytest.mark.asyncio
async def test_wallet_rejection_propagates(monkeypatch, settings):
    recorder = SessionRecorder(_session(), error=WalletRejectedError("User rejected the connection request"))
    monkeypatch.setattr(creation, "acquire_session", recorder)

    workflow = _workflow(settings, FakeContentStore(cids=["cid2"]))
    workflow.draft = ListingDraft(name="A", description="d", price="1", file_url=f"{GATEWAY}/cid1")

    with pytest.raises(WalletRejectedError):
        await workflow.create_market()
    assert recorder.session.calls == []


@pytest.mark.asyncio
async def test_asset_upload_failure_resets_state(settings):
    workflow = _workflow(settings, FakeContentStore(fail_upload=True))
    workflow.draft.file_url = f"{GATEWAY}/old"

    assert await workflow.upload_asset(b"data") is None
    assert workflow.draft.file_url is None
    assert workflow.uploading is False


@pytest.mark.asyncio
async def test_metadata_upload_failure_skips_chain(monkeypatch, settings):
    recorder = SessionRecorder(_session())
    monkeypatch.setattr(creation, "acquire_session", recorder)

    workflow = _workflow(settings, FakeContentStore(fail_json_upload=True))
    workflow.draft = ListingDraft(name="A", description="d", price="1", file_url=f"{GATEWAY}/cid1")
    result = await workflow.create_market()

    assert result.status == CreationStatus.UPLOAD_FAILED
    assert recorder.acquired == 0
