from __future__ import annotations

import os
import tempfile

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "nftmarket-test-logs"))

import pytest

from nftmarket.config import Settings
from nftmarket.services.ipfs import ContentStoreError, MetadataFetchError
from nftmarket.utils.blockchain.types import DecodedEvent, Receipt

TOKEN_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
MARKET_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
GATEWAY = "https://ipfs.io/ipfs"


def mint_receipt(token_id: int, tx_hash: str = "0xmint") -> Receipt:
    return Receipt(
        transaction_hash=tx_hash,
        block_number=1,
        status=1,
        events=[
            DecodedEvent(name="Transfer", address=TOKEN_ADDRESS, args=(ZERO_ADDRESS, ACCOUNT, token_id)),
            DecodedEvent(name="ApprovalForAll", address=TOKEN_ADDRESS, args=(ACCOUNT, MARKET_ADDRESS, True)),
        ],
    )


def plain_receipt(tx_hash: str = "0xlist") -> Receipt:
    return Receipt(transaction_hash=tx_hash, block_number=2, status=1, events=[])


def chain_item(item_id, token_id, price, sold=False, seller=ACCOUNT, owner=ZERO_ADDRESS):
    """MarketItem struct as web3 returns it: a positional tuple."""
    return (item_id, TOKEN_ADDRESS, token_id, seller, owner, price, sold)


class FakeContentStore:
    def __init__(
        self,
        cids: list[str] | None = None,
        documents: dict[str, dict] | None = None,
        fail_upload: bool = False,
        fail_json_upload: bool = False,
    ) -> None:
        self._cids = list(cids or [])
        self.documents = dict(documents or {})
        self.fail_upload = fail_upload
        self.fail_json_upload = fail_json_upload
        self.uploads: list[tuple[bytes, str | None]] = []
        self.json_uploads: list[dict] = []
        self.fetched: list[str] = []

    def _next_url(self) -> str:
        return f"{GATEWAY}/{self._cids.pop(0)}"

    async def upload(self, data, filename=None, content_type="application/octet-stream"):
        if self.fail_upload:
            raise ContentStoreError("Upload failed: connection reset")
        self.uploads.append((data, filename))
        return self._next_url()

    async def upload_json(self, document):
        if self.fail_json_upload:
            raise ContentStoreError("Upload failed: 401")
        if hasattr(document, "model_dump"):
            document = document.model_dump(mode="json")
        self.json_uploads.append(document)
        url = self._next_url()
        self.documents[url] = document
        return url

    async def fetch_json(self, url):
        self.fetched.append(url)
        if url not in self.documents:
            raise MetadataFetchError("Failed to fetch metadata: 404", detail=url)
        return self.documents[url]


class FakeSession:
    """Stands in for ChainSession; contract handles are plain names."""

    def __init__(self, reads: dict | None = None, writes: dict | None = None) -> None:
        self.token = "token"
        self.market = "market"
        self.token_address = TOKEN_ADDRESS
        self.market_address = MARKET_ADDRESS
        self.account = ACCOUNT
        self.reads = dict(reads or {})
        self.writes = dict(writes or {})
        self.calls: list[tuple] = []
        self.closed = False

    async def call_read(self, contract, method, *args):
        self.calls.append(("read", contract, method, args, None))
        value = self.reads[(contract, method)]
        if callable(value):
            value = value(*args)
        if isinstance(value, Exception):
            raise value
        return value

    async def call_write(self, contract, method, *args, value=None, timeout=None):
        self.calls.append(("write", contract, method, args, value))
        result = self.writes[method]
        if isinstance(result, list):
            result = result.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self):
        self.closed = True

    def chain_calls(self, method: str | None = None) -> list[tuple]:
        return [c for c in self.calls if method is None or c[2] == method]


class SessionRecorder:
    """Replacement for `acquire_session` that hands out a prepared session."""

    def __init__(self, session: FakeSession, error: Exception | None = None) -> None:
        self.session = session
        self.error = error
        self.acquired = 0

    async def __call__(self, settings, wallet=None):
        self.acquired += 1
        if self.error is not None:
            raise self.error
        return self.session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        nft_address=TOKEN_ADDRESS,
        nft_market_address=MARKET_ADDRESS,
        ipfs_gateway_url=GATEWAY,
        receipt_poll_interval=0.01,
    )
