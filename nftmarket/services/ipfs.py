import asyncio
import json
from typing import Any, Dict, Optional, Union

import aiohttp

from nftmarket.config import Settings
from nftmarket.utils.logging import get_logger
from .base import MarketplaceError

logger = get_logger(__name__)


class ContentStoreError(MarketplaceError):
    """Raised when an upload to the content-addressed store fails."""

    pass


class MetadataFetchError(MarketplaceError):
    """Raised when a metadata document cannot be fetched or parsed."""

    pass


class IPFSService:
    """Client for an IPFS HTTP API with gateway URL construction.

    Configuration is passed at construction time; nothing is cached locally.
    """

    def __init__(
        self,
        api_url: str,
        gateway_url: str,
        project_id: Optional[str] = None,
        project_secret: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the IPFS service.

        Args:
            api_url: Base URL of the HTTP API, e.g. https://ipfs.infura.io:5001/api/v0
            gateway_url: Public gateway prefix, e.g. https://ipfs.io/ipfs
            project_id: Optional project id for authenticated uploads
            project_secret: Optional project secret for authenticated uploads
            timeout: Total timeout in seconds for each HTTP request
        """
        self.api_url = api_url.rstrip("/")
        self.gateway_url = gateway_url.rstrip("/")
        self.auth = (
            aiohttp.BasicAuth(project_id, project_secret)
            if project_id and project_secret
            else None
        )
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "IPFSService":
        if settings.has_ipfs_credentials:
            credentials = (settings.ipfs_project_id, settings.ipfs_project_secret)
        else:
            logger.info("No IPFS project credentials configured, uploading anonymously")
            credentials = (None, None)
        return cls(
            api_url=settings.ipfs_api_url,
            gateway_url=settings.ipfs_gateway_url,
            project_id=credentials[0],
            project_secret=credentials[1],
            timeout=settings.http_timeout,
        )

    async def __aenter__(self):
        """Context manager entry."""

        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        if self.session and not self.session.closed:
            await self.session.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self.session

    def gateway_url_for(self, cid: str) -> str:
        """Build the retrieval URL for a content identifier."""
        return f"{self.gateway_url}/{cid}"

    async def _add(self, data: bytes, filename: str, content_type: str) -> str:
        form = aiohttp.FormData()
        form.add_field("file", data, filename=filename, content_type=content_type)

        try:
            async with self._get_session().post(
                f"{self.api_url}/add", data=form, auth=self.auth
            ) as response:
                if response.status in (401, 403):
                    logger.error(f"IPFS rejected credentials uploading {filename}: {response.status}")
                    raise ContentStoreError(
                        "IPFS authentication failed", detail=await response.text()
                    )
                response.raise_for_status()
                result = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            logger.error(f"Failed to upload {filename} to IPFS: {str(e)}")
            raise ContentStoreError(f"Upload failed: {str(e)}") from e

        if not isinstance(result, dict):
            logger.error(f"Unexpected IPFS response uploading {filename}: {result!r}")
            raise ContentStoreError("IPFS response is not a JSON object", detail=str(result))

        cid = result.get("Hash") or result.get("path") or result.get("Path")
        if not cid:
            raise ContentStoreError("IPFS response has no content identifier", detail=str(result))

        return cid

    async def upload(
        self,
        data: bytes,
        filename: Optional[str] = None,
        content_type: str = "application/octet-stream",
    ) -> str:
        """
        Upload a binary asset and return its gateway URL.

        Raises:
            ContentStoreError: On network, HTTP or authentication failure
        """
        logger.info(f"Uploading asset {filename or '<unnamed>'} ({len(data)} bytes)")
        cid = await self._add(data, filename or "asset", content_type)
        url = self.gateway_url_for(cid)
        logger.info(f"Asset uploaded: {url}")
        return url

    async def upload_json(self, document: Union[Dict[str, Any], Any]) -> str:
        """
        Serialize a JSON document, upload it and return its gateway URL.

        Pydantic models are dumped before serialization.

        Raises:
            ContentStoreError: On network, HTTP or authentication failure
        """
        if hasattr(document, "model_dump"):
            document = document.model_dump(mode="json")
        data = json.dumps(document).encode()
        cid = await self._add(data, "metadata.json", "application/json")
        url = self.gateway_url_for(cid)
        logger.info(f"Metadata uploaded: {url}")
        return url

    async def fetch_json(self, url: str) -> Dict[str, Any]:
        """
        Fetch a metadata document.

        Raises:
            MetadataFetchError: If the request fails or the body is not a JSON object
        """
        try:
            async with self._get_session().get(url) as response:
                response.raise_for_status()
                document = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            logger.error(f"Failed to fetch metadata from {url}: {str(e)}")
            raise MetadataFetchError(f"Failed to fetch metadata: {str(e)}", detail=url) from e

        if not isinstance(document, dict):
            raise MetadataFetchError("Metadata document is not a JSON object", detail=url)
        return document

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
