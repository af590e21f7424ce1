from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from nftmarket.utils.chains.queries import get_rpc_url

GZIP_MINIMUM_SIZE = 1000


class Settings(BaseSettings):
    # IPFS (Infura-style HTTP API, optional project credentials)
    ipfs_api_url: str = "https://ipfs.infura.io:5001/api/v0"
    ipfs_gateway_url: str = "https://ipfs.io/ipfs"
    ipfs_project_id: Optional[str] = None
    ipfs_project_secret: Optional[str] = None

    # Contracts
    nft_address: str = ""
    nft_market_address: str = ""

    # Chain
    network: str = "localhost"
    rpc_url: Optional[str] = None
    private_key: Optional[str] = None
    receipt_poll_interval: float = 1.0

    # HTTP
    http_timeout: float = 30.0

    # Logging
    log_dir: str = "logs"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def has_ipfs_credentials(self) -> bool:
        return bool(self.ipfs_project_id and self.ipfs_project_secret)

    def get_rpc_url(self) -> str:
        return get_rpc_url(self.network, self.rpc_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
