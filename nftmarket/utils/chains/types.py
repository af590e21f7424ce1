from typing import Optional
from pydantic import BaseModel

from nftmarket.utils.types import ChainId, ChainType


class NativeCurrency(BaseModel):
    name: str
    ticker: str
    decimals: int


class Network(BaseModel):
    id: ChainId
    name: str
    chain_type: ChainType = ChainType.EVM
    nativeCurrency: NativeCurrency
    # Environment variable holding the RPC endpoint, None for a fixed local node
    rpc_env: Optional[str] = None
    default_rpc_url: Optional[str] = None
