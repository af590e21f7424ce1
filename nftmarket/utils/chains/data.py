# nftmarket/utils/chains/data.py
from .types import Network, NativeCurrency
from nftmarket.utils.types import ChainId

ETHER = NativeCurrency(name="Ether", ticker="ETH", decimals=18)
MATIC = NativeCurrency(name="Matic", ticker="MATIC", decimals=18)

NETWORK_DATA_MAP = {
    "localhost": Network(
        id=ChainId.LOCALHOST,
        name="localhost",
        nativeCurrency=ETHER,
        default_rpc_url="http://127.0.0.1:8545",
    ),
    "goerli": Network(
        id=ChainId.GOERLI,
        name="goerli",
        nativeCurrency=ETHER,
        rpc_env="ETH_RPC_URL",
    ),
    "mainnet": Network(
        id=ChainId.ETH,
        name="mainnet",
        nativeCurrency=ETHER,
        rpc_env="ETH_RPC_URL",
    ),
    "mumbai": Network(
        id=ChainId.MUMBAI,
        name="mumbai",
        nativeCurrency=MATIC,
        rpc_env="POLYGON_RPC_URL",
    ),
    "polygon": Network(
        id=ChainId.POLYGON,
        name="polygon",
        nativeCurrency=MATIC,
        rpc_env="POLYGON_RPC_URL",
    ),
}
