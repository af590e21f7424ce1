import os
from typing import Optional

from .types import Network
from .data import NETWORK_DATA_MAP


def get_network_by_name(name: str) -> Network:
    """Get network data by its hardhat-style name."""
    network = NETWORK_DATA_MAP.get(name.lower())
    if network is None:
        raise ValueError(f"Network {name} not found")
    return network


def get_rpc_url(name: str, override: Optional[str] = None) -> str:
    """Get the RPC URL for a network, preferring an explicit override."""
    if override:
        return override

    network = get_network_by_name(name)
    if network.rpc_env:
        rpc_url = os.getenv(network.rpc_env)
        if not rpc_url:
            raise ValueError(f"{network.rpc_env} not found")
        return rpc_url
    if network.default_rpc_url:
        return network.default_rpc_url
    raise ValueError(f"No RPC endpoint configured for {name}")
