from enum import Enum


class ChainId(int, Enum):
    ETH = 1
    GOERLI = 5
    POLYGON = 137
    LOCALHOST = 31337
    MUMBAI = 80001


class ChainType(str, Enum):
    EVM = "EVM"
