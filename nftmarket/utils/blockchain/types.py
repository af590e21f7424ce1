from typing import Any, List, NamedTuple, Optional, Tuple


class DecodedEvent(NamedTuple):
    """A receipt log decoded against a known contract ABI.

    Logs that match no known event keep their position with `name=None` and
    empty `args`, so indices line up with the receipt's log order.
    """
    name: Optional[str]
    address: str
    args: Tuple[Any, ...]


class Receipt(NamedTuple):
    transaction_hash: str
    block_number: int
    status: int
    events: List[DecodedEvent]

    @property
    def succeeded(self) -> bool:
        return self.status == 1
