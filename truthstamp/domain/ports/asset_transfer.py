"""Native asset transfer interface."""

from typing import List, Protocol

from ..models.events import TransferRecord


class AssetTransfer(Protocol):
    """Protocol for the opaque payment primitive.

    Amounts are integers in the smallest native unit.
    """

    def transfer(self, source: str, destination: str, amount: int, memo: str = "") -> TransferRecord:
        """Move an amount from one address to another."""
        ...

    def balance_of(self, address: str) -> int:
        """Get the net balance moved in or out of an address."""
        ...

    def history(self) -> List[TransferRecord]:
        """Get all recorded transfers in order."""
        ...
