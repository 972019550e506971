"""Journal-backed implementation of the asset transfer primitive."""

import logging
from typing import List

from ...domain.errors import ValidationError
from ...domain.models.events import TransferRecord
from ...domain.ports.asset_transfer import AssetTransfer
from ...domain.ports.ledger import Ledger

logger = logging.getLogger(__name__)

_JOURNAL_KEY = ("asset_transfer", "journal")


class LedgerAssetTransfer(AssetTransfer):
    """Records transfers in ledger storage.

    The journal lives in the ledger, so a transfer made by an operation that
    later fails is rolled back with it. Funds are not enforced: balances are
    net amounts moved, settlement of real funds is left to the host.
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger

    def transfer(self, source: str, destination: str, amount: int, memo: str = "") -> TransferRecord:
        if amount < 0:
            raise ValidationError(f"Transfer amount must be non-negative, got {amount}")

        with self._ledger.transaction():
            journal: List[TransferRecord] = self._ledger.get(_JOURNAL_KEY, [])
            record = TransferRecord(
                sequence=len(journal) + 1,
                source=source,
                destination=destination,
                amount=amount,
                memo=memo,
                timestamp=self._ledger.timestamp(),
            )
            journal.append(record)
            self._ledger.set(_JOURNAL_KEY, journal)

        logger.debug(f"💸 Transfer {amount} from {source} to {destination} ({memo})")
        return record

    def balance_of(self, address: str) -> int:
        balance = 0
        for record in self.history():
            if record.destination == address:
                balance += record.amount
            if record.source == address:
                balance -= record.amount
        return balance

    def history(self) -> List[TransferRecord]:
        return self._ledger.get(_JOURNAL_KEY, [])
