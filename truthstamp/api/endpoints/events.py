"""Event and transfer feed endpoints for off-system observers."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from ...domain.models.events import EventTopic, ProtocolEvent, TransferRecord
from ...domain.ports.asset_transfer import AssetTransfer
from ...domain.ports.ledger import Ledger
from ...infrastructure.dependencies import get_asset_transfer, get_ledger

router = APIRouter(tags=["events"])


@router.get("/events", response_model=List[ProtocolEvent])
async def list_events(
    topic: Optional[EventTopic] = None,
    after: int = 0,
    ledger: Ledger = Depends(get_ledger),
) -> List[ProtocolEvent]:
    """List published events, optionally by topic and after a sequence number."""
    return [event for event in ledger.events(topic) if event.sequence > after]


@router.get("/transfers", response_model=List[TransferRecord])
async def list_transfers(transfers: AssetTransfer = Depends(get_asset_transfer)) -> List[TransferRecord]:
    """List recorded native-asset transfers."""
    return transfers.history()
