"""Domain models for ledger events and asset transfers."""

from enum import Enum

from pydantic import BaseModel, Field


class EventTopic(str, Enum):
    """Kinds of notifications published for off-system observers."""

    CLAIM_SUBMITTED = "claim_submitted"
    STATUS_UPDATED = "status_updated"
    EXPERT_REGISTERED = "expert_registered"
    REPUTATION_UPDATED = "reputation_updated"
    STAKE_ADDED = "stake_added"
    STAKE_SLASHED = "stake_slashed"
    REVIEW_SUBMITTED = "review_submitted"
    CONSENSUS_REACHED = "consensus_reached"
    REWARDS_DISTRIBUTED = "rewards_distributed"


class ProtocolEvent(BaseModel):
    """A published notification keyed by operation kind."""

    sequence: int = Field(..., ge=1, description="Publication order")
    topic: EventTopic
    subject: str = Field(..., description="Entity id or address the event is about")
    timestamp: int = Field(..., ge=0)


class TransferRecord(BaseModel):
    """A native-asset movement recorded by the transfer primitive."""

    sequence: int = Field(..., ge=1)
    source: str
    destination: str
    amount: int = Field(..., ge=0)
    memo: str = ""
    timestamp: int = Field(..., ge=0)
