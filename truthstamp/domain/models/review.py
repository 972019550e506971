"""Domain models for expert reviews and consensus outcomes."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .claim import ClaimStatus


class Verdict(str, Enum):
    """Binary review outcome."""

    TRUE = "true"
    FALSE = "false"

    def to_status(self) -> ClaimStatus:
        """Claim status matching this verdict."""
        return ClaimStatus.TRUE if self is Verdict.TRUE else ClaimStatus.FALSE


class Review(BaseModel):
    """One expert's stake-backed verdict on one claim."""

    id: int = Field(..., ge=1, description="Review identifier, monotonic across all claims")
    claim_id: int = Field(..., ge=1, description="Reviewed claim")
    expert: str = Field(..., description="Reviewer address")
    verdict: Verdict = Field(..., description="Reviewer verdict")
    reasoning: str = Field(default="", description="Reviewer reasoning")
    confidence: int = Field(..., ge=0, le=100, description="Reviewer confidence (0-100)")
    stake_amount: int = Field(..., ge=0, description="Stake committed to this review in stroops")
    timestamp: int = Field(..., ge=0, description="Ledger time of submission")
    rewarded: bool = Field(default=False, description="Whether distribution has settled this review")


class ConsensusResult(BaseModel):
    """Stake-weighted verdict snapshot for a claim."""

    claim_id: int = Field(..., ge=1)
    final_verdict: Verdict
    total_stake_true: int = Field(..., ge=0)
    total_stake_false: int = Field(..., ge=0)
    confidence_percentage: int = Field(..., ge=0, le=100, description="Winning stake share, floored")
    is_finalized: bool = True
    review_count: int = Field(..., ge=0, description="Reviews covered by this snapshot")
    computed_at: int = Field(..., ge=0)

    @property
    def total_stake(self) -> int:
        return self.total_stake_true + self.total_stake_false


class Settlement(BaseModel):
    """Payout or penalty owed for a single review."""

    review_id: int
    expert: str
    is_correct: bool
    reward: int = Field(default=0, ge=0)
    slash: int = Field(default=0, ge=0)
    reputation_delta: int


class DistributionPlan(BaseModel):
    """Result of the reward distribution arithmetic for a claim."""

    claim_id: int
    final_verdict: Verdict
    total_winning_stake: int = Field(..., ge=0)
    total_losing_stake: int = Field(..., ge=0)
    total_reward_pool: int = Field(..., ge=0)
    settlements: List[Settlement] = Field(default_factory=list, description="Reviews settled by this run")

    @property
    def total_rewarded(self) -> int:
        return sum(s.reward for s in self.settlements)

    @property
    def total_slashed(self) -> int:
        return sum(s.slash for s in self.settlements)
