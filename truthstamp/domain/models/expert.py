"""Domain model for staked experts and their tiers."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

# Minimum stakes in stroops, inclusive lower bounds
MIN_STAKE_GENERAL = 1_000_000_000  # 100 XLM
MIN_STAKE_SPECIALIZED = 5_000_000_000  # 500 XLM
MIN_STAKE_PROFESSIONAL = 10_000_000_000  # 1000 XLM

# Reputation band lower bounds
SPROUT_POINTS = 100
ESTABLISHED_POINTS = 500
EXPERT_POINTS = 1000
MASTER_POINTS = 5000


class ExpertLevel(str, Enum):
    """Staking tier of an expert."""

    GENERAL = "general"
    SPECIALIZED = "specialized"
    PROFESSIONAL = "professional"


class ReputationLevel(str, Enum):
    """Reputation tier derived from reputation points."""

    SEEDLING = "seedling"  # 0-99 points
    SPROUT = "sprout"  # 100-499 points
    ESTABLISHED = "established"  # 500-999 points
    EXPERT = "expert"  # 1000-4999 points
    MASTER = "master"  # 5000+ points


def registration_level(stake_amount: int) -> Optional[ExpertLevel]:
    """Tier granted for a registration stake, or None when below the minimum."""
    if stake_amount < MIN_STAKE_GENERAL:
        return None
    return expert_level_for_stake(stake_amount)


def expert_level_for_stake(stake_amount: int) -> ExpertLevel:
    """Tier for a registered expert's current stake.

    General is the floor tier: an expert slashed below the registration
    minimum keeps it.
    """
    if stake_amount >= MIN_STAKE_PROFESSIONAL:
        return ExpertLevel.PROFESSIONAL
    if stake_amount >= MIN_STAKE_SPECIALIZED:
        return ExpertLevel.SPECIALIZED
    return ExpertLevel.GENERAL


def reputation_level_for_points(points: int) -> ReputationLevel:
    """Reputation band for a point total."""
    if points >= MASTER_POINTS:
        return ReputationLevel.MASTER
    elif points >= EXPERT_POINTS:
        return ReputationLevel.EXPERT
    elif points >= ESTABLISHED_POINTS:
        return ReputationLevel.ESTABLISHED
    elif points >= SPROUT_POINTS:
        return ReputationLevel.SPROUT
    else:
        return ReputationLevel.SEEDLING


class Expert(BaseModel):
    """Profile of a staked reviewer."""

    address: str = Field(..., description="Expert account address")
    name: str = Field(..., description="Display name")
    bio: str = Field(default="", description="Short biography")
    expertise_categories: List[str] = Field(default_factory=list, description="Categories of expertise")
    staked_amount: int = Field(..., ge=0, description="Collateral in stroops")
    expert_level: ExpertLevel = Field(..., description="Tier derived from staked_amount")
    reputation_points: int = Field(default=0, ge=0, description="Reputation score, floor 0")
    reputation_level: ReputationLevel = Field(
        default=ReputationLevel.SEEDLING,
        description="Band derived from reputation_points",
    )
    total_reviews: int = Field(default=0, ge=0, description="Settled reviews")
    correct_reviews: int = Field(default=0, ge=0, description="Settled reviews matching consensus")
    total_earnings: int = Field(default=0, ge=0, description="Rewards earned in stroops")
    registered_at: int = Field(..., ge=0, description="Ledger time of registration")

    def apply_stake(self, staked_amount: int) -> None:
        """Set the stake and recompute the tier."""
        self.staked_amount = staked_amount
        self.expert_level = expert_level_for_stake(staked_amount)

    def apply_reputation(self, points_change: int, was_correct: bool) -> None:
        """Apply a signed reputation change and recompute the band."""
        self.reputation_points = max(0, self.reputation_points + points_change)
        self.total_reviews += 1
        if was_correct:
            self.correct_reviews += 1
        self.reputation_level = reputation_level_for_points(self.reputation_points)

    @property
    def accuracy(self) -> int:
        """Percentage of settled reviews that matched consensus, floored."""
        if self.total_reviews == 0:
            return 0
        return self.correct_reviews * 100 // self.total_reviews
