"""Persistent configuration records created when a component is initialized."""

from typing import Optional

from pydantic import BaseModel, Field

from .claim import CLAIM_FEE

MIN_REVIEWS_FOR_CONSENSUS = 3
REWARD_PERCENTAGE = 80  # Share of the staked total paid to winners
SLASH_PERCENTAGE = 10  # Share of a losing stake that is slashed
CORRECT_REVIEW_POINTS = 10
INCORRECT_REVIEW_POINTS = -20


class ClaimStoreConfig(BaseModel):
    """Admin and partner bindings of the claim store."""

    admin: str
    claim_fee: int = Field(default=CLAIM_FEE, ge=0)
    expert_registry: Optional[str] = None
    review_consensus: Optional[str] = None


class ExpertRegistryConfig(BaseModel):
    """Admin binding of the expert registry."""

    admin: str


class ConsensusConfig(BaseModel):
    """Admin, partner bindings and economic parameters of review consensus."""

    admin: str
    claim_registry: Optional[str] = None
    expert_registry: Optional[str] = None
    min_reviews_for_consensus: int = Field(default=MIN_REVIEWS_FOR_CONSENSUS, ge=1)
    reward_percentage: int = Field(default=REWARD_PERCENTAGE, ge=0, le=100)
    slash_percentage: int = Field(default=SLASH_PERCENTAGE, ge=0, le=100)
    correct_review_points: int = CORRECT_REVIEW_POINTS
    incorrect_review_points: int = INCORRECT_REVIEW_POINTS
