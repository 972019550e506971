"""Domain model for submitted claims."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

# Submission fee in stroops (0.5 XLM)
CLAIM_FEE = 5_000_000


class ClaimStatus(str, Enum):
    """Lifecycle of a claim."""

    PENDING = "pending"  # Submitted, no reviews yet
    UNDER_REVIEW = "under_review"  # At least one review recorded
    TRUE = "true"  # Consensus verdict True
    FALSE = "false"  # Consensus verdict False

    @property
    def rank(self) -> int:
        """Position in the lifecycle partial order."""
        return _STATUS_RANK[self]

    @property
    def is_final(self) -> bool:
        return self.rank == 2


_STATUS_RANK = {
    ClaimStatus.PENDING: 0,
    ClaimStatus.UNDER_REVIEW: 1,
    ClaimStatus.TRUE: 2,
    ClaimStatus.FALSE: 2,
}


def is_status_regression(current: ClaimStatus, new: ClaimStatus) -> bool:
    """Check whether moving from ``current`` to ``new`` goes backwards."""
    return new.rank < current.rank


class Claim(BaseModel):
    """Represents a textual assertion under review."""

    id: int = Field(..., ge=1, description="Sequential claim identifier, starting at 1")
    submitter: str = Field(..., description="Address of the account that submitted the claim")
    text: str = Field(..., description="The claim text to be verified")
    category: str = Field(..., description="Free-form category label")
    sources: List[str] = Field(default_factory=list, description="Ordered supporting sources")
    status: ClaimStatus = Field(default=ClaimStatus.PENDING, description="Lifecycle status")
    stake_pool: int = Field(default=0, ge=0, description="Accumulated stake in stroops")
    timestamp: int = Field(..., ge=0, description="Ledger time of submission")
    review_count: int = Field(default=0, ge=0, description="Number of reviews recorded")

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "example": {
                "id": 1,
                "submitter": "GDX7SUBMITTERADDRESS",
                "text": "Global temperatures rose 1.1C since pre-industrial times.",
                "category": "Environment",
                "sources": ["https://www.ipcc.ch/report/ar6/syr/"],
                "status": "pending",
                "stake_pool": 5_000_000,
                "timestamp": 1_700_000_000,
                "review_count": 0,
            }
        }
