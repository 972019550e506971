"""Review API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...domain.errors import NotFoundError
from ...domain.models.review import ConsensusResult, Review, Verdict
from ...domain.ports.ledger import Ledger
from ...domain.services.review_consensus import ReviewConsensus
from ...infrastructure.dependencies import get_ledger, get_review_consensus
from ..identity import get_caller_address

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


class SubmitReviewRequest(BaseModel):
    """Request model for review submission."""

    claim_id: int = Field(..., description="Reviewed claim")
    verdict: Verdict = Field(..., description="true or false")
    reasoning: str = Field(default="", description="Reviewer reasoning")
    confidence: int = Field(..., description="Confidence between 0 and 100")
    stake_amount: int = Field(..., description="Stake committed to the review in stroops")


class SubmitReviewResponse(BaseModel):
    """Response model for review submission."""

    review_id: int
    consensus: Optional[ConsensusResult] = None


class ReviewCountResponse(BaseModel):
    """Response model for the total number of reviews."""

    count: int


@router.post("", response_model=SubmitReviewResponse, status_code=201)
async def submit_review(
    request: SubmitReviewRequest,
    caller: str = Depends(get_caller_address),
    ledger: Ledger = Depends(get_ledger),
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> SubmitReviewResponse:
    """Submit a review on behalf of the calling expert."""
    with ledger.authorize(caller):
        review_id = review_consensus.submit_review(
            caller,
            request.claim_id,
            request.verdict,
            request.reasoning,
            request.confidence,
            request.stake_amount,
        )
    return SubmitReviewResponse(
        review_id=review_id,
        consensus=review_consensus.get_consensus(request.claim_id),
    )


@router.get("/count", response_model=ReviewCountResponse)
async def get_review_count(
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> ReviewCountResponse:
    """Get the total number of reviews."""
    return ReviewCountResponse(count=review_consensus.get_review_count())


@router.get("/{review_id}", response_model=Review)
async def get_review(
    review_id: int,
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> Review:
    """Get a single review."""
    review = review_consensus.get_review(review_id)
    if review is None:
        raise NotFoundError(f"Review #{review_id} not found")
    return review
