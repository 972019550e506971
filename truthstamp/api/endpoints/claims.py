"""Claim API endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ...domain.errors import NotFoundError
from ...domain.models.claim import Claim, ClaimStatus
from ...domain.models.review import ConsensusResult, DistributionPlan, Review
from ...domain.ports.ledger import Ledger
from ...domain.services.claim_store import ClaimStore
from ...domain.services.review_consensus import ReviewConsensus
from ...infrastructure.dependencies import get_claim_store, get_ledger, get_review_consensus
from ..identity import get_caller_address

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/claims", tags=["claims"])


class SubmitClaimRequest(BaseModel):
    """Request model for claim submission."""

    text: str = Field(..., min_length=1, description="Claim text")
    category: str = Field(..., description="Category label")
    sources: List[str] = Field(default_factory=list, description="Supporting sources")


class SubmitClaimResponse(BaseModel):
    """Response model for claim submission."""

    claim_id: int
    stake_pool: int


class ClaimListResponse(BaseModel):
    """Response model for a page of claims."""

    total: int
    start: int
    claims: List[Claim]


class StakePoolRequest(BaseModel):
    """Request model for a stake pool contribution."""

    amount: int = Field(..., description="Amount in stroops")


class StakePoolResponse(BaseModel):
    """Response model for a stake pool contribution."""

    claim_id: int
    stake_pool: int


@router.post("", response_model=SubmitClaimResponse, status_code=201)
async def submit_claim(
    request: SubmitClaimRequest,
    caller: str = Depends(get_caller_address),
    ledger: Ledger = Depends(get_ledger),
    claim_store: ClaimStore = Depends(get_claim_store),
) -> SubmitClaimResponse:
    """Submit a claim on behalf of the calling account."""
    with ledger.authorize(caller):
        claim_id = claim_store.submit_claim(caller, request.text, request.category, request.sources)
    claim = claim_store.get_claim(claim_id)
    return SubmitClaimResponse(claim_id=claim_id, stake_pool=claim.stake_pool)


@router.get("", response_model=ClaimListResponse)
async def list_claims(
    start: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=0, le=100),
    status: Optional[ClaimStatus] = Query(default=None),
    claim_store: ClaimStore = Depends(get_claim_store),
) -> ClaimListResponse:
    """List claims in submission order, optionally only those in one status."""
    if status is not None:
        matching = claim_store.get_claims_by_status(status)
        return ClaimListResponse(
            total=len(matching),
            start=start,
            claims=matching[start:start + limit],
        )

    return ClaimListResponse(
        total=claim_store.get_claim_count(),
        start=start,
        claims=claim_store.get_all_claims(start, limit),
    )


@router.get("/by-submitter/{submitter}", response_model=List[Claim])
async def list_claims_by_submitter(
    submitter: str,
    claim_store: ClaimStore = Depends(get_claim_store),
) -> List[Claim]:
    """List the claims submitted by an account."""
    return claim_store.get_claims_by_submitter(submitter)


@router.get("/{claim_id}", response_model=Claim)
async def get_claim(claim_id: int, claim_store: ClaimStore = Depends(get_claim_store)) -> Claim:
    """Get a single claim."""
    claim = claim_store.get_claim(claim_id)
    if claim is None:
        raise NotFoundError(f"Claim #{claim_id} not found")
    return claim


@router.post("/{claim_id}/stake", response_model=StakePoolResponse)
async def add_to_stake_pool(
    claim_id: int,
    request: StakePoolRequest,
    caller: str = Depends(get_caller_address),
    ledger: Ledger = Depends(get_ledger),
    claim_store: ClaimStore = Depends(get_claim_store),
) -> StakePoolResponse:
    """Contribute to a claim's stake pool."""
    with ledger.authorize(caller):
        stake_pool = claim_store.add_to_stake_pool(caller, claim_id, request.amount)
    return StakePoolResponse(claim_id=claim_id, stake_pool=stake_pool)


@router.get("/{claim_id}/reviews", response_model=List[Review])
async def get_claim_reviews(
    claim_id: int,
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> List[Review]:
    """List the reviews of a claim in submission order."""
    return review_consensus.get_claim_reviews(claim_id)


@router.get("/{claim_id}/consensus", response_model=ConsensusResult)
async def get_consensus(
    claim_id: int,
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> ConsensusResult:
    """Get the latest consensus snapshot of a claim."""
    consensus = review_consensus.get_consensus(claim_id)
    if consensus is None:
        raise NotFoundError(f"Consensus not reached for claim #{claim_id}")
    return consensus


@router.post("/{claim_id}/distribute", response_model=DistributionPlan)
async def distribute_rewards(
    claim_id: int,
    caller: str = Depends(get_caller_address),
    ledger: Ledger = Depends(get_ledger),
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> DistributionPlan:
    """Settle a claim's reviews against its consensus (admin only)."""
    logger.info(f"🏁 Distribution requested for claim #{claim_id} by {caller}")
    with ledger.authorize(caller):
        return review_consensus.distribute_rewards(caller, claim_id)
