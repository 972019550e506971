"""Expert API endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...domain.errors import NotFoundError
from ...domain.models.expert import Expert
from ...domain.models.review import Review
from ...domain.ports.ledger import Ledger
from ...domain.services.expert_registry import ExpertRegistry
from ...domain.services.review_consensus import ReviewConsensus
from ...infrastructure.dependencies import get_expert_registry, get_ledger, get_review_consensus
from ..identity import get_caller_address

router = APIRouter(prefix="/experts", tags=["experts"])


class RegisterExpertRequest(BaseModel):
    """Request model for expert registration."""

    name: str = Field(..., min_length=1, description="Display name")
    bio: str = Field(default="", description="Short biography")
    expertise_categories: List[str] = Field(default_factory=list, description="Categories of expertise")
    stake_amount: int = Field(..., description="Initial stake in stroops")


class AddStakeRequest(BaseModel):
    """Request model for additional stake."""

    amount: int = Field(..., description="Amount in stroops")


class AccuracyResponse(BaseModel):
    """Response model for expert accuracy."""

    address: str
    accuracy: int
    total_reviews: int
    correct_reviews: int


class ExpertCountResponse(BaseModel):
    """Response model for the number of registered experts."""

    count: int


@router.post("", response_model=Expert, status_code=201)
async def register_expert(
    request: RegisterExpertRequest,
    caller: str = Depends(get_caller_address),
    ledger: Ledger = Depends(get_ledger),
    expert_registry: ExpertRegistry = Depends(get_expert_registry),
) -> Expert:
    """Register the calling account as an expert."""
    with ledger.authorize(caller):
        expert_registry.register_expert(
            caller,
            request.name,
            request.bio,
            request.expertise_categories,
            request.stake_amount,
        )
    return expert_registry.get_expert(caller)


@router.get("/count", response_model=ExpertCountResponse)
async def get_expert_count(
    expert_registry: ExpertRegistry = Depends(get_expert_registry),
) -> ExpertCountResponse:
    """Get the number of registered experts."""
    return ExpertCountResponse(count=expert_registry.get_expert_count())


@router.get("/{address}", response_model=Expert)
async def get_expert(address: str, expert_registry: ExpertRegistry = Depends(get_expert_registry)) -> Expert:
    """Get an expert profile."""
    expert = expert_registry.get_expert(address)
    if expert is None:
        raise NotFoundError(f"Expert {address} not found")
    return expert


@router.post("/{address}/stake", response_model=Expert)
async def add_stake(
    address: str,
    request: AddStakeRequest,
    caller: str = Depends(get_caller_address),
    ledger: Ledger = Depends(get_ledger),
    expert_registry: ExpertRegistry = Depends(get_expert_registry),
) -> Expert:
    """Add stake to an expert profile; only the expert can authorize it."""
    with ledger.authorize(caller):
        expert_registry.add_stake(address, request.amount)
    return expert_registry.get_expert(address)


@router.get("/{address}/accuracy", response_model=AccuracyResponse)
async def get_accuracy(
    address: str,
    expert_registry: ExpertRegistry = Depends(get_expert_registry),
) -> AccuracyResponse:
    """Get an expert's share of reviews that matched consensus."""
    accuracy = expert_registry.get_accuracy(address)
    expert = expert_registry.get_expert(address)
    return AccuracyResponse(
        address=address,
        accuracy=accuracy,
        total_reviews=expert.total_reviews,
        correct_reviews=expert.correct_reviews,
    )


@router.get("/{address}/reviews", response_model=List[Review])
async def get_expert_reviews(
    address: str,
    review_consensus: ReviewConsensus = Depends(get_review_consensus),
) -> List[Review]:
    """List an expert's reviews in submission order."""
    return review_consensus.get_expert_reviews(address)
