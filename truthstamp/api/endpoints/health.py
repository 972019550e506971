"""Health check endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Dict[str, object]]:
    """Check the health of all protocol components.

    Returns:
        Initialization state and record counts per component
    """
    claim_store = container.get_claim_store()
    expert_registry = container.get_expert_registry()
    review_consensus = container.get_review_consensus()

    return {
        "claim_store": {
            "initialized": claim_store.get_config() is not None,
            "claims": claim_store.get_claim_count(),
        },
        "expert_registry": {
            "initialized": expert_registry.get_config() is not None,
            "experts": expert_registry.get_expert_count(),
        },
        "review_consensus": {
            "initialized": review_consensus.get_config() is not None,
            "reviews": review_consensus.get_review_count(),
        },
    }
