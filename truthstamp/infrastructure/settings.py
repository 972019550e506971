"""Protocol configuration management."""

import logging
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..domain.models.config import (
    MIN_REVIEWS_FOR_CONSENSUS,
    REWARD_PERCENTAGE,
    SLASH_PERCENTAGE,
)

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ADDRESS = "admin"


class ProtocolSettings(BaseModel):
    """Deployment configuration for the three protocol components."""

    admin_address: str = Field(default=DEFAULT_ADMIN_ADDRESS, description="Admin of every component")
    claim_store_address: str = Field(default="claim-registry", description="Ledger address of the claim store")
    expert_registry_address: str = Field(default="expert-registry", description="Ledger address of the expert registry")
    review_consensus_address: str = Field(default="review-consensus", description="Ledger address of review consensus")
    min_reviews_for_consensus: int = Field(default=MIN_REVIEWS_FOR_CONSENSUS, ge=1)
    reward_percentage: int = Field(default=REWARD_PERCENTAGE, ge=0, le=100)
    slash_percentage: int = Field(default=SLASH_PERCENTAGE, ge=0, le=100)
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "ProtocolSettings":
        """Create configuration from environment variables (and a .env file)."""
        load_dotenv()

        admin_address = os.getenv("TRUTHSTAMP_ADMIN_ADDRESS", DEFAULT_ADMIN_ADDRESS)
        if admin_address == DEFAULT_ADMIN_ADDRESS:
            logger.warning("⚠️ TRUTHSTAMP_ADMIN_ADDRESS not set - using the default admin address")

        cors_origins = os.getenv("TRUTHSTAMP_CORS_ORIGINS", "*")

        return cls(
            admin_address=admin_address,
            claim_store_address=os.getenv("TRUTHSTAMP_CLAIM_STORE_ADDRESS", "claim-registry"),
            expert_registry_address=os.getenv("TRUTHSTAMP_EXPERT_REGISTRY_ADDRESS", "expert-registry"),
            review_consensus_address=os.getenv("TRUTHSTAMP_REVIEW_CONSENSUS_ADDRESS", "review-consensus"),
            min_reviews_for_consensus=int(os.getenv("TRUTHSTAMP_MIN_REVIEWS", MIN_REVIEWS_FOR_CONSENSUS)),
            reward_percentage=int(os.getenv("TRUTHSTAMP_REWARD_PERCENTAGE", REWARD_PERCENTAGE)),
            slash_percentage=int(os.getenv("TRUTHSTAMP_SLASH_PERCENTAGE", SLASH_PERCENTAGE)),
            log_level=os.getenv("TRUTHSTAMP_LOG_LEVEL", "INFO").upper(),
            cors_origins=[origin.strip() for origin in cors_origins.split(",") if origin.strip()],
        )
