"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends

from ..domain.ports.ledger import Ledger
from ..domain.services.claim_store import ClaimStore
from ..domain.services.expert_registry import ExpertRegistry
from ..domain.services.review_consensus import ReviewConsensus
from .ledger.asset_transfer import LedgerAssetTransfer
from .ledger.memory_ledger import InMemoryLedger
from .settings import ProtocolSettings

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, settings: Optional[ProtocolSettings] = None, ledger: Optional[Ledger] = None):
        """Initialize service container.

        Args:
            settings: Deployment settings (read from the environment by default)
            ledger: Ledger to host the components (a fresh in-memory one by default)
        """
        self.settings = settings or ProtocolSettings.from_env()
        self._services: Dict[str, Any] = {}
        self._setup_services(ledger or InMemoryLedger())

    def _setup_services(self, ledger: Ledger):
        """Setup all services and bind them to each other."""
        logger.info("🔧 Setting up service container...")
        settings = self.settings

        transfers = LedgerAssetTransfer(ledger)
        claim_store = ClaimStore(ledger, transfers, settings.claim_store_address)
        expert_registry = ExpertRegistry(ledger, transfers, settings.expert_registry_address)
        review_consensus = ReviewConsensus(
            ledger,
            transfers,
            settings.review_consensus_address,
            claim_store,
            expert_registry,
        )

        admin = settings.admin_address
        with ledger.transaction(), ledger.authorize(admin):
            if claim_store.get_config() is None:
                claim_store.initialize(admin)
                claim_store.set_expert_registry(admin, expert_registry.address)
                claim_store.set_review_consensus(admin, review_consensus.address)
            if expert_registry.get_config() is None:
                expert_registry.initialize(admin)
            if review_consensus.get_config() is None:
                review_consensus.initialize(
                    admin,
                    min_reviews_for_consensus=settings.min_reviews_for_consensus,
                    reward_percentage=settings.reward_percentage,
                    slash_percentage=settings.slash_percentage,
                )
                review_consensus.set_claim_registry(admin, claim_store.address)
                review_consensus.set_expert_registry(admin, expert_registry.address)

        self._services = {
            'ledger': ledger,
            'asset_transfer': transfers,
            'claim_store': claim_store,
            'expert_registry': expert_registry,
            'review_consensus': review_consensus,
        }

        logger.info("✅ Service container setup completed")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_ledger(self) -> Ledger:
        return self.get('ledger')

    def get_asset_transfer(self) -> LedgerAssetTransfer:
        return self.get('asset_transfer')

    def get_claim_store(self) -> ClaimStore:
        return self.get('claim_store')

    def get_expert_registry(self) -> ExpertRegistry:
        return self.get('expert_registry')

    def get_review_consensus(self) -> ReviewConsensus:
        return self.get('review_consensus')


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_ledger(container: ServiceContainer = Depends(get_service_container)) -> Ledger:
    """FastAPI dependency for the ledger."""
    return container.get_ledger()


def get_asset_transfer(container: ServiceContainer = Depends(get_service_container)) -> LedgerAssetTransfer:
    """FastAPI dependency for the asset transfer primitive."""
    return container.get_asset_transfer()


def get_claim_store(container: ServiceContainer = Depends(get_service_container)) -> ClaimStore:
    """FastAPI dependency for the claim store."""
    return container.get_claim_store()


def get_expert_registry(container: ServiceContainer = Depends(get_service_container)) -> ExpertRegistry:
    """FastAPI dependency for the expert registry."""
    return container.get_expert_registry()


def get_review_consensus(container: ServiceContainer = Depends(get_service_container)) -> ReviewConsensus:
    """FastAPI dependency for review consensus."""
    return container.get_review_consensus()
