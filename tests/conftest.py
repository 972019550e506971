"""Test configuration and common fixtures."""

from typing import Callable

import pytest

from truthstamp.domain.models.expert import MIN_STAKE_GENERAL
from truthstamp.domain.services.claim_store import ClaimStore
from truthstamp.domain.services.expert_registry import ExpertRegistry
from truthstamp.domain.services.review_consensus import ReviewConsensus
from truthstamp.infrastructure.dependencies import ServiceContainer
from truthstamp.infrastructure.ledger.asset_transfer import LedgerAssetTransfer
from truthstamp.infrastructure.ledger.memory_ledger import InMemoryLedger
from truthstamp.infrastructure.settings import ProtocolSettings

NOW = 1_700_000_000
ADMIN = "GADMIN"
SUBMITTER = "GSUBMITTER"
ALICE = "GALICE"
BOB = "GBOB"
CAROL = "GCAROL"


@pytest.fixture
def settings() -> ProtocolSettings:
    """Provide default settings with a known admin."""
    return ProtocolSettings(admin_address=ADMIN)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Provide a ledger with a fixed clock that requires explicit authorization."""
    return InMemoryLedger(clock=lambda: NOW)


@pytest.fixture
def container(settings: ProtocolSettings, ledger: InMemoryLedger) -> ServiceContainer:
    """Provide fully initialized and bound protocol components."""
    return ServiceContainer(settings=settings, ledger=ledger)


@pytest.fixture
def transfers(container: ServiceContainer) -> LedgerAssetTransfer:
    return container.get_asset_transfer()


@pytest.fixture
def claim_store(container: ServiceContainer) -> ClaimStore:
    return container.get_claim_store()


@pytest.fixture
def expert_registry(container: ServiceContainer) -> ExpertRegistry:
    return container.get_expert_registry()


@pytest.fixture
def review_consensus(container: ServiceContainer) -> ReviewConsensus:
    return container.get_review_consensus()


@pytest.fixture
def submit_claim(ledger: InMemoryLedger, claim_store: ClaimStore) -> Callable[..., int]:
    """Submit a claim as an authorized account."""

    def _submit(submitter: str = SUBMITTER, text: str = "The Eiffel Tower is 330m tall", category: str = "Science") -> int:
        with ledger.authorize(submitter):
            return claim_store.submit_claim(submitter, text, category, ["https://www.toureiffel.paris"])

    return _submit


@pytest.fixture
def register_expert(ledger: InMemoryLedger, expert_registry: ExpertRegistry) -> Callable[..., None]:
    """Register an expert as an authorized account."""

    def _register(address: str, stake_amount: int = MIN_STAKE_GENERAL, categories=("Science",)) -> None:
        with ledger.authorize(address):
            expert_registry.register_expert(address, f"Expert {address}", "Fact checker", list(categories), stake_amount)

    return _register


@pytest.fixture
def submit_review(ledger: InMemoryLedger, review_consensus: ReviewConsensus) -> Callable[..., int]:
    """Submit a review as an authorized expert."""

    def _submit(expert: str, claim_id: int, verdict, stake_amount: int, confidence: int = 80) -> int:
        with ledger.authorize(expert):
            return review_consensus.submit_review(expert, claim_id, verdict, "My analysis", confidence, stake_amount)

    return _submit
