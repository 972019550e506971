"""Tests for settings and the service container."""

import pytest

from truthstamp.domain.models.config import MIN_REVIEWS_FOR_CONSENSUS
from truthstamp.infrastructure.dependencies import ServiceContainer
from truthstamp.infrastructure.ledger.memory_ledger import InMemoryLedger
from truthstamp.infrastructure.settings import ProtocolSettings


def test_container_binds_components(container, settings):
    """Test every component is initialized and bound to its partners."""
    claim_store = container.get_claim_store()
    expert_registry = container.get_expert_registry()
    review_consensus = container.get_review_consensus()

    claim_config = claim_store.get_config()
    assert claim_config.admin == settings.admin_address
    assert claim_config.review_consensus == review_consensus.address
    assert claim_config.expert_registry == expert_registry.address

    assert expert_registry.get_config().admin == settings.admin_address

    consensus_config = review_consensus.get_config()
    assert consensus_config.claim_registry == claim_store.address
    assert consensus_config.expert_registry == expert_registry.address
    assert consensus_config.min_reviews_for_consensus == MIN_REVIEWS_FOR_CONSENSUS

    assert container.get('ledger') is container.get_ledger()
    assert container.get_asset_transfer().history() == []


def test_unknown_service(container):
    """Test lookups of services the container does not hold."""
    with pytest.raises(KeyError):
        container.get('fact_checker')


def test_container_reuses_initialized_ledger(settings):
    """Test a second container over the same ledger keeps existing state."""
    ledger = InMemoryLedger(clock=lambda: 0)
    first = ServiceContainer(settings=settings, ledger=ledger)
    with ledger.authorize("GSUBMITTER"):
        first.get_claim_store().submit_claim("GSUBMITTER", "Claim", "Science")

    second = ServiceContainer(settings=settings, ledger=ledger)

    assert second.get_claim_store().get_claim_count() == 1
    assert second.get_review_consensus().get_config() == first.get_review_consensus().get_config()


def test_container_applies_settings():
    """Test economic parameters flow from settings into consensus."""
    settings = ProtocolSettings(admin_address="GOPS", min_reviews_for_consensus=5, slash_percentage=20)

    container = ServiceContainer(settings=settings, ledger=InMemoryLedger())

    config = container.get_review_consensus().get_config()
    assert config.admin == "GOPS"
    assert config.min_reviews_for_consensus == 5
    assert config.slash_percentage == 20


def test_settings_from_env(monkeypatch):
    """Test settings are read from TRUTHSTAMP_* variables."""
    monkeypatch.setenv("TRUTHSTAMP_ADMIN_ADDRESS", "GENVADMIN")
    monkeypatch.setenv("TRUTHSTAMP_MIN_REVIEWS", "4")
    monkeypatch.setenv("TRUTHSTAMP_REWARD_PERCENTAGE", "70")
    monkeypatch.setenv("TRUTHSTAMP_LOG_LEVEL", "debug")
    monkeypatch.setenv("TRUTHSTAMP_CORS_ORIGINS", "http://localhost:3000, https://truthstamp.app")

    settings = ProtocolSettings.from_env()

    assert settings.admin_address == "GENVADMIN"
    assert settings.min_reviews_for_consensus == 4
    assert settings.reward_percentage == 70
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://localhost:3000", "https://truthstamp.app"]
