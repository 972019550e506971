"""Tests for tier and band derivation."""

import pytest

from truthstamp.domain.models.claim import ClaimStatus, is_status_regression
from truthstamp.domain.models.expert import (
    MIN_STAKE_GENERAL,
    MIN_STAKE_PROFESSIONAL,
    MIN_STAKE_SPECIALIZED,
    Expert,
    ExpertLevel,
    ReputationLevel,
    expert_level_for_stake,
    registration_level,
    reputation_level_for_points,
)


@pytest.mark.parametrize(
    "stake, expected",
    [
        (MIN_STAKE_GENERAL - 1, None),
        (MIN_STAKE_GENERAL, ExpertLevel.GENERAL),
        (MIN_STAKE_SPECIALIZED - 1, ExpertLevel.GENERAL),
        (MIN_STAKE_SPECIALIZED, ExpertLevel.SPECIALIZED),
        (MIN_STAKE_PROFESSIONAL - 1, ExpertLevel.SPECIALIZED),
        (MIN_STAKE_PROFESSIONAL, ExpertLevel.PROFESSIONAL),
    ],
)
def test_registration_level_boundaries(stake, expected):
    """Test tier thresholds are inclusive at the lower bound."""
    assert registration_level(stake) == expected


def test_existing_expert_never_drops_below_general():
    """Test slashed stakes below the registration minimum stay General."""
    assert expert_level_for_stake(0) == ExpertLevel.GENERAL
    assert expert_level_for_stake(MIN_STAKE_GENERAL - 1) == ExpertLevel.GENERAL


@pytest.mark.parametrize(
    "points, expected",
    [
        (0, ReputationLevel.SEEDLING),
        (99, ReputationLevel.SEEDLING),
        (100, ReputationLevel.SPROUT),
        (499, ReputationLevel.SPROUT),
        (500, ReputationLevel.ESTABLISHED),
        (999, ReputationLevel.ESTABLISHED),
        (1000, ReputationLevel.EXPERT),
        (4999, ReputationLevel.EXPERT),
        (5000, ReputationLevel.MASTER),
        (1_000_000, ReputationLevel.MASTER),
    ],
)
def test_reputation_bands(points, expected):
    """Test reputation bands at every boundary."""
    assert reputation_level_for_points(points) == expected


def test_apply_reputation_clamps_and_counts():
    """Test reputation changes clamp at zero and update counters."""
    expert = Expert(
        address="GEXPERT",
        name="Expert",
        staked_amount=MIN_STAKE_GENERAL,
        expert_level=ExpertLevel.GENERAL,
        registered_at=0,
    )

    expert.apply_reputation(10, True)
    expert.apply_reputation(-20, False)

    assert expert.reputation_points == 0
    assert expert.reputation_level == ReputationLevel.SEEDLING
    assert expert.total_reviews == 2
    assert expert.correct_reviews == 1
    assert expert.accuracy == 50


def test_accuracy_is_zero_without_reviews():
    """Test accuracy for an expert with no settled reviews."""
    expert = Expert(
        address="GEXPERT",
        name="Expert",
        staked_amount=MIN_STAKE_GENERAL,
        expert_level=ExpertLevel.GENERAL,
        registered_at=0,
    )
    assert expert.accuracy == 0


def test_status_regression_order():
    """Test the claim lifecycle partial order."""
    assert is_status_regression(ClaimStatus.UNDER_REVIEW, ClaimStatus.PENDING)
    assert is_status_regression(ClaimStatus.TRUE, ClaimStatus.UNDER_REVIEW)
    assert not is_status_regression(ClaimStatus.PENDING, ClaimStatus.TRUE)
    assert not is_status_regression(ClaimStatus.TRUE, ClaimStatus.FALSE)
    assert ClaimStatus.FALSE.is_final
    assert not ClaimStatus.UNDER_REVIEW.is_final
