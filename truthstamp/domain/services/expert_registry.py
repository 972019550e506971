"""Domain service owning expert profiles, staking tiers and reputation."""

import logging
from typing import List, Optional

from ..errors import (
    AlreadyInitializedError,
    AlreadyRegisteredError,
    NotFoundError,
    StakeTooLowError,
    ValidationError,
)
from ..models.config import ExpertRegistryConfig
from ..models.events import EventTopic
from ..models.expert import Expert, ReputationLevel, registration_level
from ..ports.asset_transfer import AssetTransfer
from ..ports.ledger import Ledger

logger = logging.getLogger(__name__)

_CONFIG_KEY = ("experts", "config")
_COUNT_KEY = ("experts", "count")


def _expert_key(address: str) -> tuple:
    return ("experts", "expert", address)


class ExpertRegistry:
    """Domain service for expert registration, staking and reputation.

    ``update_reputation``, ``add_earnings`` and ``slash_stake`` carry no
    caller check; they are meant to be driven by review consensus
    distribution only and are not exposed over the HTTP API.
    """

    def __init__(self, ledger: Ledger, transfers: AssetTransfer, address: str):
        """Initialize service.

        Args:
            ledger: Ledger holding the expert state
            transfers: Asset transfer primitive used to collect stakes
            address: Address of this component on the ledger
        """
        self._ledger = ledger
        self._transfers = transfers
        self.address = address

    def initialize(self, admin: str) -> None:
        """Create the configuration record.

        Raises:
            AlreadyInitializedError: If the registry was initialized before
        """
        with self._ledger.transaction():
            if self._ledger.has(_CONFIG_KEY):
                raise AlreadyInitializedError("Expert registry already initialized")
            self._ledger.set(_CONFIG_KEY, ExpertRegistryConfig(admin=admin))
            self._ledger.set(_COUNT_KEY, 0)
        logger.info(f"🔧 Expert registry initialized with admin {admin}")

    def get_config(self) -> Optional[ExpertRegistryConfig]:
        return self._ledger.get(_CONFIG_KEY)

    def register_expert(
        self,
        expert: str,
        name: str,
        bio: str,
        expertise_categories: List[str],
        stake_amount: int,
    ) -> bool:
        """Register an address as an expert with an initial stake.

        Args:
            expert: Expert address
            name: Display name
            bio: Short biography
            expertise_categories: Categories of expertise
            stake_amount: Initial stake in stroops

        Returns:
            True once registered

        Raises:
            AuthorizationError: If the expert did not authorize the call
            AlreadyRegisteredError: If the address is already registered
            StakeTooLowError: If the stake is below the General threshold
        """
        with self._ledger.transaction():
            self._ledger.require_auth(expert)

            if self._ledger.has(_expert_key(expert)):
                raise AlreadyRegisteredError(f"Expert {expert} already registered")

            expert_level = registration_level(stake_amount)
            if expert_level is None:
                raise StakeTooLowError(f"Stake amount too low: {stake_amount}")

            self._transfers.transfer(expert, self.address, stake_amount, memo="registration stake")

            profile = Expert(
                address=expert,
                name=name,
                bio=bio,
                expertise_categories=list(expertise_categories),
                staked_amount=stake_amount,
                expert_level=expert_level,
                reputation_points=0,
                reputation_level=ReputationLevel.SEEDLING,
                registered_at=self._ledger.timestamp(),
            )
            self._ledger.set(_expert_key(expert), profile)
            self._ledger.set(_COUNT_KEY, self.get_expert_count() + 1)
            self._ledger.publish(EventTopic.EXPERT_REGISTERED, expert)

        logger.info(f"🎓 Expert {expert} registered at {expert_level.value} level with stake {stake_amount}")
        return True

    def get_expert(self, expert: str) -> Optional[Expert]:
        return self._ledger.get(_expert_key(expert))

    def is_expert(self, expert: str) -> bool:
        return self._ledger.has(_expert_key(expert))

    def get_expert_count(self) -> int:
        return self._ledger.get(_COUNT_KEY, 0)

    def update_reputation(self, expert: str, points_change: int, was_correct: bool) -> Expert:
        """Apply a settled review to an expert's reputation.

        Points are floor-clamped at zero; the reputation band is recomputed.
        """
        with self._ledger.transaction():
            profile = self._require_expert(expert)
            profile.apply_reputation(points_change, was_correct)
            self._ledger.set(_expert_key(expert), profile)
            self._ledger.publish(EventTopic.REPUTATION_UPDATED, expert)

        logger.info(
            f"⭐ Expert {expert} reputation {points_change:+d} -> "
            f"{profile.reputation_points} ({profile.reputation_level.value})"
        )
        return profile

    def add_earnings(self, expert: str, amount: int) -> int:
        """Credit rewards to an expert's earnings total."""
        if amount < 0:
            raise ValidationError(f"Earnings must be non-negative, got {amount}")

        with self._ledger.transaction():
            profile = self._require_expert(expert)
            profile.total_earnings += amount
            self._ledger.set(_expert_key(expert), profile)

        return profile.total_earnings

    def slash_stake(self, expert: str, amount: int) -> int:
        """Remove up to ``amount`` from an expert's stake.

        Returns:
            The amount actually slashed, never more than the current stake
        """
        if amount < 0:
            raise ValidationError(f"Slash amount must be non-negative, got {amount}")

        with self._ledger.transaction():
            profile = self._require_expert(expert)
            slashed = min(amount, profile.staked_amount)
            profile.apply_stake(profile.staked_amount - slashed)
            self._ledger.set(_expert_key(expert), profile)
            self._ledger.publish(EventTopic.STAKE_SLASHED, expert)

        logger.info(f"🔪 Expert {expert} slashed {slashed} (stake now {profile.staked_amount})")
        return slashed

    def add_stake(self, expert: str, amount: int) -> int:
        """Increase an expert's stake and recompute the tier.

        Returns:
            The updated stake
        """
        if amount < 0:
            raise ValidationError(f"Stake must be non-negative, got {amount}")

        with self._ledger.transaction():
            self._ledger.require_auth(expert)
            profile = self._require_expert(expert)

            self._transfers.transfer(expert, self.address, amount, memo="additional stake")
            profile.apply_stake(profile.staked_amount + amount)
            self._ledger.set(_expert_key(expert), profile)
            self._ledger.publish(EventTopic.STAKE_ADDED, expert)

        logger.info(f"📈 Expert {expert} staked {amount} more, level {profile.expert_level.value}")
        return profile.staked_amount

    def get_accuracy(self, expert: str) -> int:
        """Get the floored percentage of correct settled reviews."""
        return self._require_expert(expert).accuracy

    def _require_expert(self, expert: str) -> Expert:
        profile = self.get_expert(expert)
        if profile is None:
            raise NotFoundError(f"Expert {expert} not found")
        return profile
