"""Domain service owning claims and their status lifecycle."""

import logging
from typing import List, Optional

from ..errors import (
    AlreadyInitializedError,
    AuthorizationError,
    NotFoundError,
    StatusRegressionError,
    ValidationError,
)
from ..models.claim import CLAIM_FEE, Claim, ClaimStatus, is_status_regression
from ..models.config import ClaimStoreConfig
from ..models.events import EventTopic
from ..ports.asset_transfer import AssetTransfer
from ..ports.ledger import Ledger

logger = logging.getLogger(__name__)

_CONFIG_KEY = ("claims", "config")
_COUNT_KEY = ("claims", "count")


def _claim_key(claim_id: int) -> tuple:
    return ("claims", "claim", claim_id)


class ClaimStore:
    """Domain service for claim submission and lifecycle.

    Status and review-count updates are reserved for the review consensus
    component bound by the admin; first-party actions require the acting
    address to authorize the call.
    """

    def __init__(self, ledger: Ledger, transfers: AssetTransfer, address: str):
        """Initialize service.

        Args:
            ledger: Ledger holding the claim state
            transfers: Asset transfer primitive used to collect fees
            address: Address of this component on the ledger
        """
        self._ledger = ledger
        self._transfers = transfers
        self.address = address

    # Admin

    def initialize(self, admin: str) -> None:
        """Create the configuration record.

        Raises:
            AlreadyInitializedError: If the store was initialized before
        """
        with self._ledger.transaction():
            if self._ledger.has(_CONFIG_KEY):
                raise AlreadyInitializedError("Claim store already initialized")
            self._ledger.set(_CONFIG_KEY, ClaimStoreConfig(admin=admin))
            self._ledger.set(_COUNT_KEY, 0)
        logger.info(f"🔧 Claim store initialized with admin {admin}")

    def set_expert_registry(self, admin: str, expert_registry: str) -> None:
        """Bind the expert registry address."""
        with self._ledger.transaction():
            config = self._require_admin(admin)
            config.expert_registry = expert_registry
            self._ledger.set(_CONFIG_KEY, config)
        logger.info(f"🔗 Claim store bound expert registry {expert_registry}")

    def set_review_consensus(self, admin: str, review_consensus: str) -> None:
        """Bind the review consensus address allowed to update claims."""
        with self._ledger.transaction():
            config = self._require_admin(admin)
            config.review_consensus = review_consensus
            self._ledger.set(_CONFIG_KEY, config)
        logger.info(f"🔗 Claim store bound review consensus {review_consensus}")

    def get_config(self) -> Optional[ClaimStoreConfig]:
        return self._ledger.get(_CONFIG_KEY)

    # Submission

    def submit_claim(
        self,
        submitter: str,
        text: str,
        category: str,
        sources: Optional[List[str]] = None,
    ) -> int:
        """Submit a new claim, charging the submission fee.

        Args:
            submitter: Address of the submitting account
            text: Claim text
            category: Category label
            sources: Ordered supporting sources

        Returns:
            The new claim id

        Raises:
            AuthorizationError: If the submitter did not authorize the call
        """
        with self._ledger.transaction():
            self._ledger.require_auth(submitter)

            config = self.get_config()
            fee = config.claim_fee if config else CLAIM_FEE

            claim_id = self.get_claim_count() + 1
            self._transfers.transfer(submitter, self.address, fee, memo=f"claim fee #{claim_id}")

            claim = Claim(
                id=claim_id,
                submitter=submitter,
                text=text,
                category=category,
                sources=list(sources or []),
                status=ClaimStatus.PENDING,
                stake_pool=fee,
                timestamp=self._ledger.timestamp(),
                review_count=0,
            )
            self._ledger.set(_claim_key(claim_id), claim)
            self._ledger.set(_COUNT_KEY, claim_id)
            self._ledger.publish(EventTopic.CLAIM_SUBMITTED, claim_id)

        logger.info(f"📝 Claim #{claim_id} submitted by {submitter}: {text[:100]}")
        return claim_id

    # Queries

    def get_claim(self, claim_id: int) -> Optional[Claim]:
        return self._ledger.get(_claim_key(claim_id))

    def get_claim_count(self) -> int:
        return self._ledger.get(_COUNT_KEY, 0)

    def get_all_claims(self, start: int = 0, limit: int = 10) -> List[Claim]:
        """Get a page of claims in id order.

        Args:
            start: Zero-based offset into the claim sequence
            limit: Maximum number of claims

        Returns:
            Claims ``start + 1`` up to ``min(start + limit, count)``
        """
        if start < 0 or limit < 0:
            raise ValidationError("Pagination start and limit must be non-negative")

        end = min(start + limit, self.get_claim_count())
        claims = []
        for index in range(start, end):
            claim = self.get_claim(index + 1)
            if claim is not None:
                claims.append(claim)
        return claims

    def get_claims_by_submitter(self, submitter: str) -> List[Claim]:
        """Get every claim submitted by an address, in id order."""
        return [
            claim
            for claim in self.get_all_claims(0, self.get_claim_count())
            if claim.submitter == submitter
        ]

    def get_claims_by_status(self, status: ClaimStatus) -> List[Claim]:
        """Get every claim currently in ``status``, in id order."""
        return [
            claim
            for claim in self.get_all_claims(0, self.get_claim_count())
            if claim.status == status
        ]

    # Partner entry points

    def update_claim_status(self, caller: str, claim_id: int, new_status: ClaimStatus) -> None:
        """Set a claim's status on behalf of review consensus.

        Raises:
            AuthorizationError: If the caller is not the bound review consensus
            NotFoundError: If the claim does not exist
            StatusRegressionError: If the status would move backwards
        """
        with self._ledger.transaction():
            self._require_review_consensus(caller)
            claim = self._require_claim(claim_id)

            if is_status_regression(claim.status, new_status):
                raise StatusRegressionError(
                    f"Claim #{claim_id} cannot move from {claim.status.value} to {new_status.value}"
                )

            previous = claim.status
            claim.status = new_status
            self._ledger.set(_claim_key(claim_id), claim)
            self._ledger.publish(EventTopic.STATUS_UPDATED, claim_id)

        logger.info(f"🔄 Claim #{claim_id} status {previous.value} -> {new_status.value}")

    def increment_review_count(self, caller: str, claim_id: int) -> int:
        """Record one more review; the first one starts the review phase.

        Returns:
            The updated review count
        """
        with self._ledger.transaction():
            self._require_review_consensus(caller)
            claim = self._require_claim(claim_id)

            claim.review_count += 1
            started_review = claim.status == ClaimStatus.PENDING
            if started_review:
                claim.status = ClaimStatus.UNDER_REVIEW
            self._ledger.set(_claim_key(claim_id), claim)
            if started_review:
                self._ledger.publish(EventTopic.STATUS_UPDATED, claim_id)

        if started_review:
            logger.info(f"🔎 Claim #{claim_id} is now under review")

        return claim.review_count

    def add_to_stake_pool(self, caller: str, claim_id: int, amount: int) -> int:
        """Top up a claim's stake pool.

        Any authorized caller may contribute.

        Returns:
            The updated stake pool
        """
        if amount < 0:
            raise ValidationError(f"Stake pool contribution must be non-negative, got {amount}")

        with self._ledger.transaction():
            self._ledger.require_auth(caller)
            claim = self._require_claim(claim_id)

            self._transfers.transfer(caller, self.address, amount, memo=f"stake pool #{claim_id}")
            claim.stake_pool += amount
            self._ledger.set(_claim_key(claim_id), claim)

        logger.info(f"💰 Claim #{claim_id} stake pool +{amount} from {caller} (now {claim.stake_pool})")
        return claim.stake_pool

    # Helpers

    def _require_claim(self, claim_id: int) -> Claim:
        claim = self.get_claim(claim_id)
        if claim is None:
            raise NotFoundError(f"Claim #{claim_id} not found")
        return claim

    def _require_admin(self, admin: str) -> ClaimStoreConfig:
        self._ledger.require_auth(admin)
        config = self.get_config()
        if config is None:
            raise NotFoundError("Claim store not initialized")
        if admin != config.admin:
            raise AuthorizationError("Not authorized")
        return config

    def _require_review_consensus(self, caller: str) -> None:
        self._ledger.require_auth(caller)
        config = self.get_config()
        if config is None or config.review_consensus is None:
            raise AuthorizationError("Review consensus contract not set")
        if caller != config.review_consensus:
            raise AuthorizationError("Only review consensus contract can update claims")
