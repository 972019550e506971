"""Domain service for expert reviews, stake-weighted consensus and payouts."""

import logging
from typing import List, Optional

from ..errors import (
    AlreadyInitializedError,
    AuthorizationError,
    DistributionArithmeticError,
    DuplicateReviewError,
    NotFoundError,
    ValidationError,
)
from ..models.config import ConsensusConfig
from ..models.events import EventTopic
from ..models.review import ConsensusResult, DistributionPlan, Review, Settlement, Verdict
from ..ports.asset_transfer import AssetTransfer
from ..ports.ledger import Ledger
from .claim_store import ClaimStore
from .expert_registry import ExpertRegistry

logger = logging.getLogger(__name__)

_CONFIG_KEY = ("reviews", "config")
_COUNT_KEY = ("reviews", "count")


def _review_key(review_id: int) -> tuple:
    return ("reviews", "review", review_id)


def _claim_reviews_key(claim_id: int) -> tuple:
    return ("reviews", "by_claim", claim_id)


def _expert_reviews_key(expert: str) -> tuple:
    return ("reviews", "by_expert", expert)


def _consensus_key(claim_id: int) -> tuple:
    return ("reviews", "consensus", claim_id)


def compute_consensus(claim_id: int, reviews: List[Review], computed_at: int) -> ConsensusResult:
    """Compute the stake-weighted verdict over a claim's reviews.

    True wins only with strictly more stake; ties and an all-zero stake
    resolve to False.
    """
    total_stake_true = sum(r.stake_amount for r in reviews if r.verdict == Verdict.TRUE)
    total_stake_false = sum(r.stake_amount for r in reviews if r.verdict == Verdict.FALSE)
    total_stake = total_stake_true + total_stake_false

    if total_stake_true > total_stake_false:
        final_verdict, winning_stake = Verdict.TRUE, total_stake_true
    else:
        final_verdict, winning_stake = Verdict.FALSE, total_stake_false

    confidence_percentage = winning_stake * 100 // total_stake if total_stake > 0 else 0

    return ConsensusResult(
        claim_id=claim_id,
        final_verdict=final_verdict,
        total_stake_true=total_stake_true,
        total_stake_false=total_stake_false,
        confidence_percentage=confidence_percentage,
        is_finalized=True,
        review_count=len(reviews),
        computed_at=computed_at,
    )


def plan_distribution(
    consensus: ConsensusResult,
    reviews: List[Review],
    config: ConsensusConfig,
) -> DistributionPlan:
    """Compute rewards, slashes and reputation deltas for unsettled reviews.

    Raises:
        DistributionArithmeticError: If no stake backs the winning verdict
    """
    total_winning_stake = 0
    total_losing_stake = 0
    for review in reviews:
        if review.verdict == consensus.final_verdict:
            total_winning_stake += review.stake_amount
        else:
            total_losing_stake += review.stake_amount

    if total_winning_stake == 0:
        raise DistributionArithmeticError(
            f"Claim #{consensus.claim_id} has no winning stake to distribute against"
        )

    total_reward_pool = (total_winning_stake + total_losing_stake) * config.reward_percentage // 100

    settlements = []
    for review in reviews:
        if review.rewarded:
            continue

        if review.verdict == consensus.final_verdict:
            settlements.append(Settlement(
                review_id=review.id,
                expert=review.expert,
                is_correct=True,
                reward=review.stake_amount * total_reward_pool // total_winning_stake,
                reputation_delta=config.correct_review_points,
            ))
        else:
            settlements.append(Settlement(
                review_id=review.id,
                expert=review.expert,
                is_correct=False,
                slash=review.stake_amount * config.slash_percentage // 100,
                reputation_delta=config.incorrect_review_points,
            ))

    return DistributionPlan(
        claim_id=consensus.claim_id,
        final_verdict=consensus.final_verdict,
        total_winning_stake=total_winning_stake,
        total_losing_stake=total_losing_stake,
        total_reward_pool=total_reward_pool,
        settlements=settlements,
    )


class ReviewConsensus:
    """Domain service for review submission and consensus settlement.

    This service owns reviews and consensus results. It drives the claim
    store (review counts, status) as that store's trusted caller and the
    expert registry (earnings, slashing, reputation) during distribution.
    """

    def __init__(
        self,
        ledger: Ledger,
        transfers: AssetTransfer,
        address: str,
        claim_store: ClaimStore,
        expert_registry: ExpertRegistry,
    ):
        """Initialize service.

        Args:
            ledger: Ledger holding the review state
            transfers: Asset transfer primitive used to pay rewards
            address: Address of this component, also the reward escrow
            claim_store: Claim store partner
            expert_registry: Expert registry partner
        """
        self._ledger = ledger
        self._transfers = transfers
        self.address = address
        self._claim_store = claim_store
        self._expert_registry = expert_registry

    # Admin

    def initialize(self, admin: str, **parameters) -> ConsensusConfig:
        """Create the configuration record.

        Args:
            admin: Admin address
            **parameters: Overrides for the economic parameters

        Raises:
            AlreadyInitializedError: If consensus was initialized before
        """
        with self._ledger.transaction():
            if self._ledger.has(_CONFIG_KEY):
                raise AlreadyInitializedError("Review consensus already initialized")
            config = ConsensusConfig(admin=admin, **parameters)
            self._ledger.set(_CONFIG_KEY, config)
            self._ledger.set(_COUNT_KEY, 0)

        logger.info(
            f"🔧 Review consensus initialized: min_reviews={config.min_reviews_for_consensus}, "
            f"reward={config.reward_percentage}%, slash={config.slash_percentage}%"
        )
        return config

    def set_claim_registry(self, admin: str, claim_registry: str) -> None:
        """Bind the claim store address."""
        with self._ledger.transaction():
            config = self._require_admin(admin)
            config.claim_registry = claim_registry
            self._ledger.set(_CONFIG_KEY, config)
        logger.info(f"🔗 Review consensus bound claim registry {claim_registry}")

    def set_expert_registry(self, admin: str, expert_registry: str) -> None:
        """Bind the expert registry address."""
        with self._ledger.transaction():
            config = self._require_admin(admin)
            config.expert_registry = expert_registry
            self._ledger.set(_CONFIG_KEY, config)
        logger.info(f"🔗 Review consensus bound expert registry {expert_registry}")

    def get_config(self) -> Optional[ConsensusConfig]:
        return self._ledger.get(_CONFIG_KEY)

    # Reviews

    def submit_review(
        self,
        expert: str,
        claim_id: int,
        verdict: Verdict,
        reasoning: str,
        confidence: int,
        stake_amount: int,
    ) -> int:
        """Record an expert's review and recompute consensus once enough exist.

        Args:
            expert: Reviewer address
            claim_id: Reviewed claim
            verdict: Reviewer verdict
            reasoning: Reviewer reasoning
            confidence: Confidence between 0 and 100
            stake_amount: Stake committed to the review

        Returns:
            The new review id

        Raises:
            AuthorizationError: If the expert did not authorize the call
            ValidationError: If confidence or stake are out of range, the
                stake exceeds the expert's registered stake, or the expert
                already reviewed the claim
            NotFoundError: If the claim or expert does not exist
        """
        try:
            verdict = Verdict(verdict)
        except ValueError:
            raise ValidationError(f"Unknown verdict: {verdict}")

        with self._ledger.transaction():
            self._ledger.require_auth(expert)

            if confidence < 0 or confidence > 100:
                raise ValidationError("Confidence must be between 0 and 100")
            if stake_amount < 0:
                raise ValidationError(f"Review stake must be non-negative, got {stake_amount}")

            config = self._require_config()
            claim_store = self._bound_claim_store(config)
            expert_registry = self._bound_expert_registry(config)

            if claim_store.get_claim(claim_id) is None:
                raise NotFoundError(f"Claim #{claim_id} not found")
            profile = expert_registry.get_expert(expert)
            if profile is None:
                raise NotFoundError(f"Expert {expert} not registered")
            if stake_amount > profile.staked_amount:
                raise ValidationError(
                    f"Review stake {stake_amount} exceeds the {profile.staked_amount} staked by {expert}"
                )

            claim_review_ids: List[int] = self._ledger.get(_claim_reviews_key(claim_id), [])
            for review_id in claim_review_ids:
                if self._ledger.get(_review_key(review_id)).expert == expert:
                    raise DuplicateReviewError(f"Expert {expert} has already reviewed claim #{claim_id}")

            review_id = self.get_review_count() + 1
            review = Review(
                id=review_id,
                claim_id=claim_id,
                expert=expert,
                verdict=verdict,
                reasoning=reasoning,
                confidence=confidence,
                stake_amount=stake_amount,
                timestamp=self._ledger.timestamp(),
                rewarded=False,
            )
            self._ledger.set(_review_key(review_id), review)
            self._ledger.set(_COUNT_KEY, review_id)

            claim_review_ids.append(review_id)
            self._ledger.set(_claim_reviews_key(claim_id), claim_review_ids)

            expert_review_ids: List[int] = self._ledger.get(_expert_reviews_key(expert), [])
            expert_review_ids.append(review_id)
            self._ledger.set(_expert_reviews_key(expert), expert_review_ids)

            with self._ledger.authorize(self.address):
                claim_store.increment_review_count(self.address, claim_id)

            if len(claim_review_ids) >= config.min_reviews_for_consensus:
                self._calculate_consensus(claim_id, claim_store)

            self._ledger.publish(EventTopic.REVIEW_SUBMITTED, review_id)

        logger.info(
            f"🧑‍⚖️ Review #{review_id} by {expert} on claim #{claim_id}: "
            f"{verdict.value} (confidence={confidence}, stake={stake_amount})"
        )
        return review_id

    def _calculate_consensus(self, claim_id: int, claim_store: ClaimStore) -> ConsensusResult:
        consensus = compute_consensus(claim_id, self.get_claim_reviews(claim_id), self._ledger.timestamp())
        self._ledger.set(_consensus_key(claim_id), consensus)
        self._ledger.publish(EventTopic.CONSENSUS_REACHED, claim_id)

        new_status = consensus.final_verdict.to_status()
        claim = claim_store.get_claim(claim_id)
        if claim.status != new_status:
            with self._ledger.authorize(self.address):
                claim_store.update_claim_status(self.address, claim_id, new_status)

        logger.info(
            f"⚖️ Consensus on claim #{claim_id}: {consensus.final_verdict.value} "
            f"({consensus.confidence_percentage}%, true={consensus.total_stake_true}, "
            f"false={consensus.total_stake_false})"
        )
        return consensus

    # Distribution

    def distribute_rewards(self, admin: str, claim_id: int) -> DistributionPlan:
        """Settle every unrewarded review of a claim against its consensus.

        Winners receive a proportional share of the reward pool, losers are
        slashed, and both have their reputation adjusted. Reviews already
        settled are skipped, so repeating the call settles nothing twice.

        Returns:
            The distribution plan applied by this call

        Raises:
            AuthorizationError: If the caller is not the admin
            NotFoundError: If consensus has not been reached
            DistributionArithmeticError: If no stake backs the winning verdict
        """
        with self._ledger.transaction():
            config = self._require_admin(admin)

            consensus = self.get_consensus(claim_id)
            if consensus is None:
                raise NotFoundError(f"Consensus not reached for claim #{claim_id}")

            expert_registry = self._bound_expert_registry(config)
            plan = plan_distribution(consensus, self.get_claim_reviews(claim_id), config)

            for settlement in plan.settlements:
                if settlement.is_correct:
                    self._transfers.transfer(
                        self.address,
                        settlement.expert,
                        settlement.reward,
                        memo=f"reward review #{settlement.review_id}",
                    )
                    expert_registry.add_earnings(settlement.expert, settlement.reward)
                else:
                    settlement.slash = expert_registry.slash_stake(settlement.expert, settlement.slash)
                expert_registry.update_reputation(
                    settlement.expert,
                    settlement.reputation_delta,
                    settlement.is_correct,
                )

                review = self._ledger.get(_review_key(settlement.review_id))
                review.rewarded = True
                self._ledger.set(_review_key(settlement.review_id), review)

            self._ledger.publish(EventTopic.REWARDS_DISTRIBUTED, claim_id)

        logger.info(
            f"🏆 Rewards distributed for claim #{claim_id}: {len(plan.settlements)} reviews settled, "
            f"rewarded={plan.total_rewarded}, slashed={plan.total_slashed}"
        )
        return plan

    # Queries

    def get_review(self, review_id: int) -> Optional[Review]:
        return self._ledger.get(_review_key(review_id))

    def get_claim_reviews(self, claim_id: int) -> List[Review]:
        review_ids = self._ledger.get(_claim_reviews_key(claim_id), [])
        return [r for r in (self.get_review(review_id) for review_id in review_ids) if r is not None]

    def get_expert_reviews(self, expert: str) -> List[Review]:
        review_ids = self._ledger.get(_expert_reviews_key(expert), [])
        return [r for r in (self.get_review(review_id) for review_id in review_ids) if r is not None]

    def get_consensus(self, claim_id: int) -> Optional[ConsensusResult]:
        return self._ledger.get(_consensus_key(claim_id))

    def get_review_count(self) -> int:
        return self._ledger.get(_COUNT_KEY, 0)

    # Helpers

    def _require_config(self) -> ConsensusConfig:
        config = self.get_config()
        if config is None:
            raise NotFoundError("Review consensus not initialized")
        return config

    def _require_admin(self, admin: str) -> ConsensusConfig:
        self._ledger.require_auth(admin)
        config = self._require_config()
        if admin != config.admin:
            raise AuthorizationError("Not authorized")
        return config

    def _bound_claim_store(self, config: ConsensusConfig) -> ClaimStore:
        if config.claim_registry is None:
            raise NotFoundError("Claim registry contract not set")
        if config.claim_registry != self._claim_store.address:
            raise AuthorizationError(f"Claim registry {self._claim_store.address} is not the bound contract")
        return self._claim_store

    def _bound_expert_registry(self, config: ConsensusConfig) -> ExpertRegistry:
        if config.expert_registry is None:
            raise NotFoundError("Expert registry contract not set")
        if config.expert_registry != self._expert_registry.address:
            raise AuthorizationError(f"Expert registry {self._expert_registry.address} is not the bound contract")
        return self._expert_registry
