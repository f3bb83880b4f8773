"""
Recommendation session: the state behind one swipe view.

Owns the fetched recommendation list, the position in it, the metadata
weight sliders and the loading/error slots, and wires user actions to the
use cases. List fetch failures land in ``error`` (the view shows a retry
panel); feedback network failures are soft: the view moves on.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from tastematch.config import Settings
from tastematch.errors import ApiError, FeedbackRejectedError, TastematchError
from tastematch.events import DomainEventChannel
from tastematch.metrics import FEEDBACK_SUBMISSIONS
from tastematch.models.feedback import Feedback, FeedbackType
from tastematch.models.metadata import MetadataInsight, MetadataType, MetadataWeight, default_weights
from tastematch.models.recommendation import Recommendation, RecommendationType
from tastematch.schemas.feedback import FeedbackResult
from tastematch.schemas.recommendation import RecommendationReason
from tastematch.services.api_client import ApiDataSource
from tastematch.services.feedback_repository import FeedbackRepository
from tastematch.services.metadata_service import MetadataService
from tastematch.services.recommendation_repository import RecommendationRepository
from tastematch.use_cases.get_metadata_insight import GetMetadataInsightUseCase
from tastematch.use_cases.get_recommendations import GetRecommendationsUseCase
from tastematch.use_cases.submit_feedback import SubmitFeedbackUseCase
from tastematch.use_cases.update_metadata_weights import UpdateMetadataWeightsUseCase

logger = structlog.get_logger()


@dataclass(frozen=True)
class EnhancedRecommendation:
    recommendation: Recommendation
    reason: RecommendationReason
    metadata_insight: MetadataInsight
    is_new: bool = True


class RecommendationSession:
    def __init__(
        self,
        user_id: str,
        settings: Settings,
        data_source: Optional[ApiDataSource] = None,
        category: RecommendationType = RecommendationType.MUSIC,
        initial_weights: Optional[Iterable[MetadataWeight]] = None,
        events: Optional[DomainEventChannel] = None,
    ):
        self.user_id = user_id
        self.settings = settings
        self.events = events or DomainEventChannel()
        self._data_source = data_source or ApiDataSource(settings)

        self._recommendations = RecommendationRepository(self._data_source)
        self._feedback = FeedbackRepository(self._data_source)
        self._metadata = MetadataService(self._data_source)

        self._get_recommendations = GetRecommendationsUseCase(self._recommendations, self.events)
        self._submit_feedback = SubmitFeedbackUseCase(
            self._feedback, self._recommendations, self.events
        )
        self._update_weights = UpdateMetadataWeightsUseCase(self._metadata)
        self._get_insight = GetMetadataInsightUseCase(self._metadata, self._recommendations)

        self.category = category
        self.recommendations: list[EnhancedRecommendation] = []
        self.current_index = 0
        self.is_loading = False
        self.error: Optional[Exception] = None
        self.last_feedback: Optional[FeedbackResult] = None
        self._fetch_generation = 0
        self.weights: list[MetadataWeight] = (
            list(initial_weights)
            if initial_weights
            else default_weights(category, settings.default_metadata_weight)
        )

    # ── Navigation ──

    @property
    def current_recommendation(self) -> Optional[EnhancedRecommendation]:
        if 0 <= self.current_index < len(self.recommendations):
            return self.recommendations[self.current_index]
        return None

    @property
    def has_next(self) -> bool:
        return self.current_index < len(self.recommendations) - 1

    @property
    def has_previous(self) -> bool:
        return self.current_index > 0

    def current_item_id(self) -> Optional[str]:
        current = self.current_recommendation
        if current is None:
            return None
        item = current.recommendation.first_item()
        return item.id if item else None

    def advanced_item_id(self) -> Optional[str]:
        """Item to show after a swipe, or None when the last feedback left the list where it was."""
        if self.last_feedback is None or not self.last_feedback.advanced:
            return None
        return self.current_item_id()

    def show_next(self) -> bool:
        if self.has_next:
            self.current_index += 1
            return True
        return False

    def show_previous(self) -> None:
        if self.has_previous:
            self.current_index -= 1

    # ── Fetching ──

    async def fetch_recommendations(self, force_refresh: bool = False) -> bool:
        """Replace the whole list and rewind to the first entry.

        Returns False on failure, and also when a later fetch started while
        this one was in flight; the later one owns the list and ``is_loading``.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation
        category = self.category
        self.is_loading = True
        self.error = None
        try:
            recommendations = await self._get_recommendations.execute(
                self.user_id, category, force_refresh
            )
            playable = [r for r in recommendations if r.has_items()]
            if len(playable) < len(recommendations):
                logger.debug(
                    "empty_recommendations_skipped",
                    user_id=self.user_id,
                    category=category.value,
                    n=len(recommendations) - len(playable),
                )
            enhanced = await asyncio.gather(*(self._enhance(r) for r in playable))
        except (TastematchError, ValueError) as e:
            if generation != self._fetch_generation:
                logger.info(
                    "recommendations_fetch_superseded",
                    user_id=self.user_id,
                    category=category.value,
                )
                return False
            logger.error(
                "recommendations_fetch_failed",
                user_id=self.user_id,
                category=category.value,
                error=str(e),
            )
            self.error = e
            return False
        finally:
            if generation == self._fetch_generation:
                self.is_loading = False

        if generation != self._fetch_generation:
            logger.info(
                "recommendations_fetch_superseded",
                user_id=self.user_id,
                category=category.value,
            )
            return False

        self.recommendations = list(enhanced)
        self.current_index = 0
        logger.info(
            "recommendations_loaded",
            user_id=self.user_id,
            category=category.value,
            n=len(self.recommendations),
        )
        return True

    async def _enhance(self, recommendation: Recommendation) -> EnhancedRecommendation:
        reason = await self._fetch_reason(recommendation.id)
        insight = await self._fetch_insight(recommendation.id)
        return EnhancedRecommendation(recommendation, reason, insight)

    async def _fetch_reason(self, recommendation_id: str) -> RecommendationReason:
        try:
            return await self._recommendations.get_reason(self.user_id, recommendation_id)
        except (TastematchError, ValueError) as e:
            logger.warning(
                "recommendation_reason_unavailable",
                recommendation_id=recommendation_id,
                error=str(e),
            )
            return RecommendationReason.placeholder(self.settings.missing_reason_text)

    async def _fetch_insight(self, recommendation_id: str) -> MetadataInsight:
        try:
            return await self._metadata.get_insight_for_recommendation(
                self.user_id, recommendation_id
            )
        except (TastematchError, ValueError) as e:
            logger.warning(
                "metadata_insight_unavailable",
                recommendation_id=recommendation_id,
                error=str(e),
            )
            return MetadataInsight.empty(recommendation_id)

    async def get_metadata_insight(self, recommendation_id: str) -> MetadataInsight:
        return await self._get_insight.execute(self.user_id, recommendation_id)

    async def feedback_history(self) -> list[Feedback]:
        return await self._feedback.find_by_user_id(self.user_id)

    # ── Feedback ──

    async def handle_feedback(
        self, item_id: str, feedback_type: FeedbackType
    ) -> Optional[FeedbackResult]:
        """Submit feedback for an item of the current recommendation.

        Returns None (nothing sent) when the item is not part of it. The
        result is also kept in ``last_feedback``.
        """
        self.last_feedback = None
        current = self.current_recommendation
        if current is None or current.recommendation.get_item(item_id) is None:
            logger.debug("feedback_ignored", user_id=self.user_id, item_id=item_id)
            return None

        recommendation_id = current.recommendation.id
        try:
            feedback = await self._submit_feedback.execute(
                self.user_id, recommendation_id, item_id, feedback_type
            )
        except ApiError as e:
            FEEDBACK_SUBMISSIONS.labels(feedback_type=feedback_type.value, outcome="soft_failed").inc()
            logger.warning(
                "feedback_soft_failed",
                user_id=self.user_id,
                recommendation_id=recommendation_id,
                item_id=item_id,
                error=str(e),
            )
            result = FeedbackResult(
                success=False,
                message="Failed to save feedback, but continuing with UI flow",
                error=str(e),
                advanced=self.show_next(),
            )
        except (TastematchError, ValueError) as e:
            # ValueError covers malformed recommendation payloads.
            FEEDBACK_SUBMISSIONS.labels(feedback_type=feedback_type.value, outcome="rejected").inc()
            logger.warning(
                "feedback_rejected",
                user_id=self.user_id,
                recommendation_id=recommendation_id,
                item_id=item_id,
                error=str(e),
            )
            self.error = e
            result = FeedbackResult(
                success=False,
                rejected=True,
                message="Feedback was not accepted",
                error=str(e),
            )
        else:
            FEEDBACK_SUBMISSIONS.labels(feedback_type=feedback_type.value, outcome="saved").inc()
            result = FeedbackResult(
                success=True,
                message="Feedback saved",
                feedback_id=feedback.id,
                advanced=self.show_next(),
            )

        self.last_feedback = result
        return result

    async def on_swipe(self, item_id: str, feedback_type: FeedbackType) -> FeedbackResult:
        """``SwipeController`` callback. Raises when the card must stay on screen."""
        result = await self.handle_feedback(item_id, feedback_type)
        if result is None:
            raise FeedbackRejectedError(
                f"Item with id {item_id} is not part of the current recommendation"
            )
        if result.rejected:
            raise FeedbackRejectedError(result.error or result.message)
        return result

    # ── Weights ──

    def update_weight(self, metadata_type: MetadataType, value: float) -> None:
        """Move one slider, clamped to [0, 1]. Nothing is sent until ``update_weights``."""
        for weight in self.weights:
            if weight.type == metadata_type:
                weight.weight = max(0.0, min(1.0, value))

    def reset_weights(self) -> None:
        self.weights = default_weights(self.category, self.settings.default_metadata_weight)

    async def update_weights(self, weights: Optional[Iterable[MetadataWeight]] = None) -> bool:
        """Persist the weight vector, then always refetch with force_refresh."""
        weights = list(weights) if weights is not None else self.weights
        try:
            await self._update_weights.execute(self.user_id, weights)
        except TastematchError as e:
            logger.warning("weights_update_failed", user_id=self.user_id, error=str(e))
            self.error = e
            return False

        self.weights = weights
        return await self.fetch_recommendations(force_refresh=True)

    async def change_category(self, category: RecommendationType) -> bool:
        self.category = category
        self.reset_weights()
        return await self.fetch_recommendations()

    # ── Lifecycle ──

    async def aclose(self) -> None:
        await self._data_source.aclose()

    async def __aenter__(self) -> "RecommendationSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
