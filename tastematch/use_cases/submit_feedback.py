"""Validate and persist one like/dislike signal."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from tastematch.errors import ItemNotFoundError, RecommendationNotFoundError
from tastematch.events import DomainEventChannel, FeedbackSubmittedEvent
from tastematch.models.feedback import Feedback, FeedbackType, new_feedback_id
from tastematch.services.feedback_repository import FeedbackRepository
from tastematch.services.recommendation_repository import RecommendationRepository

logger = structlog.get_logger()


class SubmitFeedbackUseCase:
    def __init__(
        self,
        feedback_repository: FeedbackRepository,
        recommendation_repository: RecommendationRepository,
        events: DomainEventChannel,
    ):
        self._feedback_repository = feedback_repository
        self._recommendation_repository = recommendation_repository
        self._events = events

    async def execute(
        self,
        user_id: str,
        recommendation_id: str,
        item_id: str,
        feedback_type: FeedbackType,
    ) -> Feedback:
        recommendation = await self._recommendation_repository.find_by_id(recommendation_id)
        if recommendation is None:
            raise RecommendationNotFoundError(recommendation_id)
        if recommendation.get_item(item_id) is None:
            raise ItemNotFoundError(item_id, recommendation_id)

        feedback = Feedback(
            id=new_feedback_id(),
            recommendation_id=recommendation_id,
            item_id=item_id,
            type=feedback_type,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        await self._feedback_repository.save(feedback)
        logger.info(
            "feedback_submitted",
            feedback_id=feedback.id,
            user_id=user_id,
            recommendation_id=recommendation_id,
            item_id=item_id,
            feedback_type=feedback_type.value,
        )

        self._events.emit(FeedbackSubmittedEvent(feedback))
        return feedback
