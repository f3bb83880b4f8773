"""Fetch a user's recommendation sets, regenerating them when asked or when none exist."""

from __future__ import annotations

import structlog

from tastematch.events import DomainEventChannel, RecommendationsRefreshedEvent
from tastematch.models.recommendation import Recommendation, RecommendationType
from tastematch.services.recommendation_repository import RecommendationRepository

logger = structlog.get_logger()


class GetRecommendationsUseCase:
    def __init__(self, repository: RecommendationRepository, events: DomainEventChannel):
        self._repository = repository
        self._events = events

    async def execute(
        self, user_id: str, type: RecommendationType, force_refresh: bool = False
    ) -> list[Recommendation]:
        if force_refresh:
            return await self._refresh(user_id, type)

        recommendations = await self._repository.find_by_user_and_type(user_id, type)
        if not recommendations:
            logger.info("recommendations_empty", user_id=user_id, type=type.value)
            return await self._refresh(user_id, type)
        return recommendations

    async def _refresh(self, user_id: str, type: RecommendationType) -> list[Recommendation]:
        # Generation happens server-side; force_refresh asks the backend to regenerate.
        recommendations = await self._repository.find_by_user_and_type(
            user_id, type, force_refresh=True
        )
        logger.info(
            "recommendations_refreshed",
            user_id=user_id,
            type=type.value,
            n=len(recommendations),
        )
        self._events.emit(RecommendationsRefreshedEvent(user_id, type, tuple(recommendations)))
        return recommendations
