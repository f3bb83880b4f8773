"""Explain a recommendation through its metadata factors."""

from __future__ import annotations

from tastematch.errors import RecommendationAccessError, RecommendationNotFoundError
from tastematch.models.metadata import MetadataInsight
from tastematch.services.metadata_service import MetadataService
from tastematch.services.recommendation_repository import RecommendationRepository


class GetMetadataInsightUseCase:
    def __init__(
        self,
        metadata_service: MetadataService,
        recommendation_repository: RecommendationRepository,
    ):
        self._metadata_service = metadata_service
        self._recommendation_repository = recommendation_repository

    async def execute(self, user_id: str, recommendation_id: str) -> MetadataInsight:
        recommendation = await self._recommendation_repository.find_by_id(recommendation_id)
        if recommendation is None:
            raise RecommendationNotFoundError(recommendation_id)
        if recommendation.user_id != user_id:
            raise RecommendationAccessError(recommendation_id, user_id)

        return await self._metadata_service.get_insight_for_recommendation(
            user_id, recommendation_id
        )
