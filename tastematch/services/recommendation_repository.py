"""Recommendation repository: maps backend DTOs to domain models."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import structlog

from tastematch.errors import ApiError
from tastematch.models.recommendation import Recommendation, RecommendationItem, RecommendationType
from tastematch.schemas.recommendation import RecommendationDTO, RecommendationReason
from tastematch.services.api_client import ApiDataSource

logger = structlog.get_logger()


class RecommendationRepository:
    def __init__(self, data_source: ApiDataSource):
        self._data_source = data_source

    async def find_by_user_and_type(
        self,
        user_id: str,
        type: RecommendationType,
        force_refresh: bool = False,
    ) -> list[Recommendation]:
        payload = await self._data_source.query(
            f"/api/users/{quote(user_id, safe='')}/recommendations",
            params={"type": type.value, "force_refresh": str(force_refresh).lower()},
        )
        return [to_domain(RecommendationDTO.model_validate(dto)) for dto in payload or []]

    async def find_by_id(self, recommendation_id: str) -> Optional[Recommendation]:
        """Return the recommendation, or None when the backend reports 404."""
        try:
            payload = await self._data_source.query(f"/api/recommendations/{recommendation_id}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return to_domain(RecommendationDTO.model_validate(payload))

    async def get_reason(self, user_id: str, recommendation_id: str) -> RecommendationReason:
        payload = await self._data_source.query(
            f"/api/users/{quote(user_id, safe='')}/recommendations/{recommendation_id}/reason"
        )
        return RecommendationReason.model_validate(payload)

    async def save(self, recommendation: Recommendation) -> None:
        # The backend generates and stores recommendations itself.
        logger.debug("recommendation_save_skipped", recommendation_id=recommendation.id)


def to_domain(dto: RecommendationDTO) -> Recommendation:
    return Recommendation(
        id=str(dto.id),
        user_id=dto.user_id,
        type=RecommendationType(dto.type),
        items=tuple(
            RecommendationItem(
                id=str(item.id),
                name=item.name,
                type=item.type,
                details=dict(item.details),
                explanation=item.explanation,
                confidence=item.confidence,
            )
            for item in dto.data.items
        ),
        title=dto.data.title,
        description=dto.data.description,
        created_at=dto.created_at,
    )
