"""Feedback repository: one POST per swipe, read-back for history views."""

from __future__ import annotations

from urllib.parse import quote

from tastematch.models.feedback import Feedback, FeedbackType
from tastematch.schemas.feedback import FeedbackCreate, FeedbackDTO
from tastematch.services.api_client import ApiDataSource


class FeedbackRepository:
    def __init__(self, data_source: ApiDataSource):
        self._data_source = data_source

    async def save(self, feedback: Feedback) -> None:
        body = FeedbackCreate(feedback_type=feedback.type.value)
        await self._data_source.query(
            f"/api/users/{quote(feedback.user_id, safe='')}"
            f"/recommendations/{feedback.recommendation_id}/feedback",
            method="POST",
            json=body.model_dump(),
        )

    async def find_by_recommendation_id(self, recommendation_id: str) -> list[Feedback]:
        payload = await self._data_source.query(f"/api/recommendations/{recommendation_id}/feedback")
        return [_to_domain(FeedbackDTO.model_validate(dto)) for dto in payload or []]

    async def find_by_user_id(self, user_id: str) -> list[Feedback]:
        payload = await self._data_source.query(f"/api/users/{quote(user_id, safe='')}/feedback")
        return [_to_domain(FeedbackDTO.model_validate(dto)) for dto in payload or []]


def _to_domain(dto: FeedbackDTO) -> Feedback:
    # Stored feedback rows are keyed by recommendation; the item id is usually absent.
    return Feedback(
        id=str(dto.id),
        recommendation_id=str(dto.recommendation_id),
        item_id=dto.item_id or "",
        type=FeedbackType(dto.feedback_type),
        user_id=dto.user_id,
        created_at=dto.created_at,
    )
