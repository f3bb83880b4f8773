"""Per-user metadata weights and per-recommendation insight breakdowns."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import quote

from tastematch.errors import UnknownMetadataTypeError
from tastematch.models.metadata import MetadataInsight, MetadataItem, MetadataType
from tastematch.schemas.metadata import MetadataInsightDTO, MetadataItemDTO, WeightEntry, WeightsUpdate
from tastematch.services.api_client import ApiDataSource


class MetadataService:
    def __init__(self, data_source: ApiDataSource):
        self._data_source = data_source

    async def get_insight_for_recommendation(
        self, user_id: str, recommendation_id: str
    ) -> MetadataInsight:
        payload = await self._data_source.query(
            f"/api/users/{quote(user_id, safe='')}/recommendations/{recommendation_id}/metadata"
        )
        dto = MetadataInsightDTO.model_validate(payload)
        return MetadataInsight(
            recommendation_id=str(dto.recommendation_id),
            primary_factors=_items(dto.primary_factors),
            secondary_factors=_items(dto.secondary_factors),
            unique_factors=_items(dto.unique_factors),
        )

    async def update_weights(self, user_id: str, weights: Iterable[WeightEntry]) -> None:
        body = WeightsUpdate(weights=list(weights))
        await self._data_source.query(
            f"/api/users/{quote(user_id, safe='')}/metadata/weights",
            method="PUT",
            json=body.model_dump(),
        )


def parse_metadata_type(value: str) -> MetadataType:
    try:
        return MetadataType(value)
    except ValueError:
        raise UnknownMetadataTypeError(value) from None


def _items(dtos: list[MetadataItemDTO]) -> tuple[MetadataItem, ...]:
    return tuple(
        MetadataItem(
            id=str(dto.id),
            type=parse_metadata_type(dto.type),
            name=dto.name,
            count=dto.count,
            weight=dto.weight,
        )
        for dto in dtos
    )
