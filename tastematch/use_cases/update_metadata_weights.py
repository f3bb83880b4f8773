"""Push the user's metadata weight vector to the backend."""

from __future__ import annotations

from typing import Iterable

from tastematch.errors import InvalidWeightError
from tastematch.models.metadata import MetadataWeight
from tastematch.schemas.metadata import WeightEntry
from tastematch.services.metadata_service import MetadataService


class UpdateMetadataWeightsUseCase:
    def __init__(self, metadata_service: MetadataService):
        self._metadata_service = metadata_service

    async def execute(self, user_id: str, weights: Iterable[MetadataWeight]) -> None:
        """Reject the whole batch on the first weight outside [0, 1]."""
        weights = list(weights)
        for w in weights:
            if not 0.0 <= w.weight <= 1.0:
                raise InvalidWeightError(w.weight)

        await self._metadata_service.update_weights(
            user_id,
            [WeightEntry(type=w.type.value, weight=w.weight) for w in weights],
        )
