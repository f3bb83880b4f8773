"""Metadata insight and weight wire schemas."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class MetadataItemDTO(BaseModel):
    id: Union[str, int]
    type: str
    name: str
    count: int = 0
    weight: float = 0.0


class MetadataInsightDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recommendation_id: Union[int, str] = Field(..., alias="recommendationId")
    primary_factors: list[MetadataItemDTO] = Field(default_factory=list, alias="primaryFactors")
    secondary_factors: list[MetadataItemDTO] = Field(default_factory=list, alias="secondaryFactors")
    unique_factors: list[MetadataItemDTO] = Field(default_factory=list, alias="uniqueFactors")


class WeightEntry(BaseModel):
    type: str
    weight: float


class WeightsUpdate(BaseModel):
    weights: list[WeightEntry]
