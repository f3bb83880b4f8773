"""Recommendation wire schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RecommendationItemDTO(BaseModel):
    id: Union[str, int]
    name: str
    type: str
    details: dict[str, Any] = Field(default_factory=dict)
    explanation: Optional[str] = None
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)


class RecommendationData(BaseModel):
    title: str = ""
    description: str = ""
    items: list[RecommendationItemDTO] = Field(default_factory=list)


class RecommendationDTO(BaseModel):
    id: Union[int, str]
    user_id: str
    type: Literal["music", "film"]
    data: RecommendationData
    created_at: datetime


class RelatedItem(BaseModel):
    id: str
    name: str
    similarity: float = Field(..., ge=0.0, le=1.0)


class RecommendationReason(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary_reason: str = Field(..., alias="primaryReason")
    detailed_reasons: list[str] = Field(default_factory=list, alias="detailedReasons")
    related_items: list[RelatedItem] = Field(default_factory=list, alias="relatedItems")

    @classmethod
    def placeholder(cls, text: str) -> "RecommendationReason":
        return cls(primary_reason=text, detailed_reasons=[], related_items=[])
