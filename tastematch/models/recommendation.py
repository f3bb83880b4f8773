"""Recommendation domain models."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


class RecommendationType(str, enum.Enum):
    MUSIC = "music"
    FILM = "film"


@dataclass(frozen=True)
class RecommendationItem:
    id: str
    name: str
    type: str  # free-form: "film", "album", "track", "artist", ...
    details: dict[str, Any] = field(default_factory=dict)
    explanation: Optional[str] = None
    confidence: Optional[float] = None

    def has_explanation(self) -> bool:
        return bool(self.explanation)

    def confidence_percentage(self) -> int:
        if self.confidence is None:
            return 0
        return round(self.confidence * 100)


@dataclass(frozen=True)
class Recommendation:
    """A server-generated set of items shown to one user. Replace, don't edit."""

    id: str
    user_id: str
    type: RecommendationType
    items: tuple[RecommendationItem, ...]
    title: str
    description: str
    created_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        seen: set[str] = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"Duplicate item id {item.id} in recommendation {self.id}")
            seen.add(item.id)

    def has_items(self) -> bool:
        return len(self.items) > 0

    def get_item(self, item_id: str) -> Optional[RecommendationItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def first_item(self) -> Optional[RecommendationItem]:
        return self.items[0] if self.items else None
