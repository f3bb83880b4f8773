"""Preference metadata: weighted signals, insight breakdowns and slider state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from tastematch.models.recommendation import RecommendationType


class MetadataType(str, enum.Enum):
    MUSIC_GENRE = "musicGenre"
    FILM_GENRE = "filmGenre"
    DIRECTOR = "director"
    CAST_MEMBER = "castMember"
    SCREENWRITER = "screenwriter"
    ARTIST = "artist"


METADATA_LABELS: dict[MetadataType, str] = {
    MetadataType.MUSIC_GENRE: "Music genres",
    MetadataType.FILM_GENRE: "Film genres",
    MetadataType.DIRECTOR: "Directors",
    MetadataType.CAST_MEMBER: "Cast",
    MetadataType.SCREENWRITER: "Screenwriters",
    MetadataType.ARTIST: "Artists",
}

CATEGORY_METADATA: dict[RecommendationType, tuple[MetadataType, ...]] = {
    RecommendationType.MUSIC: (MetadataType.MUSIC_GENRE, MetadataType.ARTIST),
    RecommendationType.FILM: (
        MetadataType.FILM_GENRE,
        MetadataType.DIRECTOR,
        MetadataType.CAST_MEMBER,
        MetadataType.SCREENWRITER,
    ),
}


@dataclass(frozen=True)
class MetadataItem:
    """A weighted preference signal. The [0, 1] weight range is checked by the use cases."""

    id: str
    type: MetadataType
    name: str
    count: int  # occurrences in liked content
    weight: float  # influence on ranking

    def weight_percentage(self) -> int:
        return round(self.weight * 100)


@dataclass(frozen=True)
class MetadataInsight:
    recommendation_id: str
    primary_factors: tuple[MetadataItem, ...] = ()
    secondary_factors: tuple[MetadataItem, ...] = ()
    unique_factors: tuple[MetadataItem, ...] = ()

    @classmethod
    def empty(cls, recommendation_id: str) -> "MetadataInsight":
        return cls(recommendation_id=recommendation_id)

    def all_factors(self) -> list[MetadataItem]:
        return [*self.primary_factors, *self.secondary_factors, *self.unique_factors]

    def has_factors(self) -> bool:
        return bool(self.primary_factors or self.secondary_factors or self.unique_factors)


@dataclass
class MetadataWeight:
    """Mutable slider state for one metadata category."""

    type: MetadataType
    name: str
    weight: float = field(default=0.5)


def default_weights(category: RecommendationType, weight: float = 0.5) -> list[MetadataWeight]:
    return [
        MetadataWeight(type=t, name=METADATA_LABELS[t], weight=weight)
        for t in CATEGORY_METADATA[category]
    ]
