"""Feedback domain model."""

from __future__ import annotations

import enum
import secrets
import string
import time
from dataclasses import dataclass
from datetime import datetime

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 7


class FeedbackType(str, enum.Enum):
    LIKE = "like"
    DISLIKE = "dislike"


def new_feedback_id() -> str:
    """Client-side id: ``feedback_<ms timestamp>_<base36 suffix>``. Not idempotent."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"feedback_{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True)
class Feedback:
    id: str
    recommendation_id: str
    item_id: str
    type: FeedbackType
    user_id: str
    created_at: datetime

    def is_positive(self) -> bool:
        return self.type == FeedbackType.LIKE

    def is_negative(self) -> bool:
        return self.type == FeedbackType.DISLIKE
