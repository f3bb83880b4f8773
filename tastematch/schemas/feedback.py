"""Feedback wire schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    feedback_type: str = Field(..., pattern=r"^(like|dislike)$")


class FeedbackDTO(BaseModel):
    id: Union[int, str]
    recommendation_id: Union[int, str]
    user_id: str
    feedback_type: str = Field(..., pattern=r"^(like|dislike)$")
    created_at: datetime
    item_id: Optional[str] = None


class FeedbackResult(BaseModel):
    """Outcome of a feedback submission as seen by the swipe UI.

    ``success=False`` is a soft failure: the UI keeps going. ``rejected``
    marks failures caught before the backend was reached (unknown
    recommendation or item); those do not advance the card. ``advanced``
    is set when the session moved on to the next recommendation.
    """

    success: bool
    message: str = ""
    error: Optional[str] = None
    rejected: bool = False
    advanced: bool = False
    feedback_id: Optional[str] = None
