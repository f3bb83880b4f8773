"""Exception types raised across the client."""

from __future__ import annotations

from typing import Optional


class TastematchError(Exception):
    """Base class for every error raised by this package."""


class RecommendationNotFoundError(TastematchError):
    def __init__(self, recommendation_id: str):
        self.recommendation_id = recommendation_id
        super().__init__(f"Recommendation with id {recommendation_id} not found")


class ItemNotFoundError(TastematchError):
    def __init__(self, item_id: str, recommendation_id: str):
        self.item_id = item_id
        self.recommendation_id = recommendation_id
        super().__init__(f"Item with id {item_id} not found in recommendation {recommendation_id}")


class RecommendationAccessError(TastematchError):
    def __init__(self, recommendation_id: str, user_id: str):
        self.recommendation_id = recommendation_id
        self.user_id = user_id
        super().__init__(
            f"Recommendation with id {recommendation_id} does not belong to user {user_id}"
        )


class InvalidWeightError(TastematchError, ValueError):
    def __init__(self, weight: float):
        self.weight = weight
        super().__init__(f"Weight value must be between 0 and 1, got {weight}")


class UnknownMetadataTypeError(TastematchError, ValueError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unknown metadata type: {value}")


class FeedbackRejectedError(TastematchError):
    """Feedback was refused before reaching the backend (validation failure)."""


class InvalidSwipeTransition(TastematchError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move swipe state from {current} to {target}")


class ApiError(TastematchError):
    """Non-2xx response or transport failure talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None, path: str = ""):
        self.status_code = status_code
        self.path = path
        super().__init__(message)
