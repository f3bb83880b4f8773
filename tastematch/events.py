"""
In-process domain events.

Events are typed classes and handlers are registered per class, so dispatch
never goes through a string lookup. A failing handler cannot break the
emitting use case: its exception is logged and returned to the caller of
``emit`` as a ``HandlerFailure``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, ClassVar, Sequence, TypeVar, Union

import structlog

from tastematch.models.feedback import Feedback
from tastematch.models.recommendation import Recommendation, RecommendationType

logger = structlog.get_logger()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FeedbackSubmittedEvent:
    event_type: ClassVar[str] = "feedback_submitted"

    feedback: Feedback
    timestamp: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class RecommendationsRefreshedEvent:
    event_type: ClassVar[str] = "recommendations_refreshed"

    user_id: str
    type: RecommendationType
    recommendations: Sequence[Recommendation]
    timestamp: datetime = field(default_factory=_now)


DomainEvent = Union[FeedbackSubmittedEvent, RecommendationsRefreshedEvent]

E = TypeVar("E", FeedbackSubmittedEvent, RecommendationsRefreshedEvent)


@dataclass(frozen=True)
class HandlerFailure:
    event: DomainEvent
    handler: Callable
    error: Exception


class DomainEventChannel:
    """Synchronous pub/sub for one session. Handlers run in registration order."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_class: type[E], handler: Callable[[E], None]) -> None:
        self._handlers[event_class].append(handler)

    def emit(self, event: DomainEvent) -> list[HandlerFailure]:
        failures: list[HandlerFailure] = []
        for handler in list(self._handlers.get(type(event), ())):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    event_type=event.event_type,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                )
                failures.append(HandlerFailure(event=event, handler=handler, error=e))
        return failures
