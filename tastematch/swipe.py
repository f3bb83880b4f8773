"""
Swipe interaction controller.

Turns pointer/touch movement (or a like/dislike button press) into a
like/dislike decision for the card on screen, and drives the card's
enter → center → exit animation around the feedback submission.

Per-card state machine::

    none → swiping-{left,right} → swiped-{left,right} → removed
                 ↑______________________|  (submission failed: reset to none)
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import structlog

from tastematch.config import Settings
from tastematch.errors import InvalidSwipeTransition
from tastematch.metrics import SWIPE_GESTURES
from tastematch.models.feedback import FeedbackType

logger = structlog.get_logger()


class SwipeState(str, enum.Enum):
    NONE = "none"
    SWIPING_LEFT = "swiping-left"
    SWIPING_RIGHT = "swiping-right"
    SWIPED_LEFT = "swiped-left"
    SWIPED_RIGHT = "swiped-right"

    @property
    def is_swiped(self) -> bool:
        return self in (SwipeState.SWIPED_LEFT, SwipeState.SWIPED_RIGHT)


_ANY_LIVE = frozenset(
    {
        SwipeState.NONE,
        SwipeState.SWIPING_LEFT,
        SwipeState.SWIPING_RIGHT,
        SwipeState.SWIPED_LEFT,
        SwipeState.SWIPED_RIGHT,
    }
)

TRANSITIONS: dict[SwipeState, frozenset[SwipeState]] = {
    SwipeState.NONE: _ANY_LIVE,
    SwipeState.SWIPING_LEFT: _ANY_LIVE,
    SwipeState.SWIPING_RIGHT: _ANY_LIVE,
    # A swiped card only goes back to none when its submission fails.
    SwipeState.SWIPED_LEFT: frozenset({SwipeState.NONE}),
    SwipeState.SWIPED_RIGHT: frozenset({SwipeState.NONE}),
}


class SwipeDirection(str, enum.Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def feedback_type(self) -> FeedbackType:
        return FeedbackType.LIKE if self is SwipeDirection.RIGHT else FeedbackType.DISLIKE

    @property
    def swiped_state(self) -> SwipeState:
        return SwipeState.SWIPED_RIGHT if self is SwipeDirection.RIGHT else SwipeState.SWIPED_LEFT


class AnimationPhase(str, enum.Enum):
    ENTER = "enter"
    CENTER = "center"
    EXIT = "exit"


class SwipeOutcome(str, enum.Enum):
    IGNORED = "ignored"
    SNAPPED_BACK = "snapped_back"
    SUBMITTED = "submitted"
    FAILED = "failed"


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class SwipeCard:
    item_id: str
    state: SwipeState = SwipeState.NONE
    phase: AnimationPhase = AnimationPhase.ENTER
    position: Position = field(default_factory=Position)
    removed: bool = False

    def transition(self, target: SwipeState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidSwipeTransition(self.state.value, target.value)
        self.state = target

    def reset(self) -> None:
        self.position = Position()
        self.transition(SwipeState.NONE)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str = ""
    variant: str = "default"  # default | destructive


Notifier = Callable[[Notification], None]
SwipeCallback = Callable[[str, FeedbackType], Awaitable[object]]


def log_notification(notification: Notification) -> None:
    logger.info(
        "notification",
        title=notification.title,
        description=notification.description,
        variant=notification.variant,
    )


class SwipeController:
    """Gesture handling for the card currently on screen.

    ``on_swipe(item_id, feedback_type)`` is awaited after the exit delay; if
    it raises, the card snaps back and stays on screen so the user can
    retry. ``next_item`` is asked for the following card once a submission
    succeeds; any id it returns is presented as a fresh card, and None
    leaves the removed card in place.
    """

    def __init__(
        self,
        on_swipe: SwipeCallback,
        settings: Settings,
        notify: Optional[Notifier] = None,
        next_item: Optional[Callable[[], Optional[str]]] = None,
    ):
        self._on_swipe = on_swipe
        self._settings = settings
        self._notify = notify or log_notification
        self._next_item = next_item
        self._dragging = False
        self._start = Position()
        self.card: Optional[SwipeCard] = None

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    def present(self, item_id: str) -> SwipeCard:
        self._dragging = False
        self.card = SwipeCard(item_id=item_id)
        return self.card

    async def settle(self) -> None:
        """Let the enter animation finish, then rest the card at center."""
        card = self.card
        if card is None or card.phase is not AnimationPhase.ENTER:
            return
        await asyncio.sleep(self._settings.card_enter_delay_seconds)
        if self.card is card and card.phase is AnimationPhase.ENTER:
            card.phase = AnimationPhase.CENTER

    # ── Drag gesture ──

    def pointer_down(self, x: float, y: float) -> bool:
        """Start a drag. Ignored while another drag is active or the card is leaving."""
        card = self.card
        if card is None or card.removed or card.state.is_swiped or self._dragging:
            return False
        self._dragging = True
        self._start = Position(x, y)
        return True

    def pointer_move(self, x: float, y: float) -> SwipeState:
        card = self.card
        if card is None:
            return SwipeState.NONE
        if not self._dragging:
            return card.state

        dx, dy = x - self._start.x, y - self._start.y
        card.position = Position(dx, dy)

        threshold = self._settings.swipe_indicator_threshold_px
        if dx > threshold:
            card.transition(SwipeState.SWIPING_RIGHT)
        elif dx < -threshold:
            card.transition(SwipeState.SWIPING_LEFT)
        else:
            card.transition(SwipeState.NONE)
        return card.state

    async def pointer_up(self, x: float, y: float) -> SwipeOutcome:
        if not self._dragging or self.card is None:
            return SwipeOutcome.IGNORED
        self._dragging = False
        card = self.card

        dx = x - self._start.x
        threshold = self._settings.swipe_commit_threshold_px
        if dx > threshold:
            return await self._commit(card, SwipeDirection.RIGHT)
        if dx < -threshold:
            return await self._commit(card, SwipeDirection.LEFT)

        card.reset()
        SWIPE_GESTURES.labels(outcome=SwipeOutcome.SNAPPED_BACK.value).inc()
        return SwipeOutcome.SNAPPED_BACK

    # ── Buttons ──

    async def press(self, direction: SwipeDirection) -> SwipeOutcome:
        card = self.card
        if card is None or card.removed or card.state.is_swiped or self._dragging:
            return SwipeOutcome.IGNORED
        return await self._commit(card, direction)

    async def _commit(self, card: SwipeCard, direction: SwipeDirection) -> SwipeOutcome:
        card.transition(direction.swiped_state)
        card.phase = AnimationPhase.EXIT
        feedback_type = direction.feedback_type

        self._notify(
            Notification(
                title="Added to your likes" if feedback_type is FeedbackType.LIKE else "Noted your dislike",
                description="Your taste profile is being updated",
                variant="default" if feedback_type is FeedbackType.LIKE else "destructive",
            )
        )

        await asyncio.sleep(self._settings.swipe_exit_delay_seconds)
        try:
            await self._on_swipe(card.item_id, feedback_type)
        except Exception as e:
            logger.warning(
                "swipe_feedback_failed",
                item_id=card.item_id,
                feedback_type=feedback_type.value,
                error=str(e),
            )
            card.reset()
            card.phase = AnimationPhase.CENTER
            self._notify(
                Notification(
                    title="Error",
                    description="Failed to save your preference",
                    variant="destructive",
                )
            )
            SWIPE_GESTURES.labels(outcome=SwipeOutcome.FAILED.value).inc()
            return SwipeOutcome.FAILED

        card.removed = True
        SWIPE_GESTURES.labels(outcome=SwipeOutcome.SUBMITTED.value).inc()
        self._present_next()
        return SwipeOutcome.SUBMITTED

    def _present_next(self) -> None:
        if self._next_item is None:
            return
        next_id = self._next_item()
        if next_id is not None:
            self.present(next_id)
