"""
Entrypoint. Builds a swipe view, which is a recommendation session wired
to a swipe controller, with logging configured from settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog

from tastematch.config import Settings, get_settings
from tastematch.logging_config import setup_logging
from tastematch.models.recommendation import RecommendationType
from tastematch.services.api_client import ApiDataSource
from tastematch.session import RecommendationSession
from tastematch.swipe import Notifier, SwipeController

logger = structlog.get_logger()


@dataclass
class SwipeView:
    session: RecommendationSession
    controller: SwipeController

    @property
    def is_empty(self) -> bool:
        """Nothing to swipe: the view offers ``generate_more`` instead of a card."""
        return self.session.error is None and self.session.current_item_id() is None

    @property
    def is_exhausted(self) -> bool:
        """The last card of the list has been swiped away."""
        card = self.controller.card
        return card is not None and card.removed and not self.session.has_next

    async def start(self) -> bool:
        """Load the first list and put its first card on screen."""
        return await self._load(force_refresh=False)

    async def retry(self) -> bool:
        return await self.start()

    async def generate_more(self) -> bool:
        """Ask the backend for a freshly generated list."""
        return await self._load(force_refresh=True)

    async def _load(self, force_refresh: bool) -> bool:
        loaded = await self.session.fetch_recommendations(force_refresh=force_refresh)
        if loaded:
            self.present_current()
        return loaded

    def present_current(self) -> None:
        item_id = self.session.current_item_id()
        if item_id is None:
            self.controller.card = None
            logger.info("swipe_view_empty", user_id=self.session.user_id)
            return
        self.controller.present(item_id)

    async def aclose(self) -> None:
        await self.session.aclose()


def build_swipe_view(
    user_id: str,
    settings: Optional[Settings] = None,
    data_source: Optional[ApiDataSource] = None,
    category: RecommendationType = RecommendationType.MUSIC,
    notify: Optional[Notifier] = None,
) -> SwipeView:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    session = RecommendationSession(
        user_id,
        settings,
        data_source=data_source,
        category=category,
    )
    controller = SwipeController(
        session.on_swipe,
        settings,
        notify=notify,
        next_item=session.advanced_item_id,
    )
    logger.info("swipe_view_created", user_id=user_id, category=category.value)
    return SwipeView(session=session, controller=controller)
