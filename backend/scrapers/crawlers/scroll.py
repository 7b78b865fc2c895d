"""
Scroll stabilization for lazily loaded result lists.

Scrolls a container in fixed steps until its scrollHeight stops growing, so
that every listing card has rendered before extraction.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..base import BrowserSession, ScrollState

logger = logging.getLogger(__name__)


class ScrollStabilizer:
    """
    Attempt-bounded scroll stabilization.

    Keeps scrolling while the container height grows or fewer than
    min_attempts steps have run, and never runs more than max_attempts steps.
    """

    def __init__(
        self,
        session: BrowserSession,
        step_px: int = 1000,
        delay: float = 2.0,
        min_attempts: int = 5,
        max_attempts: int = 30,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Args:
            session: Browser session holding the page
            step_px: Pixels to scroll per step
            delay: Seconds to wait for content after each step
            min_attempts: Steps taken even when the height does not change
            max_attempts: Upper bound on steps regardless of growth
            sleep: Awaitable sleep function (asyncio.sleep by default)
        """
        self.session = session
        self.step_px = step_px
        self.delay = delay
        self.min_attempts = min_attempts
        self.max_attempts = max(max_attempts, min_attempts)
        self.sleep = sleep or asyncio.sleep

    def _should_continue(self, state: ScrollState) -> bool:
        if state.attempts >= self.max_attempts:
            return False
        return state.grew or state.attempts < self.min_attempts

    async def stabilize(self, container_selector: str) -> ScrollState:
        """
        Scroll the container until its height stabilizes.

        Args:
            container_selector: CSS selector of the scrollable element

        Returns:
            Final ScrollState (zero attempts if the container is absent)
        """
        state = ScrollState()

        if not await self.session.has_element(container_selector):
            logger.info(f"Scroll area {container_selector} not found, skipping scroll")
            return state

        state.current_height = await self.session.scroll_height(container_selector)

        while self._should_continue(state):
            state.previous_height = state.current_height

            await self.session.scroll_by(container_selector, self.step_px)
            await self.sleep(self.delay)

            state.current_height = await self.session.scroll_height(container_selector)
            state.attempts += 1
            logger.debug(
                f"Scroll {state.attempts}: height {state.previous_height} -> {state.current_height}"
            )

        if state.attempts >= self.max_attempts and state.grew:
            logger.warning(
                f"Scroll area still growing after {state.attempts} attempts, continuing with what has loaded"
            )
        else:
            logger.info(f"Reached the bottom after {state.attempts} scroll attempts (height {state.current_height}px)")
        return state
