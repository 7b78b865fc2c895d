"""
Randomized browser identities for reducing fingerprint reuse across pages.
"""

import random
from typing import Optional, Sequence

from ..base import EvasionProfile


VIEWPORT_WIDTH_RANGE = (320, 1920)
VIEWPORT_HEIGHT_RANGE = (480, 1080)

# Sent with every profile; only the user agent and viewport vary
PROFILE_HEADERS = {
    'Accept-Language': 'en-US,en;q=0.9,zh-CN;q=0.8,zh;q=0.7',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7',
    'Connection': 'keep-alive',
}


class EvasionProfileGenerator:
    """
    Produces a fresh EvasionProfile per call.

    All randomness comes from the injected random source, so a seeded
    random.Random plus a fixed user agent pool gives repeatable profiles.
    Without a pool, user agents come from fake_useragent.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        user_agents: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            rng: Random source (defaults to a new unseeded Random)
            user_agents: Optional fixed pool of user agent strings
        """
        self.rng = rng or random.Random()
        self.user_agents = list(user_agents) if user_agents else None
        self._ua_provider = None

    def _random_user_agent(self) -> str:
        if self.user_agents:
            return self.rng.choice(self.user_agents)
        if self._ua_provider is None:
            from fake_useragent import UserAgent
            # Profiles are applied to Chromium pages
            self._ua_provider = UserAgent(browsers=['Chrome'])
        return self._ua_provider.random

    def next(self) -> EvasionProfile:
        """Generate the next random profile."""
        return EvasionProfile(
            user_agent=self._random_user_agent(),
            viewport_width=self.rng.randint(*VIEWPORT_WIDTH_RANGE),
            viewport_height=self.rng.randint(*VIEWPORT_HEIGHT_RANGE),
            headers=dict(PROFILE_HEADERS),
        )
