"""
Stealth browser session for sites with bot detection.

Uses Playwright with enhanced stealth features to reduce bot detection.
This includes automation-hiding scripts, proper headers, and per-page
identity changes (user agent, headers, viewport).
"""

import asyncio
from typing import Optional, List
from bs4 import BeautifulSoup
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)
from playwright_stealth import Stealth
import logging

from ..base import BrowserSession, EvasionProfile, NavigationError, SessionError, SessionOptions
from .document import SoupDocument

logger = logging.getLogger(__name__)


# Hides the most common automation indicators
STEALTH_INIT_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });

    // Override plugins
    Object.defineProperty(navigator, 'plugins', {
        get: () => [1, 2, 3, 4, 5]
    });

    // Override languages
    Object.defineProperty(navigator, 'languages', {
        get: () => ['en-US', 'en']
    });

    // Override permissions
    const originalQuery = window.navigator.permissions.query;
    window.navigator.permissions.query = (parameters) => (
        parameters.name === 'notifications' ?
            Promise.resolve({ state: Notification.permission }) :
            originalQuery(parameters)
    );
"""

SCROLL_HEIGHT_JS = """
    (selector) => {
        const element = document.querySelector(selector);
        return element ? element.scrollHeight : 0;
    }
"""

SCROLL_BY_JS = """
    ([selector, pixels]) => {
        const element = document.querySelector(selector);
        if (element) {
            element.scrollTop += pixels;
        }
    }
"""


class StealthBrowser(BrowserSession):
    """
    Playwright Chromium session with anti-bot features.

    Features:
    - Automation-hiding init script plus playwright-stealth evasions
    - Network-idle navigation
    - Per-page user agent, header and viewport changes
    - Guaranteed cleanup with per-step timeouts
    """

    def __init__(self, options: Optional[SessionOptions] = None):
        """
        Initialize the stealth browser.

        Args:
            options: Launch options (headless, timeout, viewport, args)
        """
        self.options = options or SessionOptions()
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._cdp = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise SessionError("Browser session is not open")
        return self._page

    async def open(self):
        """Start Playwright, launch Chromium and prepare a stealth page."""
        if self._page is not None:
            return

        try:
            self._playwright = await async_playwright().start()

            logger.debug("Launching Chromium browser...")
            self._browser = await self._playwright.chromium.launch(
                headless=self.options.headless,
                args=list(self.options.launch_args),
                handle_sigint=False,
                handle_sigterm=False,
                handle_sighup=False,
            )

            if not self._browser.is_connected():
                raise SessionError("Browser launched but not connected")

            self._context = await self._browser.new_context(
                viewport={
                    'width': self.options.viewport_width,
                    'height': self.options.viewport_height,
                },
                locale='en-US',
                timezone_id='America/Chicago',
            )
            await self._context.add_init_script(STEALTH_INIT_SCRIPT)

            self._page = await self._context.new_page()
            await Stealth().apply_stealth_async(self._page)
            logger.debug("Browser initialization successful")

        except Exception as e:
            logger.error(f"Failed to initialize browser: {e}")
            # Clean up partial initialization
            await self._cleanup()
            if isinstance(e, SessionError):
                raise
            raise SessionError(f"Failed to start browser session: {e}") from e

    async def _cleanup(self) -> List[str]:
        """
        Close page, context, browser and Playwright with timeouts.

        Returns:
            Descriptions of the steps that failed
        """
        cleanup_timeout = 2.0  # 2 second timeout per cleanup operation
        failures = []

        steps = [
            ('page', self._page, lambda r: r.close()),
            ('context', self._context, lambda r: r.close()),
            ('browser', self._browser, lambda r: r.close()),
            ('playwright', self._playwright, lambda r: r.stop()),
        ]
        for name, resource, closer in steps:
            if resource is None:
                continue
            try:
                await asyncio.wait_for(closer(resource), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Closing {name} timed out, forcing cleanup")
                failures.append(f"{name}: timed out")
            except Exception as e:
                logger.warning(f"Error closing {name}: {e}")
                failures.append(f"{name}: {e}")

        self._page = None
        self._cdp = None
        self._context = None
        self._browser = None
        self._playwright = None
        return failures

    async def close(self):
        """Close the browser and cleanup resources."""
        failures = await self._cleanup()
        if failures:
            raise SessionError(f"Browser session closed abnormally ({'; '.join(failures)})")

    async def navigate(self, url: str):
        """
        Load a URL and wait until the network is idle.

        Args:
            url: URL to load

        Raises:
            NavigationError: On timeout or unreachable host
        """
        timeout_ms = int(self.options.timeout * 1000)
        try:
            response = await self.page.goto(url, wait_until='networkidle', timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationError(url, f"network did not go idle within {self.options.timeout}s") from e
        except PlaywrightError as e:
            raise NavigationError(url, str(e)) from e

        # Blocked pages still render; extraction decides what is on them
        if response is not None and response.status >= 400:
            logger.warning(f"HTTP {response.status} for {url}")

    async def apply_profile(self, profile: EvasionProfile):
        """Apply user agent, extra headers and viewport to the page."""
        page = self.page
        if self._cdp is None:
            self._cdp = await self._context.new_cdp_session(page)
        await self._cdp.send('Network.setUserAgentOverride', {'userAgent': profile.user_agent})
        await page.set_extra_http_headers(profile.headers)
        await page.set_viewport_size({
            'width': profile.viewport_width,
            'height': profile.viewport_height,
        })
        logger.debug(
            f"Applied profile {profile.viewport_width}x{profile.viewport_height}, UA: {profile.user_agent[:50]}..."
        )

    async def document(self) -> SoupDocument:
        """Snapshot the rendered page as a parsed document."""
        html = await self.page.content()
        return SoupDocument(BeautifulSoup(html, 'html.parser'))

    async def has_element(self, selector: str) -> bool:
        try:
            return await self.page.query_selector(selector) is not None
        except PlaywrightError as e:
            logger.debug(f"Selector {selector} lookup failed: {e}")
            return False

    async def scroll_height(self, selector: str) -> int:
        try:
            return int(await self.page.evaluate(SCROLL_HEIGHT_JS, selector) or 0)
        except PlaywrightError as e:
            logger.debug(f"Could not measure {selector}: {e}")
            return 0

    async def scroll_by(self, selector: str, pixels: int):
        try:
            await self.page.evaluate(SCROLL_BY_JS, [selector, pixels])
        except PlaywrightError as e:
            logger.debug(f"Could not scroll {selector}: {e}")
