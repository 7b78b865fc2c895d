"""
Base classes for the listing scraper system.

This module defines the data structures, error kinds and the abstract
capabilities (browser session, rendered document) used by all site scrapers.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


# ============================================================
# ERRORS
# ============================================================

class ScraperError(Exception):
    """Base class for errors that abort a scrape run."""


class InvalidInput(ScraperError):
    """Raised when the location identifier is missing or blank."""


class SessionError(ScraperError):
    """Raised when the browser session cannot be created or closed."""


class NavigationError(ScraperError):
    """Raised when a page fails to load within the quiescence window."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = f"Failed to load {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# ============================================================
# DATA MODEL
# ============================================================

@dataclass
class SiteConfig:
    """Configuration for a listing search site."""
    name: str                           # Full display name
    short_name: str                     # Logger / registry identifier (e.g., 'ZILLOW')
    base_url: str                       # Base URL for search and next-page links
    selectors: Dict[str, str] = field(default_factory=dict)  # CSS selectors
    page_limit: int = 3                 # Maximum result pages per run
    scroll_step_px: int = 1000          # Pixels scrolled per stabilization step
    scroll_delay_seconds: float = 2.0   # Pause after each scroll step
    scroll_min_attempts: int = 5        # Steps taken even if height is flat
    scroll_max_attempts: int = 30       # Hard bound on stabilization steps
    enabled: bool = True

    def search_url(self, location_id: str) -> str:
        """Build the first results page URL for a location."""
        return f"{self.base_url.rstrip('/')}/{location_id.strip('/')}/"


@dataclass(frozen=True)
class ListingRecord:
    """One scraped listing card. Fields hold raw trimmed text or None."""
    price: Optional[str] = None
    address: Optional[str] = None
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    sqft: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass(frozen=True)
class EvasionProfile:
    """Randomized browser identity applied to a page."""
    user_agent: str
    viewport_width: int
    viewport_height: int
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class SessionOptions:
    """Options used to launch a browser session."""
    headless: bool = True
    timeout: float = 30.0               # Navigation / network idle timeout in seconds
    viewport_width: int = 1280
    viewport_height: int = 800
    launch_args: List[str] = field(default_factory=lambda: [
        '--no-sandbox',
        '--disable-setuid-sandbox',
        '--disable-gpu',
        '--window-size=1280,800',
        '--disable-blink-features=AutomationControlled',
    ])


@dataclass
class ScrollState:
    """Height measurements for one scroll stabilization pass."""
    previous_height: int = 0
    current_height: int = 0
    attempts: int = 0

    @property
    def grew(self) -> bool:
        return self.current_height > self.previous_height


STOP_NO_NEXT_PAGE = 'no_next_page'
STOP_PAGE_LIMIT = 'page_limit'


@dataclass
class PaginationState:
    """Cursor over result pages. A None current_url ends the run."""
    current_url: Optional[str]
    page_index: int = 1
    page_limit: int = 3
    stop_reason: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.current_url is not None and self.page_index <= self.page_limit

    def advance(self, next_url: Optional[str]):
        """Move to the next page, or stop if there is none or the limit is reached."""
        if not next_url:
            self.stop(STOP_NO_NEXT_PAGE)
        elif self.page_index >= self.page_limit:
            self.stop(STOP_PAGE_LIMIT)
        else:
            self.current_url = next_url
            self.page_index += 1

    def stop(self, reason: str):
        self.current_url = None
        self.stop_reason = reason


@dataclass
class ScrapeRun:
    """Summary of a completed scrape run."""
    source: str
    location: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    pages_scraped: int = 0
    total: int = 0
    stop_reason: Optional[str] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'location': self.location,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'pages_scraped': self.pages_scraped,
            'total': self.total,
            'stop_reason': self.stop_reason,
        }


# ============================================================
# CAPABILITIES
# ============================================================

class DocumentView(ABC):
    """
    Read-only view of a rendered results page.

    Element handles returned by find_all/find_first are opaque and only
    meaningful to the view that produced them.
    """

    @abstractmethod
    def find_all(self, selector: str, root: Any = None) -> List[Any]:
        """Return all elements matching selector, in document order."""

    @abstractmethod
    def find_first(self, selector: str, root: Any = None) -> Optional[Any]:
        """Return the first element matching selector, or None."""

    @abstractmethod
    def text(self, element: Any) -> Optional[str]:
        """Return the trimmed text of element, or None if it has none."""

    @abstractmethod
    def attribute(self, element: Any, name: str) -> Optional[str]:
        """Return an attribute value of element, or None."""

    def matches(self, selector: str) -> bool:
        return self.find_first(selector) is not None


class BrowserSession(ABC):
    """
    A controlled browser with a single active page.

    Sessions are async context managers: the browser is released on every
    exit path.
    """

    @abstractmethod
    async def open(self):
        """Launch the browser. Raises SessionError on failure."""

    @abstractmethod
    async def close(self):
        """Release the browser. Raises SessionError if shutdown failed."""

    @abstractmethod
    async def navigate(self, url: str):
        """Load url and wait for network quiescence. Raises NavigationError."""

    @abstractmethod
    async def apply_profile(self, profile: EvasionProfile):
        """Apply user agent, headers and viewport for subsequent requests."""

    @abstractmethod
    async def document(self) -> DocumentView:
        """Snapshot the currently rendered page."""

    @abstractmethod
    async def has_element(self, selector: str) -> bool:
        """Check whether selector matches an element on the page."""

    @abstractmethod
    async def scroll_height(self, selector: str) -> int:
        """scrollHeight of the matching element, 0 if absent."""

    @abstractmethod
    async def scroll_by(self, selector: str, pixels: int):
        """Scroll the matching element down by pixels. No-op if absent."""

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            await self.close()
        except SessionError:
            # Don't mask the error that is already propagating
            if exc_type is None:
                raise
            logger.warning("Browser session did not close cleanly after a failed run")


class BaseScraper(ABC):
    """
    Abstract base class for all site scrapers.

    Subclasses must implement:
    - run(): Scrape all result pages for a location and return records
    """

    def __init__(self, config: SiteConfig):
        """
        Initialize the scraper.

        Args:
            config: Site configuration
        """
        self.config = config
        self.run_info: Optional[ScrapeRun] = None
        # Child loggers of 'scraper' inherit handlers configured in api/main.py
        self.logger = logging.getLogger(f"scraper.{config.short_name}")

    def _start_run(self, location_id: str) -> ScrapeRun:
        self.run_info = ScrapeRun(
            source=self.config.short_name,
            location=location_id,
            started_at=datetime.now(timezone.utc),
        )
        return self.run_info

    @abstractmethod
    async def run(self, location_id: str, options: Optional[SessionOptions] = None) -> List[ListingRecord]:
        """
        Scrape result pages for a location.

        Args:
            location_id: Site location slug (e.g., 'austin-tx')
            options: Browser session options

        Returns:
            Listing records from all visited pages, in page order
        """
        pass
