"""
Zillow search results scraper.

Site structure:
- Search page: https://www.zillow.com/<location>/ with a lazily rendered
  results column (#search-page-list-container)
- Listing cards: price, address and a positional details list (beds, baths, sqft)
- Pagination: a[rel="next"] with a site-relative href

Each page is loaded to network idle, scrolled until the results column stops
growing, given a new random identity, and then extracted. The run stops when
there is no next link or the page budget is used up.
"""

from typing import Awaitable, Callable, List, Optional
from datetime import datetime, timezone
from urllib.parse import urljoin

from ..base import (
    BaseScraper,
    BrowserSession,
    Colors,
    InvalidInput,
    ListingRecord,
    PaginationState,
    SessionOptions,
    SiteConfig,
)
from ..config import get_site_config
from ..crawlers.fingerprint import EvasionProfileGenerator
from ..crawlers.scroll import ScrollStabilizer
from ..crawlers.stealth import StealthBrowser
from ..utils.extractors import ListingExtractor, find_next_page, is_challenge_page
from ..utils.normalizers import normalize_location
from ..utils.storage import JsonResultSink

SessionFactory = Callable[[SessionOptions], BrowserSession]


class ZillowScraper(BaseScraper):
    """
    Pagination-and-extraction loop for Zillow search results.

    The browser session is opened once per run and always closed, whether
    the run completes or fails.
    """

    def __init__(
        self,
        config: Optional[SiteConfig] = None,
        session_factory: Optional[SessionFactory] = None,
        profile_generator: Optional[EvasionProfileGenerator] = None,
        sink: Optional[JsonResultSink] = None,
        page_limit: Optional[int] = None,
        scroll_delay: Optional[float] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Args:
            config: Site configuration (defaults to the 'zillow' entry)
            session_factory: Builds a BrowserSession from SessionOptions
            profile_generator: Source of per-page evasion profiles
            sink: Receives the records of a successful run
            page_limit: Overrides config.page_limit
            scroll_delay: Overrides config.scroll_delay_seconds
            sleep: Awaitable sleep used between scroll steps
        """
        super().__init__(config or get_site_config('zillow'))
        self.session_factory = session_factory or StealthBrowser
        self.profile_generator = profile_generator or EvasionProfileGenerator()
        self.extractor = ListingExtractor(self.config.selectors)
        self.sink = sink
        self.page_limit = self.config.page_limit if page_limit is None else page_limit
        if self.page_limit < 1:
            raise ValueError(f"page_limit must be at least 1, got {self.page_limit}")
        self.scroll_delay = self.config.scroll_delay_seconds if scroll_delay is None else scroll_delay
        self.sleep = sleep
        self.state: Optional[PaginationState] = None

    def _stabilizer(self, session: BrowserSession) -> ScrollStabilizer:
        return ScrollStabilizer(
            session,
            step_px=self.config.scroll_step_px,
            delay=self.scroll_delay,
            min_attempts=self.config.scroll_min_attempts,
            max_attempts=self.config.scroll_max_attempts,
            sleep=self.sleep,
        )

    async def run(self, location_id: str, options: Optional[SessionOptions] = None) -> List[ListingRecord]:
        """
        Scrape up to page_limit result pages for a location.

        Args:
            location_id: Location slug (e.g., 'austin-tx')
            options: Browser session options

        Returns:
            Records from every visited page, in page order

        Raises:
            InvalidInput: If location_id is blank
            SessionError: If the browser cannot be started
            NavigationError: If any page fails to load
        """
        location = normalize_location(location_id)
        if not location:
            raise InvalidInput("Location is required")

        run_info = self._start_run(location)
        self.state = PaginationState(
            current_url=self.config.search_url(location),
            page_limit=self.page_limit,
        )
        all_homes: List[ListingRecord] = []

        self.logger.info(f"Scraping: {self.state.current_url}")

        try:
            async with self.session_factory(options or SessionOptions()) as session:
                stabilizer = self._stabilizer(session)
                while self.state.active:
                    homes = await self._scrape_page(session, stabilizer)
                    all_homes.extend(homes)
                    run_info.pages_scraped += 1
        except Exception as e:
            self.logger.error(
                f"{Colors.red('[ERR]')} Scrape failed on page {self.state.page_index} for {location}: {e}"
            )
            raise

        run_info.total = len(all_homes)
        run_info.stop_reason = self.state.stop_reason
        run_info.completed_at = datetime.now(timezone.utc)

        if self.sink is not None:
            self.sink.save(all_homes)

        duration = run_info.duration_seconds or 0
        self.logger.info(
            f"Scrape complete in {duration:.1f}s: {Colors.green(f'{run_info.total} homes')} "
            f"from {run_info.pages_scraped} page(s), stopped by {run_info.stop_reason}"
        )
        self.logger.debug(f"Run summary: {run_info.to_dict()}")
        return all_homes

    async def _scrape_page(self, session: BrowserSession, stabilizer: ScrollStabilizer) -> List[ListingRecord]:
        """Load, stabilize, re-identify, extract and advance one page."""
        state = self.state
        page_url = state.current_url
        self.logger.info(f"{Colors.cyan('❯❯❯')} Scraping data from page {state.page_index}...")

        await session.navigate(page_url)
        await stabilizer.stabilize(self.config.selectors['scroll_container'])

        # Affects later requests only, so it happens after the page has loaded
        await session.apply_profile(self.profile_generator.next())

        document = await session.document()
        homes = self.extractor.extract(document)
        self.logger.info(f"Scraped page {state.page_index}, found {len(homes)} homes")

        if not homes:
            if is_challenge_page(document, self.config.selectors.get('challenge')):
                self.logger.warning(
                    f"{Colors.yellow('[WARN]')} Page {state.page_index} shows a bot challenge, no listings extracted"
                )
            else:
                self.logger.warning(f"{Colors.yellow('[WARN]')} No listings found on page {state.page_index}")

        href = find_next_page(document, self.config.selectors['next_page'])
        next_url = urljoin(page_url, href) if href else None
        state.advance(next_url)

        if state.current_url:
            self.logger.info(f"Moving to next page: {state.current_url}")
        elif next_url:
            self.logger.info(f"Page limit of {state.page_limit} reached, stopping scraping.")
        else:
            self.logger.info("No more pages, stopping scraping.")
        return homes
