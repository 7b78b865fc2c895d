"""
Scraper Manager - orchestrates site scrapers.

Provides a unified interface for running a scrape for a location with
shared settings (page budget, timeouts, output file). Every run gets its
own scraper instance and browser session.
"""

from typing import Callable, Dict, List, Optional, Type, Union
from pathlib import Path
import logging

from .base import BaseScraper, BrowserSession, ListingRecord, SessionOptions
from .config import SITES, get_enabled_sites, get_site_config
from .sites.zillow import ZillowScraper
from .utils.storage import JsonResultSink

logger = logging.getLogger(__name__)


# Registry of implemented scrapers
SCRAPER_REGISTRY: Dict[str, Type[BaseScraper]] = {
    'zillow': ZillowScraper,
}


class ScraperManager:
    """
    Manages site scrapers.

    Usage:
        manager = ScraperManager(output_file='data/listings.json')

        # Scrape a location
        listings = await manager.scrape_location('austin-tx')

        # Check status
        status = manager.list_scrapers()
    """

    def __init__(
        self,
        output_file: Optional[Union[str, Path]] = None,
        timeout: float = 30.0,
        max_pages: Optional[int] = None,
        scroll_delay: Optional[float] = None,
        session_factory: Optional[Callable[[SessionOptions], BrowserSession]] = None,
    ):
        """
        Initialize the scraper manager.

        Args:
            output_file: JSON file that receives each successful run (None disables)
            timeout: Navigation timeout in seconds
            max_pages: Page budget override
            scroll_delay: Scroll step delay override in seconds
            session_factory: Browser session factory override
        """
        self.sink = JsonResultSink(output_file) if output_file else None
        self.timeout = timeout
        self.max_pages = max_pages
        self.scroll_delay = scroll_delay
        self.session_factory = session_factory

    def get_scraper(self, site_key: str) -> BaseScraper:
        """
        Get a fresh scraper instance for a site.

        Args:
            site_key: Site identifier (e.g., 'zillow')

        Raises:
            ValueError: If no scraper is implemented for the site, or the site is disabled
        """
        if site_key not in SCRAPER_REGISTRY:
            raise ValueError(f"Scraper not implemented for site: {site_key}")
        if site_key not in get_enabled_sites():
            raise ValueError(f"Site is disabled: {site_key}")

        scraper_class = SCRAPER_REGISTRY[site_key]
        return scraper_class(
            config=get_site_config(site_key),
            session_factory=self.session_factory,
            sink=self.sink,
            page_limit=self.max_pages,
            scroll_delay=self.scroll_delay,
        )

    async def scrape_location(
        self,
        location_id: str,
        headless: bool = True,
        site_key: str = 'zillow',
    ) -> List[ListingRecord]:
        """
        Run a scrape for one location.

        Args:
            location_id: Location slug (e.g., 'austin-tx')
            headless: Run browser in headless mode
            site_key: Site identifier

        Returns:
            Extracted listing records

        Raises:
            ScraperError: On invalid input, session or navigation failure
        """
        scraper = self.get_scraper(site_key)
        logger.info(f"Starting scrape for {scraper.config.name} ({location_id})")
        options = SessionOptions(headless=headless, timeout=self.timeout)
        return await scraper.run(location_id, options)

    def list_scrapers(self) -> List[Dict]:
        """
        List all configured sites and their implementation status.

        Returns:
            List of site info dictionaries
        """
        scrapers = []
        for key, config in SITES.items():
            scrapers.append({
                'key': key,
                'name': config.name,
                'short_name': config.short_name,
                'enabled': config.enabled,
                'implemented': key in SCRAPER_REGISTRY,
                'url': config.base_url,
            })
        return scrapers

    def get_implemented_scrapers(self) -> List[str]:
        """Get list of implemented scraper keys."""
        return list(SCRAPER_REGISTRY.keys())

