"""
Playwright-based listing scraper system for Home Search.

This module provides:
- A stealth browser session with per-page identity randomization
- Scroll stabilization for lazily loaded result lists
- Positional listing card extraction
- A paginating site scraper with a fixed page budget
"""

from .base import (
    BaseScraper,
    SiteConfig,
    ListingRecord,
    ScraperError,
    InvalidInput,
    SessionError,
    NavigationError,
)
from .config import SITES, get_site_config, get_enabled_sites
from .manager import ScraperManager

__all__ = [
    'BaseScraper',
    'SiteConfig',
    'ListingRecord',
    'ScraperError',
    'InvalidInput',
    'SessionError',
    'NavigationError',
    'SITES',
    'get_site_config',
    'get_enabled_sites',
    'ScraperManager',
]
