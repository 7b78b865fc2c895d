"""Site-specific scraper implementations."""

from .zillow import ZillowScraper

__all__ = ['ZillowScraper']
