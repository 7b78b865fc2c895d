"""Shared utilities for scrapers."""

from .normalizers import (
    clean_text,
    normalize_location,
)
from .extractors import (
    ListingExtractor,
    find_next_page,
    is_challenge_page,
)
from .storage import JsonResultSink

__all__ = [
    'clean_text',
    'normalize_location',
    'ListingExtractor',
    'find_next_page',
    'is_challenge_page',
    'JsonResultSink',
]
