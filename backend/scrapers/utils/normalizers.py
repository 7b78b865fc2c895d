"""
Data normalization utilities for scrapers.

Listing fields keep the source text as-is (currency symbols, units,
abbreviations); normalization is limited to trimming.
"""

from typing import Optional


def clean_text(text: Optional[str]) -> Optional[str]:
    """
    Trim surrounding whitespace, returning None for missing or blank text.

    Examples:
        '  $450,000 ' -> '$450,000'
        '\\n\\t' -> None
        None -> None
    """
    if text is None:
        return None
    text = text.strip()
    return text or None


def normalize_location(location_id: Optional[str]) -> Optional[str]:
    """
    Normalize a location identifier for use in a search URL.

    Strips whitespace and surrounding slashes; internal text is kept.

    Examples:
        ' austin-tx ' -> 'austin-tx'
        '/austin-tx/' -> 'austin-tx'
        '   ' -> None
    """
    if location_id is None:
        return None
    return clean_text(location_id.strip().strip('/'))
