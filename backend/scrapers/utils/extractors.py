"""
Data extraction utilities for scrapers.

These functions read listing cards and pagination links from a rendered
results page through the DocumentView interface.
"""

from typing import Dict, List, Optional

from ..base import DocumentView, ListingRecord


# Detail entries are positional: beds, baths, sqft
DETAIL_FIELDS = ('bedrooms', 'bathrooms', 'sqft')


class ListingExtractor:
    """
    Extracts ListingRecords from a results page.

    Every card matched by the card selector produces exactly one record.
    Missing sub-elements become None fields, never errors.
    """

    def __init__(self, selectors: Dict[str, str]):
        """
        Args:
            selectors: Site selectors with listing_card, price, address,
                details and detail_value keys
        """
        self.selectors = selectors

    def extract(self, document: DocumentView) -> List[ListingRecord]:
        """
        Extract all listing cards in document order.

        Args:
            document: Rendered results page

        Returns:
            One ListingRecord per card
        """
        return [
            self.parse_card(document, card)
            for card in document.find_all(self.selectors['listing_card'])
        ]

    def parse_card(self, document: DocumentView, card) -> ListingRecord:
        """Parse a single listing card element."""
        price = document.text(document.find_first(self.selectors['price'], card))
        address = document.text(document.find_first(self.selectors['address'], card))
        details = self._parse_details(document, card)

        return ListingRecord(
            price=price,
            address=address,
            **details,
        )

    def _parse_details(self, document: DocumentView, card) -> Dict[str, Optional[str]]:
        """
        Read beds/baths/sqft from the details list.

        Only populated when the list has at least three entries; otherwise
        all three fields are None even if some entries exist.
        """
        entries = document.find_all(self.selectors['details'], card)
        if len(entries) < len(DETAIL_FIELDS):
            return {name: None for name in DETAIL_FIELDS}

        values = {}
        for name, entry in zip(DETAIL_FIELDS, entries):
            value_el = document.find_first(self.selectors['detail_value'], entry)
            values[name] = document.text(value_el)
        return values


def find_next_page(document: DocumentView, selector: str) -> Optional[str]:
    """
    Return the raw href of the next-page link, or None.

    An empty or whitespace-only href counts as no link.
    """
    link = document.find_first(selector)
    if link is None:
        return None
    href = document.attribute(link, 'href')
    if href is None or not href.strip():
        return None
    return href.strip()


def is_challenge_page(document: DocumentView, selector: Optional[str]) -> bool:
    """Check for a known bot-challenge marker on the page."""
    if not selector:
        return False
    return document.matches(selector)
