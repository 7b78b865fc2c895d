"""
Pytest configuration and fixtures for Home Search tests.

The browser is replaced by FakeBrowserSession, which serves canned HTML per
URL and simulates container scroll heights, so no browser is required.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_scraper_manager
from scrapers.base import BrowserSession, NavigationError, SessionError
from scrapers.crawlers.document import SoupDocument
from scrapers.manager import ScraperManager


BASE_URL = "https://www.zillow.com"
CARD_LIST_CLASS = "List-c11n-8-107-0__sc-1smrmqp-0"
DETAILS_LIST_CLASS = "StyledPropertyCardHomeDetailsList-c11n-8-107-0__sc-1j0som5-0"


# ============================================================
# HTML BUILDERS
# ============================================================

def card_html(price=None, address=None, details=None):
    """
    Build one listing card <li>.

    details is a list of (value, label) pairs; a None value renders the
    entry without its <b> element.
    """
    parts = []
    if price is not None:
        parts.append(f'<span data-test="property-card-price">{price}</span>')
    if address is not None:
        parts.append(f'<a href="/homedetails/1_zpid/"><address data-test="property-card-addr">{address}</address></a>')
    if details is not None:
        items = []
        for value, label in details:
            if value is None:
                items.append(f'<li><abbr>{label}</abbr></li>')
            else:
                items.append(f'<li><b>{value}</b> <abbr>{label}</abbr></li>')
        parts.append(f'<ul class="{DETAILS_LIST_CLASS}">{"".join(items)}</ul>')
    return f'<li><article class="property-card">{"".join(parts)}</article></li>'


def results_page(cards=(), next_href=None, challenge=False):
    """Build a search results page from card fragments."""
    next_link = f'<a rel="next" href="{next_href}" title="Next page">Next</a>' if next_href else ''
    captcha = '<div id="px-captcha"></div>' if challenge else ''
    return (
        '<html><body>'
        f'{captcha}'
        '<div id="search-page-list-container">'
        f'<ul class="{CARD_LIST_CLASS}">{"".join(cards)}</ul>'
        '</div>'
        f'<nav>{next_link}</nav>'
        '</body></html>'
    )


def full_card(n=1):
    return card_html(
        price=f"${n}50,000",
        address=f"{n}23 Main St, Austin, TX 78701",
        details=[("3", "bds"), ("2", "ba"), ("1,850", "sqft")],
    )


def page_url(location, n):
    if n == 1:
        return f"{BASE_URL}/{location}/"
    return f"{BASE_URL}/{location}/{n}_p/"


def chain_pages(location, count, cards_per_page=2):
    """Pages 1..count, each linking to the next with a relative href except the last."""
    pages = {}
    for n in range(1, count + 1):
        cards = [full_card(n) for _ in range(cards_per_page)]
        next_href = f"/{location}/{n + 1}_p/" if n < count else None
        pages[page_url(location, n)] = results_page(cards, next_href=next_href)
    return pages


# ============================================================
# FAKE BROWSER
# ============================================================

class FakeBrowserSession(BrowserSession):
    """In-memory BrowserSession that records every call."""

    def __init__(self, pages, options=None, fail_urls=(), heights=None,
                 container_present=True, fail_open=False, fail_close=False):
        self.pages = pages
        self.options = options
        self.fail_urls = set(fail_urls)
        self.heights = list(heights) if heights else [1000]
        self.container_present = container_present
        self.fail_open = fail_open
        self.fail_close = fail_close
        self.opened = False
        self.closed = False
        self.current_url = None
        self.navigations = []
        self.profiles = []
        self.events = []
        self.scrolls = 0
        self._height_index = 0

    async def open(self):
        if self.fail_open:
            raise SessionError("Chromium browser not found")
        self.opened = True

    async def close(self):
        self.closed = True
        if self.fail_close:
            raise SessionError("Browser session closed abnormally (browser: timed out)")

    async def navigate(self, url):
        self.events.append("navigate")
        self.navigations.append(url)
        if url in self.fail_urls or url not in self.pages:
            raise NavigationError(url, "net::ERR_CONNECTION_RESET")
        self.current_url = url

    async def apply_profile(self, profile):
        self.events.append("profile")
        self.profiles.append(profile)

    async def document(self):
        self.events.append("document")
        return SoupDocument(self.pages[self.current_url])

    async def has_element(self, selector):
        return self.container_present

    async def scroll_height(self, selector):
        height = self.heights[min(self._height_index, len(self.heights) - 1)]
        self._height_index += 1
        return height

    async def scroll_by(self, selector, pixels):
        self.events.append("scroll")
        self.scrolls += 1


class FakeSessionFactory:
    """Callable session factory that keeps every session it creates."""

    def __init__(self, pages=None, **session_kwargs):
        self.pages = pages if pages is not None else {}
        self.session_kwargs = session_kwargs
        self.sessions = []

    def __call__(self, options):
        session = FakeBrowserSession(self.pages, options=options, **self.session_kwargs)
        self.sessions.append(session)
        return session

    @property
    def navigations(self):
        return [url for s in self.sessions for url in s.navigations]


async def no_sleep(seconds):
    return None


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def austin_pages():
    """Single results page: one complete card and one price-only card."""
    return {
        page_url("austin-tx", 1): results_page([
            full_card(1),
            card_html(price="$325,000"),
        ]),
    }


@pytest.fixture
def session_factory(austin_pages):
    """Fake session factory serving the austin-tx page by default."""
    return FakeSessionFactory(austin_pages)


@pytest.fixture
def listings_file(tmp_path):
    return tmp_path / "listings.json"


@pytest.fixture(scope="function")
def client(session_factory, listings_file):
    """Create a test client whose scraper manager uses the fake browser."""
    def override_get_scraper_manager():
        return ScraperManager(
            output_file=listings_file,
            timeout=5,
            max_pages=3,
            scroll_delay=0,
            session_factory=session_factory,
        )

    app.dependency_overrides[get_scraper_manager] = override_get_scraper_manager

    # Use TestClient directly without context manager for compatibility
    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
