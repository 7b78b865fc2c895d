"""
Site configurations for listing search sources.

Each site has a SiteConfig that defines:
- Base URL used for search and next-page links
- CSS selectors for listing cards, details and pagination
- Page budget and scroll stabilization policy
"""

from .base import SiteConfig


# ============================================================
# SITE CONFIGURATIONS
# ============================================================

SITES = {
    'zillow': SiteConfig(
        name='Zillow',
        short_name='ZILLOW',
        base_url='https://www.zillow.com',
        selectors={
            # Lazily rendered results column
            'scroll_container': '#search-page-list-container',
            'listing_card': 'ul.List-c11n-8-107-0__sc-1smrmqp-0 > li',
            'price': '[data-test="property-card-price"]',
            'address': 'address[data-test="property-card-addr"]',
            'details': 'ul.StyledPropertyCardHomeDetailsList-c11n-8-107-0__sc-1j0som5-0 > li',
            'detail_value': 'b',
            'next_page': 'a[rel="next"]',
            # PerimeterX challenge widget
            'challenge': '#px-captcha',
        },
        page_limit=3,
        scroll_step_px=1000,
        scroll_delay_seconds=2.0,
        scroll_min_attempts=5,
        scroll_max_attempts=30,
        enabled=True,
    ),
}


def get_site_config(site_key: str) -> SiteConfig:
    """
    Get configuration for a site by its key.

    Args:
        site_key: Site identifier (e.g., 'zillow')

    Returns:
        SiteConfig for the site

    Raises:
        ValueError: If site_key is not found
    """
    if site_key not in SITES:
        valid_keys = ', '.join(sorted(SITES.keys()))
        raise ValueError(f"Unknown site: '{site_key}'. Valid sites: {valid_keys}")
    return SITES[site_key]


def get_enabled_sites() -> dict:
    """Get all enabled sites."""
    return {k: v for k, v in SITES.items() if v.enabled}


def list_sites() -> list:
    """List all site keys."""
    return list(SITES.keys())


def get_site_summary() -> list:
    """Get a summary of all sites for display."""
    summary = []
    for key, config in SITES.items():
        summary.append({
            'key': key,
            'name': config.name,
            'short_name': config.short_name,
            'enabled': config.enabled,
            'url': config.base_url,
            'page_limit': config.page_limit,
        })
    return summary
