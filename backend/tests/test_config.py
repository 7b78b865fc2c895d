"""
Tests for application and site configuration.
"""

import pytest


class TestSettings:
    """Test the Settings configuration class."""

    def test_settings_defaults(self):
        """Test that settings have sensible defaults."""
        from api.config import Settings

        settings = Settings(_env_file=None)

        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 3000
        assert settings.api_debug is False
        assert settings.scraper_headless is True
        assert settings.scraper_timeout == 30
        assert settings.scraper_max_pages == 3
        assert settings.scraper_scroll_delay == 2.0
        assert settings.log_level == "INFO"

    def test_settings_env_override(self, monkeypatch):
        """Test that environment variables override defaults."""
        from api.config import Settings

        monkeypatch.setenv("SCRAPER_MAX_PAGES", "1")
        monkeypatch.setenv("SCRAPER_HEADLESS", "false")

        settings = Settings(_env_file=None)

        assert settings.scraper_max_pages == 1
        assert settings.scraper_headless is False

    def test_settings_rejects_zero_max_pages(self, monkeypatch):
        """Test that a page budget below one is a configuration error."""
        from pydantic import ValidationError
        from api.config import Settings

        monkeypatch.setenv("SCRAPER_MAX_PAGES", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_settings_cors_origins(self):
        """Test that CORS origins are configured."""
        from api.config import settings

        assert isinstance(settings.cors_origins, list)
        assert len(settings.cors_origins) > 0

    def test_settings_log_paths(self):
        """Test that log paths are valid."""
        from api.config import settings

        assert settings.log_dir is not None
        assert settings.log_file.name == "backend.log"

    def test_listings_file_default(self):
        """Test that results go to data/listings.json by default."""
        from api.config import Settings

        settings = Settings(_env_file=None, output_file=None)

        assert settings.listings_file == settings.data_dir / "listings.json"
        assert "data" in str(settings.data_dir)

    def test_listings_file_override(self, tmp_path):
        from api.config import Settings

        target = tmp_path / "zillow_data.json"
        settings = Settings(_env_file=None, output_file=str(target))

        assert settings.listings_file == target


class TestSiteConfig:
    """Test site configurations."""

    def test_zillow_config(self):
        from scrapers.config import get_site_config

        config = get_site_config('zillow')

        assert config.page_limit == 3
        assert config.scroll_step_px == 1000
        assert config.scroll_min_attempts == 5
        assert config.scroll_max_attempts >= config.scroll_min_attempts
        for key in ('scroll_container', 'listing_card', 'price', 'address', 'details', 'detail_value', 'next_page'):
            assert key in config.selectors

    def test_search_url(self):
        from scrapers.config import get_site_config

        config = get_site_config('zillow')

        assert config.search_url('austin-tx') == "https://www.zillow.com/austin-tx/"

    def test_unknown_site(self):
        from scrapers.config import get_site_config

        with pytest.raises(ValueError):
            get_site_config('redfin')

    def test_site_summary(self):
        from scrapers.config import get_site_summary, list_sites

        assert list_sites() == ['zillow']
        assert get_site_summary()[0]['url'] == "https://www.zillow.com"
