"""Tests for Settings configuration."""

from unittest.mock import patch


class TestSettings:
    def test_default_values(self):
        """Settings loads with sane defaults."""
        with patch.dict("os.environ", {"HOST": "0.0.0.0", "PORT": "8000"}, clear=False):
            from src.live_auctioneer.config import Settings

            settings = Settings(_env_file=None)
            assert settings.host == "0.0.0.0"
            assert settings.port == 8000
            assert settings.did_api_url == "https://api.d-id.com"
            assert settings.max_upload_bytes == 10_485_760
            assert settings.poll_interval == 2.0
            assert settings.poll_max_attempts is None
            assert settings.presenter_list_limit == 4

    def test_override_from_env(self):
        with patch.dict(
            "os.environ",
            {
                "PORT": "9999",
                "DID_API_KEY": "abc:def",
                "POLL_INTERVAL": "0.5",
                "POLL_MAX_ATTEMPTS": "30",
                "FEATURED_AVATAR_NAME": "Jane",
                "FEATURED_AVATAR_IS_CUSTOM": "false",
            },
        ):
            from src.live_auctioneer.config import Settings

            settings = Settings(_env_file=None)
            assert settings.port == 9999
            assert settings.did_api_key == "abc:def"
            assert settings.poll_interval == 0.5
            assert settings.poll_max_attempts == 30
            assert settings.featured_avatar_name == "Jane"
            assert settings.featured_avatar_is_custom is False

    def test_did_configured(self):
        from src.live_auctioneer.config import Settings

        assert Settings(_env_file=None, did_api_key="key").did_configured is True
        assert Settings(_env_file=None, did_api_key="").did_configured is False
        assert Settings(_env_file=None, did_api_key="   ").did_configured is False


class TestPublicBaseUrl:
    def _settings(self, **kwargs):
        from src.live_auctioneer.config import Settings

        base = {"public_base_url": None, "vercel_url": None, "environment": "development"}
        base.update(kwargs)
        return Settings(_env_file=None, **base)

    def test_dev_default(self):
        assert self._settings().resolve_public_base_url() == "http://localhost:3000"

    def test_explicit_base_url_wins(self):
        settings = self._settings(public_base_url="https://auction.example/", vercel_url="x.app")
        assert settings.resolve_public_base_url() == "https://auction.example"

    def test_vercel_url(self):
        settings = self._settings(vercel_url="auction-git-main.vercel.app")
        assert settings.resolve_public_base_url() == "https://auction-git-main.vercel.app"

    def test_production(self):
        settings = self._settings(
            environment="production", production_base_url="https://auctions.example"
        )
        assert settings.resolve_public_base_url() == "https://auctions.example"
