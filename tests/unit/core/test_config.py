"""Unit tests for configuration module."""

from core.config import Settings, settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_project_name_default(self):
        """Project name has expected default value."""
        assert settings.PROJECT_NAME == "Accountable Notes"

    def test_api_v1_str_default(self):
        """API version string has expected default value."""
        assert settings.API_V1_STR == "/api/v1"

    def test_stamping_enabled_by_default(self):
        assert settings.ACCOUNTABLE_ENABLED is True

    def test_no_anonymous_user_by_default(self):
        assert settings.ACCOUNTABLE_ANONYMOUS_USER is None

    def test_anonymous_user_from_environment(self, monkeypatch):
        """The anonymous fallback is read from a JSON environment variable."""
        monkeypatch.setenv("ACCOUNTABLE_ANONYMOUS_USER", '{"name": "Birmingham Bertie"}')
        assert Settings().ACCOUNTABLE_ANONYMOUS_USER == {"name": "Birmingham Bertie"}

    def test_stamping_can_be_disabled_from_environment(self, monkeypatch):
        monkeypatch.setenv("ACCOUNTABLE_ENABLED", "false")
        assert Settings().ACCOUNTABLE_ENABLED is False

    def test_cors_origins_list(self):
        custom = Settings(CORS_ORIGINS="http://a.test, http://b.test,")
        assert custom.cors_origins_list == ["http://a.test", "http://b.test"]
