"""Tests for application settings."""

import pytest

from app.core.config import Settings, get_settings, load_settings_from_env


class TestSettings:
    """Tests for Settings validation and properties."""
    
    def test_defaults(self):
        """Defaults use in-memory persistence."""
        settings = Settings()
        
        assert settings.use_memory_persistence is True
        assert settings.database_url is None
        assert settings.sync_debounce_seconds == 0.3
        assert settings.is_production is False
    
    def test_database_required_without_memory(self):
        """Disabling memory persistence requires DATABASE_URL."""
        with pytest.raises(ValueError, match="DATABASE_URL"):
            Settings(use_memory_persistence=False)
    
    def test_negative_debounce_rejected(self):
        """Debounce cannot be negative."""
        with pytest.raises(ValueError):
            Settings(sync_debounce_seconds=-1)
    
    def test_async_database_url(self):
        """Plain postgresql URLs select asyncpg."""
        settings = Settings(database_url="postgresql://u:p@db:5432/arr")
        
        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/arr"
    
    def test_async_database_url_explicit_driver(self):
        """URLs with a driver are left alone."""
        url = "postgresql+asyncpg://u:p@db/arr"
        
        assert Settings(database_url=url).async_database_url == url


class TestLoadSettingsFromEnv:
    """Tests for environment loading."""
    
    def test_reads_environment(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("APP_NAME", "Boards")
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("USE_MEMORY_PERSISTENCE", "false")
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/arr")
        monkeypatch.setenv("SYNC_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("LOG_FORMAT", "json")
        
        settings = load_settings_from_env()
        
        assert settings.app_name == "Boards"
        assert settings.is_production is True
        assert settings.use_memory_persistence is False
        assert settings.sync_timeout_seconds == 2.5
        assert settings.log_format == "json"
    
    def test_get_settings_cached(self):
        """get_settings returns the same instance until the cache is cleared."""
        assert get_settings() is get_settings()
