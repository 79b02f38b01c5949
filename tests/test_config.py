"""
Tests for configuration validation.
"""

from hangarlog.config import Config


class TestConfigValidate:
    """Test Config.validate"""

    def test_defaults_are_valid(self, monkeypatch):
        monkeypatch.setattr(Config, "HOME_LAT", None)
        monkeypatch.setattr(Config, "HOME_LON", None)
        monkeypatch.setattr(Config, "LOG_LEVEL", "INFO")
        monkeypatch.setattr(Config, "TOP_COUNTS_LIMIT", 10)
        monkeypatch.setattr(Config, "RECENT_FIRSTS_LIMIT", 10)
        monkeypatch.setattr(Config, "DATABASE_PATH", "hangarlog.db")
        monkeypatch.setattr(Config, "PHOTO_DIR", "photos")
        assert Config.validate() == []

    def test_home_location_range(self, monkeypatch):
        monkeypatch.setattr(Config, "HOME_LAT", 91.0)
        monkeypatch.setattr(Config, "HOME_LON", -181.0)
        errors = Config.validate()
        assert "HOME_LAT must be between -90 and 90" in errors
        assert "HOME_LON must be between -180 and 180" in errors

    def test_limits_must_be_positive(self, monkeypatch):
        monkeypatch.setattr(Config, "TOP_COUNTS_LIMIT", 0)
        monkeypatch.setattr(Config, "RECENT_FIRSTS_LIMIT", -1)
        errors = Config.validate()
        assert "TOP_COUNTS_LIMIT must be positive" in errors
        assert "RECENT_FIRSTS_LIMIT must be positive" in errors

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setattr(Config, "LOG_LEVEL", "CHATTY")
        assert "Unknown LOG_LEVEL: CHATTY" in Config.validate()

    def test_to_dict(self):
        data = Config.to_dict()
        assert data["DATABASE_PATH"] == Config.DATABASE_PATH
        assert data["TOP_COUNTS_LIMIT"] == Config.TOP_COUNTS_LIMIT
        assert "LOG_LEVEL" in data
