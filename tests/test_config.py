import pytest

from config import ConfigError, Settings, load_settings


def test_defaults(monkeypatch):
    for name in ("POST_TIME_HOUR", "POST_TIME_MINUTE", "SCRAPE_SOURCES", "API_URL", "DRY_RUN"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.post_time == "09:00"
    assert settings.scrape_sources == ["hypebeast", "24hiphop"]
    assert settings.api_url == "http://localhost:3000"
    assert settings.dry_run is False
    settings.validate()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("POST_TIME_HOUR", "18")
    monkeypatch.setenv("POST_TIME_MINUTE", "5")
    monkeypatch.setenv("SCRAPE_SOURCES", " 24hiphop , hypebeast ,")
    monkeypatch.setenv("API_URL", "https://blog.test/")
    monkeypatch.setenv("DRY_RUN", "yes")
    settings = load_settings()
    assert settings.post_time == "18:05"
    assert settings.scrape_sources == ["24hiphop", "hypebeast"]
    assert settings.api_url == "https://blog.test"
    assert settings.dry_run is True


def test_non_integer_hour_is_a_config_error(monkeypatch):
    monkeypatch.setenv("POST_TIME_HOUR", "nine")
    with pytest.raises(ConfigError):
        load_settings()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"post_time_hour": 24},
        {"post_time_minute": 60},
        {"scrape_sources": []},
        {"request_timeout": 0},
    ],
)
def test_validate_rejects_out_of_range(kwargs):
    with pytest.raises(ConfigError):
        Settings(**kwargs).validate()
