from pathlib import Path

from coffee_guide.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.presets_path.name == "presets.json"
    assert settings.weather_base_url == "https://api.open-meteo.com/v1/forecast"
    assert settings.default_latitude is None


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("COFFEE_GUIDE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("COFFEE_GUIDE_PRESETS_FILE", "mine.json")
    monkeypatch.setenv("COFFEE_GUIDE_WEATHER_TIMEOUT", "2.5")

    settings = Settings()

    assert settings.presets_path == Path(tmp_path) / "mine.json"
    assert settings.weather_timeout == 2.5
