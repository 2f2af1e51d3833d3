from __future__ import annotations

from config import GeometrySettings, Settings
from config.settings import ScheduleSettings, TwitterSettings


def test_defaults() -> None:
    geometry = GeometrySettings()
    assert geometry.export_server_wait_msec == 30000
    assert TwitterSettings().query == "#legodiver"
    assert ScheduleSettings().interval_sec == 300.0


def test_env_prefixes(monkeypatch) -> None:
    monkeypatch.setenv("GEOMETRY_TICKET", "abc")
    monkeypatch.setenv("GEOMETRY_CUSTOMIZATION_MAX_WAIT_MSEC", "-1")
    monkeypatch.setenv("TWITTER_QUERY", "#other")
    monkeypatch.setenv("SCHEDULE_INTERVAL_SEC", "60")

    settings = Settings.load_from_env_file()

    assert settings.geometry.ticket == "abc"
    assert settings.geometry.customization_max_wait_msec == -1
    assert settings.twitter.query == "#other"
    assert settings.schedule.interval_sec == 60.0
