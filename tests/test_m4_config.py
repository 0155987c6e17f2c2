from __future__ import annotations

import pytest
import typer

from moonshot_tracker.m4.config import goal_hours_from_env, load_config_from_env


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("HACKATIME_API_TOKEN", raising=False)
    monkeypatch.delenv("HACKATIME_API_URL", raising=False)
    monkeypatch.delenv("MOONSHOT_GOAL_HOURS", raising=False)

    cfg = load_config_from_env()
    assert cfg.api_token == ""
    assert cfg.base_url == "https://hackatime.hackclub.com/api"
    assert goal_hours_from_env() == 75.0


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("HACKATIME_API_TOKEN", "t")
    monkeypatch.setenv("HACKATIME_API_URL", "http://localhost:3000/api/")
    monkeypatch.setenv("MOONSHOT_GOAL_HOURS", "12.5")

    cfg = load_config_from_env()
    assert cfg.api_token == "t"
    assert cfg.base_url == "http://localhost:3000/api"
    assert goal_hours_from_env() == 12.5


@pytest.mark.parametrize("raw", ["abc", "0", "-3", "nan"])
def test_bad_goal_hours(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("MOONSHOT_GOAL_HOURS", raw)
    with pytest.raises(typer.BadParameter):
        goal_hours_from_env()
