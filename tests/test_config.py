from __future__ import annotations

import pytest
from pydantic import ValidationError

from feedbot.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.BLOCK_TIME_S == pytest.approx(2.0)
    assert settings.SCRAPE_LIMIT == 100
    assert settings.TRANSPORT == "mock"


def test_watch_users_parsed_from_env(monkeypatch):
    monkeypatch.setenv("FEEDBOT_WATCH_USERS", " alice, bob ,,carol")
    assert Settings().watch_users == ["alice", "bob", "carol"]


@pytest.mark.parametrize("field,value", [("BLOCK_TIME_S", 0), ("SCRAPE_LIMIT", 500)])
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("FEEDBOT_LOG_LEVEL", " debug ")
    assert Settings().LOG_LEVEL == "DEBUG"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty")
