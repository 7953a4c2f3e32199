import logging

import pytest

from flashcore import config
from flashcore.errors import ConfigurationError
from flashcore.logging_config import get_logger


def test_db_name_defaults(monkeypatch):
    monkeypatch.delenv("FLASHCORE_DB_NAME", raising=False)
    monkeypatch.delenv("FLASHCORE_TEST_MODE", raising=False)
    assert config.get_db_name() == "flashcards_app"


def test_test_mode_uses_separate_database(monkeypatch):
    monkeypatch.setenv("FLASHCORE_DB_NAME", "cards")
    monkeypatch.setenv("FLASHCORE_TEST_MODE", "true")
    assert config.is_test_mode()
    assert config.get_db_name() == "cards_test"


def test_missing_mongo_uri_raises(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)
    with pytest.raises(ConfigurationError):
        config.get_mongo_uri()


def test_default_user_id(monkeypatch):
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
    assert config.get_default_user_id() == "local"


def test_get_logger_adds_one_handler(monkeypatch):
    monkeypatch.setenv("FLASHCORE_LOG_LEVEL", "debug")

    first = get_logger("flashcore.test_logger")
    second = get_logger("flashcore.test_logger")

    assert first is second
    assert len(first.handlers) == 1
    assert first.level == logging.DEBUG
