import logging

import pytest

from app import create_app
from config import configure_logging


def test_configure_logging_accepts_names():
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_rejects_unknown_name():
    with pytest.raises(ValueError, match="unknown log level 'loud'"):
        configure_logging("loud")


def test_app_reads_prefixed_env(monkeypatch):
    monkeypatch.setenv("HUFFVAULT_STRICT_DECODE", "false")
    monkeypatch.setenv("HUFFVAULT_LOG_LEVEL", "ERROR")
    app = create_app({"TESTING": True})
    assert app.config["STRICT_DECODE"] is False
    assert app.config["LOG_LEVEL"] == "ERROR"


def test_app_rejects_unknown_log_level(monkeypatch):
    monkeypatch.setenv("HUFFVAULT_LOG_LEVEL", "loud")
    with pytest.raises(ValueError, match="unknown log level"):
        create_app({"TESTING": True})
