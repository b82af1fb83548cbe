"""
Tests for logging configuration
"""

import importlib
import json
import logging

from geowidget.logging_config import JsonFormatter, setup_logging, trace_id_var


def test_json_formatter_includes_trace_id_and_extras():
    record = logging.LogRecord("geowidget.access", logging.INFO, __file__, 1, "HTTP %s", ("GET",), None)
    record.status = 200
    record.component = "access"
    token = trace_id_var.set("trace-123")
    try:
        entry = json.loads(JsonFormatter().format(record))
    finally:
        trace_id_var.reset(token)

    assert entry["msg"] == "HTTP GET"
    assert entry["level"] == "INFO"
    assert entry["trace_id"] == "trace-123"
    assert entry["status"] == 200
    assert entry["component"] == "access"
    assert entry["timestamp"].endswith("Z")


def test_setup_logging_defaults(tmp_path):
    config = setup_logging(log_level="debug", log_format="json", config_path=str(tmp_path / "none.yaml"))
    assert config["root"]["level"] == "DEBUG"
    assert config["handlers"]["console"]["formatter"] == "json"
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_from_yaml(tmp_path):
    path = tmp_path / "LOGGING.yaml"
    path.write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "root:\n"
        "  level: ERROR\n"
    )
    config = setup_logging(config_path=str(path))
    assert config["root"]["level"] == "ERROR"
    assert logging.getLogger().level == logging.ERROR


def test_importing_app_configures_logging(tmp_path, monkeypatch):
    import geowidget.main

    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "json")
    monkeypatch.setenv("LOGGING_CONFIG", str(tmp_path / "none.yaml"))
    logging.getLogger().setLevel(logging.CRITICAL)
    try:
        importlib.reload(geowidget.main)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
        assert logging.getLogger("geowidget").isEnabledFor(logging.DEBUG)
    finally:
        monkeypatch.undo()
        importlib.reload(geowidget.main)
