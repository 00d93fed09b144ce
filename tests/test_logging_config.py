import json
import logging

import pytest
import structlog

from emitterpro.config import Settings
from emitterpro.events import Emitter, emitter as emitter_module
from emitterpro.logging_config import configure_from_env, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()
    logging.basicConfig(force=True, level=logging.WARNING)


def test_json_output_to_file(tmp_path):
    log_file = tmp_path / "logs" / "emitter.log"
    configure_logging(level="DEBUG", json_output=True, log_file=log_file)

    get_logger("emitterpro.test").info("hello", answer=42)
    logging.getLogger().handlers[0].flush()

    record = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert record["event"] == "hello"
    assert record["answer"] == 42
    assert record["level"] == "info"
    assert record["logger"] == "emitterpro.test"


def test_emitter_logs_structured_events(tmp_path):
    log_file = tmp_path / "emitter.log"
    configure_logging(level="DEBUG", json_output=True, log_file=log_file)

    emitter = Emitter()
    emitter.on("ping", lambda: None)
    emitter.emit("ping")
    emitter.off("ping")
    logging.getLogger().handlers[0].flush()

    events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
    assert events == ["listener_added", "event_emitted", "event_removed"]


def test_listener_failure_is_logged_and_raised(tmp_path):
    log_file = tmp_path / "emitter.log"
    configure_logging(level="DEBUG", json_output=True, log_file=log_file)

    def boom():
        raise KeyError("boom")

    emitter = Emitter().on("ping", boom)
    with pytest.raises(KeyError):
        emitter.emit("ping")
    logging.getLogger().handlers[0].flush()

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    failed = [r for r in records if r["event"] == "listener_failed"]
    assert failed and failed[0]["event_name"] == "'ping'"


def test_configure_from_env(monkeypatch):
    monkeypatch.setenv("EMITTERPRO_LOG_LEVEL", "ERROR")
    settings = configure_from_env()
    assert settings.log_level == "ERROR"
    assert logging.getLogger().level == logging.ERROR


def test_configure_from_settings():
    settings = configure_from_env(Settings(log_level="DEBUG"))
    assert settings.log_level == "DEBUG"
    assert logging.getLogger().level == logging.DEBUG


def test_reconfigure_closes_previous_log_file(tmp_path):
    configure_logging(level="DEBUG", json_output=True, log_file=tmp_path / "a.log")
    first_stream = logging.getLogger().handlers[0].stream

    configure_logging(level="DEBUG", json_output=True, log_file=tmp_path / "b.log")

    assert first_stream.closed
    assert logging.getLogger().handlers[0].baseFilename == str(tmp_path / "b.log")


class RecordingLogger:
    def __init__(self, level):
        self.level = level
        self.events = []

    def isEnabledFor(self, level):
        return level >= self.level

    def debug(self, event, **kwargs):
        self.events.append(event)


def test_dispatch_skips_debug_records_when_disabled(monkeypatch):
    recording = RecordingLogger(logging.WARNING)
    monkeypatch.setattr(emitter_module, "logger", recording)

    emitter = Emitter().on("ping", lambda: None)
    for _ in range(3):
        emitter.emit("ping")

    assert recording.events == []


def test_dispatch_logs_debug_records_when_enabled(monkeypatch):
    recording = RecordingLogger(logging.DEBUG)
    monkeypatch.setattr(emitter_module, "logger", recording)

    emitter = Emitter().on("ping", lambda: None)
    emitter.emit("ping")
    emitter.emit("ping")

    assert recording.events == ["listener_added", "event_emitted", "event_emitted"]
