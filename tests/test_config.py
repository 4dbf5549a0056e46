import logging
from pathlib import Path

from luminary.config import Settings
from luminary.custom_logging import log_throttled, setup_logging


def test_settings_defaults():
    settings = Settings()
    assert settings.debounce_interval == 0.1
    assert settings.write_timeout == 5.0
    assert settings.port == 5001


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("LUMINARY_DEBOUNCE_MS", "250")
    monkeypatch.setenv("LUMINARY_WRITE_TIMEOUT", "0")
    monkeypatch.setenv("LUMINARY_PORT", "6000")
    monkeypatch.setenv("LUMINARY_DEBUG_WRITES", "yes")
    monkeypatch.setenv("LUMINARY_DEBUG_FILE", str(tmp_path / "writes.log"))
    monkeypatch.setenv("LUMINARY_LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.debounce_interval == 0.25
    assert settings.write_timeout is None
    assert settings.port == 6000
    assert settings.debug_writes is True
    assert settings.debug_file == Path(tmp_path / "writes.log")
    assert settings.log_level == "DEBUG"


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "luminary.log"
    logger = setup_logging(logging.DEBUG, log_file)
    logging.getLogger("luminary.test").info("hello lights")
    for handler in logger.handlers:
        handler.flush()
    assert "hello lights" in log_file.read_text()
    setup_logging(logging.INFO)


def test_log_throttled_suppresses_repeats(caplog):
    logger = logging.getLogger("luminary.throttle-test")
    with caplog.at_level(logging.WARNING, logger="luminary.throttle-test"):
        assert log_throttled(logger, "throttle-key", interval_s=60, level=logging.WARNING, msg="first")
        assert not log_throttled(logger, "throttle-key", interval_s=60, level=logging.WARNING, msg="second")
        assert log_throttled(logger, "other-key", interval_s=60, level=logging.WARNING, msg="third")
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["first", "third"]
