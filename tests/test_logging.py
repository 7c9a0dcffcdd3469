"""
Tests for secure logging setup.
"""
import logging

import pytest

from lockbox.core.config import LockboxConfig, LoggingConfig, PathConfig
from lockbox.core.logging import SecureLogFilter, configure_logging, get_secure_logger


def make_record(msg, args=()):
    return logging.LogRecord("lockbox.test", logging.WARNING, __file__, 1, msg, args, None)


@pytest.fixture
def fresh_logger():
    created = []

    def factory(name, **kwargs):
        logger = get_secure_logger(name, **kwargs)
        created.append(logger)
        return logger

    yield factory
    for logger in created:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


class TestSecureLogFilter:

    def test_redacts_password_assignment(self):
        record = make_record("login with password=hunter2 failed")
        SecureLogFilter().filter(record)
        assert "hunter2" not in record.getMessage()
        assert "[REDACTED]" in record.getMessage()

    def test_redacts_arguments(self):
        record = make_record("keyring said: %s", ("token: abcdef",))
        SecureLogFilter().filter(record)
        assert "abcdef" not in record.getMessage()

    def test_redacts_long_hex(self):
        record = make_record("key %s", ("ab" * 32,))
        SecureLogFilter().filter(record)
        assert "ab" * 32 not in record.getMessage()

    def test_plain_message_untouched(self):
        record = make_record("Vault unlocked: %s (%d entries)", ("/tmp/a.vault", 3))
        SecureLogFilter().filter(record)
        assert record.getMessage() == "Vault unlocked: /tmp/a.vault (3 entries)"

    def test_always_keeps_record(self):
        assert SecureLogFilter().filter(make_record("anything")) is True


class TestGetSecureLogger:

    def test_no_duplicate_handlers(self, fresh_logger):
        first = fresh_logger("lockbox.test.dupes")
        handlers = len(first.handlers)
        second = fresh_logger("lockbox.test.dupes")
        assert first is second
        assert len(second.handlers) == handlers == 1

    def test_file_handler(self, fresh_logger, tmp_path):
        logger = fresh_logger(
            "lockbox.test.file",
            log_dir=tmp_path,
            level="INFO",
            enable_console=False,
            enable_file=True,
        )
        logger.info("secret=topsecret opened")
        for handler in logger.handlers:
            handler.flush()

        content = (tmp_path / "lockbox_test_file.log").read_text(encoding="utf-8")
        assert "opened" in content
        assert "topsecret" not in content

    def test_level(self, fresh_logger):
        logger = fresh_logger("lockbox.test.level", level="debug")
        assert logger.level == logging.DEBUG
        assert logger.propagate is False


class TestConfigureLogging:

    def test_uses_config(self, tmp_path):
        config = LockboxConfig(
            paths=PathConfig(config_dir=tmp_path / "config", log_dir=tmp_path / "logs"),
            logging=LoggingConfig(level="ERROR", enable_console=True),
        )
        logger = logging.getLogger("lockbox")
        saved = (list(logger.handlers), logger.level, logger.propagate)
        for handler in saved[0]:
            logger.removeHandler(handler)
        try:
            configured = configure_logging(config)
            assert configured is logger
            assert configured.level == logging.ERROR
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
            for handler in saved[0]:
                logger.addHandler(handler)
            logger.setLevel(saved[1])
            logger.propagate = saved[2]
