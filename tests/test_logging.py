"""Tests for logging setup."""

import json
import logging

from docker_tenant.utils.logging import NOISY_LOGGERS, JsonFormatter, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_noisy_loggers_quiet(self):
        """Test transport loggers are raised to WARNING outside debug."""
        setup_logging(level="INFO", rich_console=False)

        assert logging.getLogger().level == logging.INFO
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_keeps_noisy_loggers(self):
        """Test DEBUG leaves transport loggers alone."""
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)

        setup_logging(level="DEBUG", rich_console=False)

        assert logging.getLogger("urllib3").level == logging.NOTSET

    def test_log_file(self, tmp_path):
        """Test records are also written to the log file."""
        log_file = tmp_path / "logs" / "engine.log"
        setup_logging(level="INFO", log_file=log_file, rich_console=False)

        logging.getLogger("docker_tenant.test").info("Created container mc_srv")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Created container mc_srv" in log_file.read_text()


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format(self):
        """Test records render as one JSON object."""
        record = logging.LogRecord(
            "docker_tenant.engine.client", logging.WARNING, __file__, 1, "Failed", None, None
        )
        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "docker_tenant.engine.client"
        assert data["message"] == "Failed"
