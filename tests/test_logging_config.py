"""Tests for structured logging configuration."""

import json
import logging

import structlog

from cli.logging_config import _redact_sensitive, setup_logging


class TestLoggingConfig:
    """Test structlog setup modes."""

    def test_console_mode(self):
        """Console mode configures a single stderr handler."""
        setup_logging(json_mode=False, level="DEBUG")
        structlog.get_logger().info("test message", key="value")
        assert len(logging.getLogger().handlers) == 1

    def test_json_mode(self):
        setup_logging(json_mode=True, level="DEBUG")
        logging.getLogger("test_json").info("json test")
        assert len(logging.getLogger().handlers) == 1

    def test_level_filtering(self):
        """Log level filters lower messages."""
        setup_logging(json_mode=False, level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_processor_chain_redacts(self):
        setup_logging(json_mode=True, level="DEBUG")
        assert _redact_sensitive in structlog.get_config()["processors"]

    def test_default_level_is_info(self):
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_log_file_receives_redacted_json(self, tmp_path):
        log_file = tmp_path / "logs" / "spendwatch.log"
        setup_logging(json_mode=False, level="INFO", log_file=log_file)
        assert len(logging.getLogger().handlers) == 2

        structlog.get_logger("test_file").warning("card_charged", card="4111111111111234")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "card_charged"
        assert record["card"] == "****1234"
        setup_logging()


class TestRedaction:
    def test_card_number_keeps_last_four(self):
        out = _redact_sensitive(None, None, {"event": "charge", "card": "4111 1111 1111 1234"})
        assert out["card"] == "****1234"
        assert out["event"] == "charge"

    def test_email(self):
        out = _redact_sensitive(None, None, {"event": "receipt sent to jane@example.com"})
        assert out["event"] == "receipt sent to REDACTED@email"

    def test_short_numbers_untouched(self):
        out = _redact_sensitive(None, None, {"merchant": "Store 1234", "amount": 19.99})
        assert out == {"merchant": "Store 1234", "amount": 19.99}
