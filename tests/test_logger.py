"""
Tests for logger functionality.
"""

import logging

import pytest

from statblock.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        logger = StructuredLogger(name="test", level="INFO", log_dir=tmp_path, enable_console=False)

        assert logger.logger.name == "test"
        assert logger.metrics["api_calls"] == 0

    def test_log_with_context_written_to_file(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.info("Stat block written", name="Hydra", path="Output/Hydra.json")

        log_files = list(tmp_path.glob("statblock_*.log"))
        assert len(log_files) == 1
        content = log_files[0].read_text()
        assert "Stat block written" in content
        assert '"name": "Hydra"' in content

    def test_lookup_metrics(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.record_api_call()
        logger.record_api_call()
        logger.record_lookup_attempt()
        logger.record_lookup_attempt()
        logger.record_lookup_success()
        logger.record_lookup_failure("Timeout")

        metrics = logger.get_metrics()
        assert metrics["api_calls"] == 2
        assert metrics["lookups_attempted"] == 2
        assert metrics["lookups_successful"] == 1
        assert metrics["lookups_failed"] == 1
        assert metrics["errors_by_type"] == {"Timeout": 1}

    def test_metrics_snapshot_is_detached(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        snapshot = logger.get_metrics()
        logger.record_lookup_failure("Timeout")
        assert snapshot["errors_by_type"] == {}

    def test_set_level(self, tmp_path):
        logger = StructuredLogger(name="test", level="INFO", log_dir=tmp_path)
        logger.set_level("debug")
        assert logger.logger.level == logging.DEBUG
        console = [h for h in logger.logger.handlers if not isinstance(h, logging.FileHandler)]
        assert all(h.level == logging.DEBUG for h in console)

    def test_unknown_level_rejected(self, tmp_path):
        with pytest.raises(AttributeError):
            StructuredLogger(name="test", level="LOUD", log_dir=tmp_path, enable_console=False)


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        reset_logger()
        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_api_call()

        reset_logger()
        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2.metrics["api_calls"] == 0
