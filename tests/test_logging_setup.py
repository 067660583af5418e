"""
Tests for logging configuration.
"""

import json
import logging
import sys

from lzjd.utils.logging_setup import JSONFormatter, get_logger, log_operation, setup_logging


class TestLogging:

    def teardown_method(self):
        setup_logging()

    def test_module_loggers_propagate_to_package_logger(self):
        root = setup_logging(level="DEBUG", console=False)
        logger = get_logger("lzjd.engine.comparator")
        assert logger.getEffectiveLevel() == logging.DEBUG
        assert root.propagate is False

    def test_json_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "lzjd.log"
        root = setup_logging(level="INFO", log_file=log_file, console=False)
        log_operation(get_logger("lzjd.test"), "hash_sources", count=3)
        for handler in root.handlers:
            handler.flush()
        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["operation"] == "hash_sources"
        assert entry["count"] == 3
        assert entry["level"] == "INFO"
        for handler in root.handlers:
            handler.close()

    def test_json_formatter_exception(self):
        try:
            raise RuntimeError("bad")
        except RuntimeError:
            record = logging.getLogger("lzjd").makeRecord(
                "lzjd", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "failed"
        assert "RuntimeError: bad" in data["exception"]
