"""
Tests for package logging configuration.
"""

import logging
import tempfile
import unittest
from pathlib import Path

from media_api.logging_setup import log, setup_logging


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        self._urllib3_level = logging.getLogger("urllib3").level

    def tearDown(self):
        for handler in list(log.handlers):
            handler.close()
        log.handlers.clear()
        log.setLevel(logging.NOTSET)
        logging.getLogger("urllib3").setLevel(self._urllib3_level)

    def test_single_console_handler(self):
        setup_logging()
        setup_logging()
        self.assertEqual(len(log.handlers), 1)
        self.assertEqual(log.level, logging.INFO)

    def test_debug_raises_wire_logger_verbosity(self):
        setup_logging(debug=True)
        self.assertEqual(log.level, logging.DEBUG)
        self.assertEqual(logging.getLogger("urllib3").level, logging.DEBUG)

    def test_quiet_wire_logger_by_default(self):
        setup_logging()
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)

    def test_log_file_captures_debug(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "media-api.log"
            setup_logging(log_file=str(path))
            log.debug("cURL request: curl -X GET https://api.example.com/items")
            for handler in log.handlers:
                handler.flush()
            self.assertIn("cURL request", path.read_text(encoding="utf-8"))
            self.assertEqual(log.handlers[0].level, logging.INFO)
            for handler in list(log.handlers):
                handler.close()
            log.handlers.clear()


if __name__ == "__main__":
    unittest.main()
