"""Tests for the JSON log formatter."""

import json
import logging
import sys
import unittest
from datetime import datetime, timezone

from utils.logging import REDACTED, JSONFormatter, setup_structured_logging


def _record(msg="hello", extra=None, exc_info=None):
    logger = logging.getLogger("test.logger")
    return logger.makeRecord("test.logger", logging.INFO, __file__, 1, msg, (), exc_info, extra=extra)


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_basic_fields(self):
        data = json.loads(self.formatter.format(_record("User registered")))

        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "test.logger")
        self.assertEqual(data["message"], "User registered")
        self.assertTrue(data["timestamp"].endswith("Z"))

    def test_extra_fields_included(self):
        data = json.loads(self.formatter.format(_record(extra={"userId": "u1", "todoId": "t1"})))

        self.assertEqual(data["userId"], "u1")
        self.assertEqual(data["todoId"], "t1")

    def test_sensitive_extra_fields_redacted(self):
        line = self.formatter.format(_record(extra={
            "password": "pw123",
            "token": "eyJhbGciOi",
            "Authorization": "Bearer abc",
            "password_hash": "$2b$12$abc",
        }))
        data = json.loads(line)

        self.assertEqual(data["password"], REDACTED)
        self.assertEqual(data["token"], REDACTED)
        self.assertEqual(data["Authorization"], REDACTED)
        self.assertEqual(data["password_hash"], REDACTED)
        self.assertNotIn("pw123", line)
        self.assertNotIn("eyJhbGciOi", line)

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            data = json.loads(self.formatter.format(_record(exc_info=sys.exc_info())))

        self.assertIn("RuntimeError: boom", data["exception"])

    def test_non_serializable_values_stringified(self):
        data = json.loads(self.formatter.format(_record(extra={"dueDate": datetime(2026, 1, 1, tzinfo=timezone.utc)})))
        self.assertEqual(data["dueDate"], "2026-01-01 00:00:00+00:00")


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, root.handlers[:])

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_installs_json_handler_on_root(self):
        setup_structured_logging("DEBUG")

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)
        self.assertFalse(logging.getLogger("uvicorn.access").propagate)


if __name__ == '__main__':
    unittest.main()
