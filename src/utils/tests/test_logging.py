"""Tests for the structured JSON log formatter."""

import json
import logging
import unittest

from utils.logging import JSONFormatter, REDACTED


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("auth", logging.INFO, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_basic_fields(self):
        data = json.loads(self.formatter.format(_record("User logged in")))

        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "auth")
        self.assertEqual(data["message"], "User logged in")
        self.assertTrue(data["timestamp"].endswith("Z"))

    def test_extra_fields_are_included(self):
        data = json.loads(self.formatter.format(_record("User registered", userId="u1", email="a@b.com")))

        self.assertEqual(data["userId"], "u1")
        self.assertEqual(data["email"], "a@b.com")

    def test_credentials_are_redacted(self):
        line = self.formatter.format(_record("oops", password="Abcdef1!", token="eyJhbGci", Authorization="Bearer x"))
        data = json.loads(line)

        self.assertEqual(data["password"], REDACTED)
        self.assertEqual(data["token"], REDACTED)
        self.assertEqual(data["Authorization"], REDACTED)
        self.assertNotIn("Abcdef1!", line)

    def test_non_json_values_are_stringified(self):
        data = json.loads(self.formatter.format(_record("listed", fields={"name"})))
        self.assertEqual(data["fields"], "{'name'}")


if __name__ == '__main__':
    unittest.main()
