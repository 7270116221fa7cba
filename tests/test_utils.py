import unittest
from datetime import datetime, timedelta, timezone

import context  # noqa: F401

from rssgen.utils import coerce_datetime, ensure_utc, sanitize


class TestSanitize(unittest.TestCase):
    def test_sanitize(self):
        assert sanitize(None) is None
        assert sanitize("") is None
        assert sanitize("   ") is None
        assert sanitize(" https://example.com/a?b=1&c=2 ") == "https://example.com/a?b=1&c=2"


class TestEnsureUtc(unittest.TestCase):
    def test_naive_is_assumed_utc(self):
        assert ensure_utc(datetime(2024, 1, 1, 12)).tzinfo is timezone.utc

    def test_aware_is_converted(self):
        dt = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=-5)))
        assert ensure_utc(dt) == datetime(2024, 1, 1, 17, tzinfo=timezone.utc)


class TestCoerceDatetime(unittest.TestCase):
    def test_coerce_datetime_valid_values(self):
        expected = datetime(2024, 1, 10, 12, 34, tzinfo=timezone.utc)
        for value in [
            "2024-01-10T12:34:00Z",
            "Wed, 10 Jan 2024 12:34:00 GMT",
            1704890040,
            expected,
        ]:
            dt = coerce_datetime(value)
            assert ensure_utc(dt) == expected, f"Unexpected result for {value!r}"

    def test_coerce_datetime_none(self):
        assert coerce_datetime(None) is None

    def test_coerce_datetime_invalid_values(self):
        with self.assertRaises(ValueError):
            coerce_datetime("not a date at all")
        for value in [True, ["2024"]]:
            with self.assertRaises(TypeError):
                coerce_datetime(value)  # type: ignore[arg-type]
