from datetime import date, datetime, timezone as dt_timezone

from django.test import SimpleTestCase
from rest_framework import serializers

from .fields import TimestampField
from .timestamps import TimestampError, normalize_timestamp

UTC = dt_timezone.utc


class NormalizeTimestampTest(SimpleTestCase):
    """Tests for core.timestamps.normalize_timestamp."""

    def test_seconds_nanoseconds_mapping(self):
        value = normalize_timestamp({'seconds': 1735689600, 'nanoseconds': 500_000_000})
        self.assertEqual(value, datetime(2025, 1, 1, 0, 0, 0, 500000, tzinfo=UTC))

    def test_underscored_mapping_keys(self):
        value = normalize_timestamp({'_seconds': 1735689600, '_nanoseconds': 0})
        self.assertEqual(value, datetime(2025, 1, 1, tzinfo=UTC))

    def test_epoch_number(self):
        self.assertEqual(normalize_timestamp(0), datetime(1970, 1, 1, tzinfo=UTC))

    def test_iso_string_with_offset_is_converted_to_utc(self):
        value = normalize_timestamp('2025-06-01T03:00:00+03:00')
        self.assertEqual(value, datetime(2025, 6, 1, 0, 0, tzinfo=UTC))

    def test_date_only_string(self):
        self.assertEqual(normalize_timestamp('2025-06-01'), datetime(2025, 6, 1, tzinfo=UTC))

    def test_naive_datetime_is_treated_as_utc(self):
        value = normalize_timestamp(datetime(2025, 6, 1, 12, 30))
        self.assertEqual(value.tzinfo, UTC)
        self.assertEqual(value.hour, 12)

    def test_date_object(self):
        self.assertEqual(normalize_timestamp(date(2025, 6, 1)), datetime(2025, 6, 1, tzinfo=UTC))

    def test_invalid_values(self):
        for value in (None, '', 'not a date', True, {'nanoseconds': 1}, [1, 2]):
            with self.subTest(value=value):
                with self.assertRaises(TimestampError):
                    normalize_timestamp(value)


class TimestampFieldTest(SimpleTestCase):

    def test_accepts_mapping(self):
        field = TimestampField()
        value = field.to_internal_value({'seconds': 1735689600, 'nanoseconds': 0})
        self.assertEqual(value, datetime(2025, 1, 1, tzinfo=UTC))

    def test_rejects_garbage(self):
        field = TimestampField()
        with self.assertRaises(serializers.ValidationError):
            field.to_internal_value('yesterday-ish')
