"""
DRF-поля общего назначения.
"""
from rest_framework import serializers

from .timestamps import TimestampError, normalize_timestamp


class TimestampField(serializers.DateTimeField):
    """
    DateTimeField, который принимает метки в любом формате из core.timestamps.

    На вход: {'seconds', 'nanoseconds'}, epoch, ISO-строка, datetime.
    На выход: обычный ISO-8601.
    """

    def to_internal_value(self, value):
        try:
            return normalize_timestamp(value)
        except TimestampError as exc:
            raise serializers.ValidationError(str(exc))
