"""Tests for the timestamp and date kinds."""

import datetime

import pytest

import yamltypes
from yamltypes import ScalarNode, MalformedPayloadError, yaml_tag
from conftest import scalar

UTC = datetime.timezone.utc
PLUS_TWO = datetime.timezone(datetime.timedelta(hours=2))
MINUS_FIVE_THIRTY = datetime.timezone(-datetime.timedelta(hours=5, minutes=30))


class TestTimestampEncode:
    """Test datetime encoding."""

    def test_utc(self):
        node = yamltypes.encode(datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
        assert node.tag == yaml_tag('timestamp')
        assert node.value == '2024-01-02 03:04:05 Z'

    def test_fraction_omitted_when_zero(self):
        node = yamltypes.encode(datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
        assert '.' not in node.value

    def test_microseconds(self):
        node = yamltypes.encode(datetime.datetime(2024, 1, 2, 3, 4, 5, 120, tzinfo=UTC))
        assert node.value == '2024-01-02 03:04:05.000120 Z'

    def test_positive_offset(self):
        node = yamltypes.encode(datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=PLUS_TWO))
        assert node.value == '2024-01-02 03:04:05 +02:00'

    def test_negative_offset(self):
        node = yamltypes.encode(
            datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=MINUS_FIVE_THIRTY))
        assert node.value == '2024-01-02 03:04:05 -05:30'

    def test_naive_is_utc(self):
        node = yamltypes.encode(datetime.datetime(2024, 1, 2, 3, 4, 5))
        assert node.value == '2024-01-02 03:04:05 Z'


class TestTimestampDecode:
    """Test timestamp decoding."""

    def test_date_only_is_midnight_utc(self):
        value = yamltypes.decode(scalar('timestamp', '2024-03-05'))
        assert value == datetime.datetime(2024, 3, 5, tzinfo=UTC)
        assert value.tzinfo is not None

    def test_t_separator(self):
        value = yamltypes.decode(scalar('timestamp', '2024-03-05T10:20:30Z'))
        assert value == datetime.datetime(2024, 3, 5, 10, 20, 30, tzinfo=UTC)

    def test_missing_offset_is_utc(self):
        value = yamltypes.decode(scalar('timestamp', '2024-03-05 10:20:30'))
        assert value.utcoffset() == datetime.timedelta(0)

    def test_offset_keeps_instant(self):
        value = yamltypes.decode(scalar('timestamp', '2024-03-05 10:20:30 +02:00'))
        assert value == datetime.datetime(2024, 3, 5, 8, 20, 30, tzinfo=UTC)
        assert value.utcoffset() == datetime.timedelta(hours=2)

    def test_offset_without_minutes(self):
        value = yamltypes.decode(scalar('timestamp', '2024-03-05 10:20:30 -5'))
        assert value.utcoffset() == -datetime.timedelta(hours=5)

    def test_fraction_truncated_to_microseconds(self):
        value = yamltypes.decode(scalar('timestamp', '2024-03-05 10:20:30.1234567 Z'))
        assert value.microsecond == 123456

    def test_untagged_plain_scalar(self):
        value = yamltypes.decode(ScalarNode(None, '2024-03-05 10:20:30 Z'))
        assert value == datetime.datetime(2024, 3, 5, 10, 20, 30, tzinfo=UTC)

    @pytest.mark.parametrize("text", ["yesterday", "2024-13-01", "2024-03-05 25:00:00",
                                      "2024/03/05"])
    def test_malformed(self, text):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(scalar('timestamp', text))


class TestTimestampRoundtrip:
    """Test that timestamps come back as the same instant."""

    @pytest.mark.parametrize("value", [
        datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        datetime.datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=UTC),
        datetime.datetime(1999, 12, 31, 23, 59, 59, tzinfo=PLUS_TWO),
        datetime.datetime(2024, 6, 1, 0, 0, 0, 1, tzinfo=MINUS_FIVE_THIRTY),
    ])
    def test_same_instant(self, roundtrip, value):
        result = roundtrip(value)
        assert result == value
        assert result.utcoffset() == value.utcoffset()

    def test_naive_comes_back_as_utc(self, roundtrip):
        result = roundtrip(datetime.datetime(2024, 1, 2, 3, 4, 5))
        assert result == datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_decoded_offset_survives_reencoding(self):
        first = yamltypes.decode(scalar('timestamp', '2024-01-01 10:00:00 +02:00'))
        node = yamltypes.encode(first)
        assert node.value == '2024-01-01 10:00:00 +02:00'
        second = yamltypes.decode(node)
        assert second == first == datetime.datetime(2024, 1, 1, 8, tzinfo=UTC)
        assert second.utcoffset() == datetime.timedelta(hours=2)


class TestDateTag:
    """Test date values."""

    def test_roundtrip(self, roundtrip):
        value = datetime.date(2024, 2, 29)
        result = roundtrip(value)
        assert result == value
        assert type(result) is datetime.date

    def test_encode(self):
        node = yamltypes.encode(datetime.date(2024, 2, 29))
        assert node.tag == yaml_tag('timestamp#ymd')
        assert node.value == '2024-02-29'

    def test_malformed(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(scalar('timestamp#ymd', '2024-02-30'))
