"""Timestamp kinds.

Datetimes are written as ``YYYY-MM-DD HH:MM:SS[.ffffff] +HH:MM`` (or
``Z`` for UTC), which is legal YAML although not the canonical form.
Dates use the ``timestamp#ymd`` tag so they come back as dates.
"""

import datetime
import re

from yamltypes.error import MalformedPayloadError
from yamltypes.registry import yaml_tag

TIMESTAMP_TAG = yaml_tag('timestamp')
DATE_TAG = yaml_tag('timestamp#ymd')

_DATE_REGEXP = re.compile(
    r'^(?P<year>[0-9][0-9][0-9][0-9])'
    r'-(?P<month>[0-9][0-9]?)'
    r'-(?P<day>[0-9][0-9]?)$')

_TIMESTAMP_REGEXP = re.compile(
    r'^(?P<year>[0-9][0-9][0-9][0-9])'
    r'-(?P<month>[0-9][0-9]?)'
    r'-(?P<day>[0-9][0-9]?)'
    r'(?:[Tt]|[ \t]+)'
    r'(?P<hour>[0-9][0-9]?)'
    r':(?P<minute>[0-9][0-9])'
    r':(?P<second>[0-9][0-9])'
    r'(?:\.(?P<fraction>[0-9]*))?'
    r'(?:[ \t]*(?P<tz>Z|(?P<tz_sign>[-+])(?P<tz_hour>[0-9][0-9]?)'
    r'(?::?(?P<tz_minute>[0-9][0-9]))?))?$')


def _malformed(value, node):
    return MalformedPayloadError(
        TIMESTAMP_TAG, "expected a timestamp, but found %r" % value,
        mark=node.start_mark)


def parse_date(value):
    """Parse ``YYYY-MM-DD``, raising ValueError for anything else."""
    match = _DATE_REGEXP.match(value)
    if match is None:
        raise ValueError("invalid date %r" % value)
    values = match.groupdict()
    return datetime.date(int(values['year']), int(values['month']), int(values['day']))


def parse_timestamp(value):
    """Parse a timestamp into a timezone-aware datetime.

    Values of ten characters or less are dates and mean midnight UTC.
    A missing offset means UTC.
    """
    value = value.strip()
    if len(value) <= 10:
        date = parse_date(value)
        return datetime.datetime(date.year, date.month, date.day,
                                 tzinfo=datetime.timezone.utc)
    match = _TIMESTAMP_REGEXP.match(value)
    if match is None:
        raise ValueError("invalid timestamp %r" % value)
    values = match.groupdict()
    fraction = 0
    if values['fraction']:
        fraction = int(values['fraction'][:6].ljust(6, '0'))
    tz = datetime.timezone.utc
    if values['tz'] and values['tz'] != 'Z':
        tz_sign = -1 if values['tz_sign'] == '-' else 1
        tz_hour = int(values['tz_hour'])
        tz_minute = int(values['tz_minute']) if values['tz_minute'] else 0
        tz = datetime.timezone(tz_sign * datetime.timedelta(hours=tz_hour, minutes=tz_minute))
    return datetime.datetime(int(values['year']), int(values['month']), int(values['day']),
                             int(values['hour']), int(values['minute']), int(values['second']),
                             fraction, tz)


def format_offset(data):
    """Return ``Z`` for UTC or the ``+HH:MM`` offset of an aware datetime.

    The offset is the difference between the local wall clock and the
    UTC wall clock of the same instant.
    """
    if data.tzinfo is None or data.tzinfo is datetime.timezone.utc:
        return 'Z'
    utc_same_instant = data.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    difference = data.replace(tzinfo=None) - utc_same_instant
    if difference == datetime.timedelta(0) and data.tzname() in ('UTC', 'Z'):
        return 'Z'
    if difference < datetime.timedelta(0):
        sign = '-'
        difference = -difference
    else:
        sign = '+'
    minutes = round(difference.total_seconds() / 60)
    return '%s%02d:%02d' % (sign, minutes // 60, minutes % 60)


def format_timestamp(data):
    standard = '%04d-%02d-%02d %02d:%02d:%02d' % (
        data.year, data.month, data.day, data.hour, data.minute, data.second)
    if data.microsecond:
        standard += '.%06d' % data.microsecond
    return '%s %s' % (standard, format_offset(data))


def construct_timestamp(constructor, node):
    value = constructor.construct_scalar(node, TIMESTAMP_TAG)
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise _malformed(value, node) from exc


def represent_datetime(representer, data):
    # Naive datetimes are taken to be UTC
    return representer.represent_scalar(TIMESTAMP_TAG, format_timestamp(data))


def construct_date(constructor, node):
    value = constructor.construct_scalar(node, DATE_TAG)
    try:
        return parse_date(value.strip())
    except ValueError as exc:
        raise MalformedPayloadError(DATE_TAG, "expected a date, but found %r" % value,
                                    mark=node.start_mark) from exc


def represent_date(representer, data):
    return representer.represent_scalar(DATE_TAG, data.isoformat())


def register(registry):
    """Register the timestamp kinds."""
    registry.register_kind(TIMESTAMP_TAG, represent_datetime, construct_timestamp,
                           types=datetime.datetime)
    registry.register_kind(DATE_TAG, represent_date, construct_date, types=datetime.date)
