"""Scalar value kinds: null, bool, int, float, str, binary, symbol, regexp.

Regexp flag letters carry their Python meaning: ``m`` is ``re.MULTILINE``
and ``s`` is ``re.DOTALL``. Ruby writes dot-matches-newline as ``m``, so
a Ruby pattern such as ``/a.b/m`` decodes to a Python pattern in which
``.`` still stops at a newline; write it as ``/a.b/s`` to get the Ruby
behaviour.
"""

import base64
import binascii
import math
import re

from yamltypes.error import MalformedPayloadError, RepresenterError
from yamltypes.nodes import ScalarNode, MappingNode, DOUBLE_QUOTED, LITERAL
from yamltypes.registry import yaml_tag, python_tag
from yamltypes.values import Symbol

NULL_TAG = yaml_tag('null')
BOOL_TAG = yaml_tag('bool')
TRUE_TAG = yaml_tag('true')
FALSE_TAG = yaml_tag('false')
INT_TAG = yaml_tag('int')
FLOAT_TAG = yaml_tag('float')
STR_TAG = yaml_tag('str')
BINARY_TAG = yaml_tag('binary')
SYMBOL_TAG = python_tag('symbol')
SYM_TAG = python_tag('sym')
REGEXP_TAG = python_tag('regexp')

_NULL_VALUES = ('', '~', 'null', 'Null', 'NULL')
_BOOL_VALUES = {
    'true': True, 'True': True, 'TRUE': True,
    'false': False, 'False': False, 'FALSE': False,
}

_INT_REGEXP = re.compile(r'''^[-+]?(?:0b[0-1_]+
                                |0o?[0-7_]+
                                |0|[1-9][0-9_]*
                                |0x[0-9a-fA-F_]+
                                |[1-9][0-9_]*(?::[0-5]?[0-9])+)$''', re.X)

_FLOAT_REGEXP = re.compile(r'''^[-+]?(?:[0-9][0-9_]*(?:\.[0-9_]*)?(?:[eE][-+]?[0-9]+)?
                                  |\.[0-9][0-9_]*(?:[eE][-+]?[0-9]+)?
                                  |[0-9][0-9_]*(?::[0-5]?[0-9])+\.[0-9_]*)$''', re.X)

_SPECIAL_FLOATS = {
    '.Inf': math.inf, '.inf': math.inf, '.INF': math.inf,
    '+.Inf': math.inf, '+.inf': math.inf, '+.INF': math.inf,
    '-.Inf': -math.inf, '-.inf': -math.inf, '-.INF': -math.inf,
    '.NaN': math.nan, '.nan': math.nan, '.NAN': math.nan,
}

# Characters that can't appear in a plain or literal scalar
_CONTROL_REGEXP = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\ufffe\uffff]')

# Decimal digits converted per step, below the interpreter's int/str limit
_INT_CHUNK_DIGITS = 4000
_INT_CHUNK = 10 ** _INT_CHUNK_DIGITS

_REGEXP_SCALAR = re.compile(r'^/(.*)/([a-z]*)$', re.S)

# Flag letters of a regular expression, in the order they are written
_REGEXP_FLAGS = (
    ('a', re.ASCII),
    ('i', re.IGNORECASE),
    ('m', re.MULTILINE),
    ('s', re.DOTALL),
    ('x', re.VERBOSE),
)


def _sign(value):
    if value.startswith('-'):
        return -1, value[1:]
    if value.startswith('+'):
        return 1, value[1:]
    return 1, value


def _sexagesimal(value, cast):
    result = cast(0)
    for part in value.split(':'):
        result = result * 60 + cast(part)
    return result


def construct_yaml_null(constructor, node):
    value = constructor.construct_scalar(node, NULL_TAG)
    if value not in _NULL_VALUES:
        raise MalformedPayloadError(NULL_TAG, "expected an empty scalar or null, "
                                    "but found %r" % value, mark=node.start_mark)
    return None


def represent_none(representer, data):
    return representer.represent_scalar(NULL_TAG, '')


def construct_yaml_bool(constructor, node):
    value = constructor.construct_scalar(node, BOOL_TAG)
    try:
        return _BOOL_VALUES[value]
    except KeyError:
        raise MalformedPayloadError(BOOL_TAG, "expected true or false, but found %r"
                                    % value, mark=node.start_mark) from None


def construct_yaml_true(constructor, node):
    constructor.construct_scalar(node, TRUE_TAG)
    return True


def construct_yaml_false(constructor, node):
    constructor.construct_scalar(node, FALSE_TAG)
    return False


def represent_bool(representer, data):
    return representer.represent_scalar(BOOL_TAG, 'true' if data else 'false')


def int_to_decimal(value):
    """Format an int in base 10, however many digits it has."""
    if value < 0:
        return '-' + int_to_decimal(-value)
    if value < _INT_CHUNK:
        return str(value)
    parts = []
    while value >= _INT_CHUNK:
        value, low = divmod(value, _INT_CHUNK)
        parts.append('%0*d' % (_INT_CHUNK_DIGITS, low))
    parts.append(str(value))
    return ''.join(reversed(parts))


def decimal_to_int(digits):
    """Parse unsigned base-10 digits, however many there are."""
    head = len(digits) % _INT_CHUNK_DIGITS or _INT_CHUNK_DIGITS
    result = int(digits[:head])
    for start in range(head, len(digits), _INT_CHUNK_DIGITS):
        result = result * _INT_CHUNK + int(digits[start:start + _INT_CHUNK_DIGITS])
    return result


def parse_int(value):
    """Parse a YAML 1.1 integer, raising ValueError for anything else."""
    if not _INT_REGEXP.match(value):
        raise ValueError("invalid integer %r" % value)
    sign, value = _sign(value.replace('_', ''))
    if value == '0':
        return 0
    elif value.startswith('0b'):
        return sign * int(value[2:], 2)
    elif value.startswith('0x'):
        return sign * int(value[2:], 16)
    elif value.startswith('0o'):
        return sign * int(value[2:], 8)
    elif value.startswith('0'):
        # Octal (YAML 1.1 style)
        return sign * int(value, 8)
    elif ':' in value:
        return sign * _sexagesimal(value, int)
    return sign * decimal_to_int(value)


def construct_yaml_int(constructor, node):
    value = constructor.construct_scalar(node, INT_TAG)
    try:
        return parse_int(value)
    except ValueError:
        raise MalformedPayloadError(INT_TAG, "expected an integer, but found %r"
                                    % value, mark=node.start_mark) from None


def represent_int(representer, data):
    return representer.represent_scalar(INT_TAG, int_to_decimal(int(data)))


def parse_float(value):
    """Parse a YAML float, raising ValueError for anything else."""
    if value in _SPECIAL_FLOATS:
        return _SPECIAL_FLOATS[value]
    if not _FLOAT_REGEXP.match(value):
        raise ValueError("invalid float %r" % value)
    sign, value = _sign(value.replace('_', ''))
    if ':' in value:
        return sign * _sexagesimal(value, float)
    return sign * float(value)


def construct_yaml_float(constructor, node):
    value = constructor.construct_scalar(node, FLOAT_TAG)
    try:
        return parse_float(value)
    except ValueError:
        raise MalformedPayloadError(FLOAT_TAG, "expected a float, but found %r"
                                    % value, mark=node.start_mark) from None


def represent_float(representer, data):
    data = float(data)
    if data != data:
        value = '.NaN'
    elif data == math.inf:
        value = '.Inf'
    elif data == -math.inf:
        value = '-.Inf'
    else:
        value = repr(data)
    return representer.represent_scalar(FLOAT_TAG, value)


def construct_yaml_str(constructor, node):
    return constructor.construct_scalar(node, STR_TAG)


def _str_style(representer, data):
    if _CONTROL_REGEXP.search(data):
        return DOUBLE_QUOTED
    if data.startswith(':'):
        return DOUBLE_QUOTED
    if data != data.strip():
        return DOUBLE_QUOTED
    if '\n' in data:
        return LITERAL
    if representer.resolver.resolve(ScalarNode, data, (True, False)) != STR_TAG:
        return DOUBLE_QUOTED
    return None


def represent_str(representer, data):
    data = str.__str__(data)
    return representer.represent_scalar(STR_TAG, data, style=_str_style(representer, data))


def construct_yaml_binary(constructor, node):
    value = constructor.construct_scalar(node, BINARY_TAG)
    try:
        return base64.b64decode(''.join(value.split()).encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise MalformedPayloadError(BINARY_TAG, "failed to decode base64 data: %s" % exc,
                                    mark=node.start_mark) from exc


def represent_binary(representer, data):
    value = base64.encodebytes(bytes(data)).decode('ascii')
    return representer.represent_scalar(BINARY_TAG, value, style=LITERAL)


def construct_symbol(constructor, node):
    value = constructor.construct_scalar(node, SYMBOL_TAG)
    if value.startswith(':'):
        value = value[1:]
    if not value:
        raise MalformedPayloadError(SYMBOL_TAG, "expected a symbol name, but found %r"
                                    % node.value, mark=node.start_mark)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        quote, value = value[0], value[1:-1]
        if quote == '"':
            value = re.sub(r'\\(.)', r'\1', value)
        else:
            value = value.replace("''", "'")
    return Symbol(value)


def represent_symbol(representer, data):
    return representer.represent_scalar(SYMBOL_TAG, repr(Symbol(data)))


def regexp_flags(mods):
    """Turn flag letters into ``re`` flags."""
    flags = 0
    letters = dict(_REGEXP_FLAGS)
    for letter in mods:
        if letter not in letters:
            raise ValueError("unknown regular expression flag %r" % letter)
        flags |= letters[letter]
    return flags


def construct_regexp(constructor, node):
    if isinstance(node, MappingNode):
        fields = constructor.construct_fields(node, REGEXP_TAG)
        pattern = fields.get('regexp')
        mods = fields.get('mods') or ''
        if not isinstance(pattern, str):
            raise MalformedPayloadError(REGEXP_TAG, "expected a pattern string",
                                        field='regexp', mark=node.start_mark)
        if not isinstance(mods, str):
            raise MalformedPayloadError(REGEXP_TAG, "expected flag letters",
                                        field='mods', mark=node.start_mark)
    else:
        value = constructor.construct_scalar(node, REGEXP_TAG)
        match = _REGEXP_SCALAR.match(value)
        if match is None:
            raise MalformedPayloadError(REGEXP_TAG, "expected /pattern/flags, but found %r"
                                        % value, mark=node.start_mark)
        pattern, mods = match.groups()
    try:
        return re.compile(pattern, regexp_flags(mods))
    except (ValueError, re.error) as exc:
        raise MalformedPayloadError(REGEXP_TAG, "invalid regular expression: %s" % exc,
                                    mark=node.start_mark) from exc


def represent_regexp(representer, data):
    if not isinstance(data.pattern, str):
        raise RepresenterError("cannot represent a bytes pattern: %r" % (data,))
    mods = ''.join(letter for letter, flag in _REGEXP_FLAGS if data.flags & flag)
    return representer.represent_scalar(REGEXP_TAG, '/%s/%s' % (data.pattern, mods))


def register(registry):
    """Register the scalar value kinds."""
    registry.register_kind(NULL_TAG, represent_none, construct_yaml_null, types=type(None))
    registry.register_kind(BOOL_TAG, represent_bool, construct_yaml_bool, types=bool)
    registry.register_kind(TRUE_TAG, decode=construct_yaml_true)
    registry.register_kind(FALSE_TAG, decode=construct_yaml_false)
    registry.register_kind(INT_TAG, represent_int, construct_yaml_int, types=int)
    registry.register_kind(FLOAT_TAG, represent_float, construct_yaml_float, types=float)
    registry.register_kind(STR_TAG, represent_str, construct_yaml_str, types=str)
    registry.register_kind(BINARY_TAG, represent_binary, construct_yaml_binary,
                           types=(bytes, bytearray))
    registry.register_kind(SYMBOL_TAG, represent_symbol, construct_symbol, types=Symbol)
    registry.register_kind(SYM_TAG, decode=construct_symbol)
    registry.register_kind(REGEXP_TAG, represent_regexp, construct_regexp, types=re.Pattern)
