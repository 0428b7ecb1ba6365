"""Tests for the scalar value kinds."""

import gc
import math
import re

import pytest

import yamltypes
from yamltypes import (
    ScalarNode,
    MappingNode,
    MalformedPayloadError,
    RepresenterError,
    Symbol,
    DOUBLE_QUOTED,
    LITERAL,
    yaml_tag,
    python_tag,
)
from conftest import scalar, mapping


class TestIntTag:
    """Test the int kind."""

    @pytest.mark.parametrize("value", [0, 1, -1, 42, 2 ** 70, -(2 ** 70)])
    def test_roundtrip(self, roundtrip, value):
        assert roundtrip(value) == value

    def test_encode_plain_decimal(self):
        node = yamltypes.encode(255)
        assert node.tag == yaml_tag('int')
        assert node.value == '255'
        assert node.style is None

    @pytest.mark.parametrize("text,expected", [
        ("42", 42),
        ("-17", -17),
        ("+5", 5),
        ("1_000", 1000),
        ("0x1F", 31),
        ("0o17", 15),
        ("017", 15),
        ("0b101", 5),
        ("1:30", 90),
        ("0", 0),
    ])
    def test_decode_forms(self, text, expected):
        assert yamltypes.decode(scalar('int', text)) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1.5", "0x", "08"])
    def test_decode_malformed(self, text):
        with pytest.raises(MalformedPayloadError) as exc_info:
            yamltypes.decode(scalar('int', text))
        assert exc_info.value.tag == yaml_tag('int')

    def test_wrong_node_shape(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(MappingNode(yaml_tag('int')))

    def test_huge_roundtrip(self, roundtrip):
        value = 10 ** 5000
        assert roundtrip(value) == value
        assert roundtrip(-value) == -value

    def test_huge_encode(self):
        node = yamltypes.encode(10 ** 5000 + 7)
        assert len(node.value) == 5001
        assert node.value.startswith('1000')
        assert node.value.endswith('0007')

    def test_huge_decode(self):
        assert yamltypes.decode(scalar('int', '1' + '0' * 5000)) == 10 ** 5000
        assert yamltypes.decode(scalar('int', '-1' + '0' * 8000)) == -(10 ** 8000)


class TestFloatTag:
    """Test the float kind."""

    @pytest.mark.parametrize("value", [0.0, 1.5, -2.25, 1e20, 1e-7, 3.141592653589793])
    def test_roundtrip(self, roundtrip, value):
        assert roundtrip(value) == value

    def test_negative_zero(self, roundtrip):
        result = roundtrip(-0.0)
        assert result == 0.0
        assert math.copysign(1.0, result) == -1.0

    def test_inf(self, roundtrip):
        assert yamltypes.encode(math.inf).value == '.Inf'
        assert yamltypes.encode(-math.inf).value == '-.Inf'
        assert roundtrip(math.inf) == math.inf
        assert roundtrip(-math.inf) == -math.inf

    def test_nan(self, roundtrip):
        assert yamltypes.encode(math.nan).value == '.NaN'
        assert math.isnan(roundtrip(math.nan))

    @pytest.mark.parametrize("text", [".inf", ".INF", "+.inf", "-.inf", ".nan", ".NAN"])
    def test_decode_special_tokens(self, text):
        value = yamltypes.decode(scalar('float', text))
        assert math.isinf(value) or math.isnan(value)

    @pytest.mark.parametrize("text,expected", [
        ("1.5", 1.5),
        ("-1.5", -1.5),
        ("1e3", 1000.0),
        ("6.8523015e+5", 685230.15),
        ("1_000.5", 1000.5),
        ("1:30.5", 90.5),
        (".5", 0.5),
        ("3", 3.0),
    ])
    def test_decode_forms(self, text, expected):
        assert yamltypes.decode(scalar('float', text)) == expected

    @pytest.mark.parametrize("text", ["inf", "nan", "Infinity", "", "1.2.3", "abc"])
    def test_decode_malformed(self, text):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(scalar('float', text))


class TestBoolTag:
    """Test the bool kind."""

    def test_encode(self):
        assert yamltypes.encode(True).value == 'true'
        assert yamltypes.encode(False).value == 'false'
        assert yamltypes.encode(True).tag == yaml_tag('bool')

    @pytest.mark.parametrize("text,expected", [
        ("true", True), ("True", True), ("TRUE", True),
        ("false", False), ("False", False), ("FALSE", False),
    ])
    def test_decode_literals(self, text, expected):
        assert yamltypes.decode(scalar('bool', text)) is expected

    @pytest.mark.parametrize("text", ["yes", "no", "on", "1", ""])
    def test_decode_rejects_other_words(self, text):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(scalar('bool', text))

    def test_true_and_false_tags(self):
        assert yamltypes.decode(scalar('true', '')) is True
        assert yamltypes.decode(scalar('false', '')) is False


class TestNullTag:
    """Test the null kind."""

    def test_encode(self):
        node = yamltypes.encode(None)
        assert node.tag == yaml_tag('null')
        assert node.value == ''

    @pytest.mark.parametrize("text", ["", "~", "null", "Null", "NULL"])
    def test_decode(self, text):
        assert yamltypes.decode(scalar('null', text)) is None

    def test_decode_malformed(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(scalar('null', 'nothing'))


class TestStrTag:
    """Test the str kind and its presentation hints."""

    @pytest.mark.parametrize("value", [
        "", "hello", "two words", "line\nbreak", "tab\there", "bell\x07",
        "nul\x00", "  padded  ", "unicode é中", "\ufeffbom",
    ])
    def test_roundtrip(self, roundtrip, value):
        assert roundtrip(value) == value

    def test_plain_text_stays_plain(self):
        assert yamltypes.encode("hello").style is None

    @pytest.mark.parametrize("value", ["123", "1.5", "true", "null", "~", "", "2024-01-02"])
    def test_ambiguous_text_is_quoted(self, value):
        assert yamltypes.encode(value).style == DOUBLE_QUOTED

    def test_leading_colon_is_quoted(self):
        assert yamltypes.encode(":name").style == DOUBLE_QUOTED

    def test_control_characters_are_quoted(self):
        assert yamltypes.encode("a\x01b").style == DOUBLE_QUOTED

    def test_multiline_is_literal(self):
        assert yamltypes.encode("one\ntwo").style == LITERAL

    def test_untagged_quoted_scalar_is_string(self):
        assert yamltypes.decode(ScalarNode(None, "123", style=DOUBLE_QUOTED)) == "123"

    def test_non_specific_tag_is_string(self):
        assert yamltypes.decode(ScalarNode('!', "123")) == "123"


class TestBinaryTag:
    """Test the binary kind."""

    @pytest.mark.parametrize("value", [b"", b"\x00\x01\xff", b"hello" * 40])
    def test_roundtrip(self, roundtrip, value):
        assert roundtrip(value) == value

    def test_bytearray_decodes_as_bytes(self, roundtrip):
        result = roundtrip(bytearray(b"abc"))
        assert result == b"abc"
        assert isinstance(result, bytes)

    def test_encode_literal_base64(self):
        node = yamltypes.encode(b"hi")
        assert node.tag == yaml_tag('binary')
        assert node.value.strip() == 'aGk='
        assert node.style == LITERAL

    def test_decode_ignores_whitespace(self):
        assert yamltypes.decode(scalar('binary', 'aG\nk=\n')) == b"hi"

    def test_decode_malformed(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(scalar('binary', '!!not base64!!'))


class TestSymbolTag:
    """Test the symbol kind."""

    def test_interned(self):
        assert Symbol("abc") is Symbol("abc")

    def test_repr(self):
        assert repr(Symbol("abc")) == ':abc'
        assert repr(Symbol("two words")) == ':"two words"'

    def test_roundtrip_identity(self, roundtrip):
        assert roundtrip(Symbol("abc")) is Symbol("abc")

    def test_roundtrip_quoted_name(self, roundtrip):
        assert roundtrip(Symbol('with "quote"')) is Symbol('with "quote"')

    def test_encode(self):
        node = yamltypes.encode(Symbol("abc"))
        assert node.tag == python_tag('symbol')
        assert node.value == ':abc'

    @pytest.mark.parametrize("text", [":abc", "abc", ":\"abc\"", "'abc'"])
    def test_decode_forms(self, text):
        assert yamltypes.decode(ScalarNode(python_tag('symbol'), text)) is Symbol("abc")

    def test_sym_alias(self):
        assert yamltypes.decode(ScalarNode(python_tag('sym'), ':abc')) is Symbol("abc")

    @pytest.mark.parametrize("text", ["", ":"])
    def test_decode_empty_name(self, text):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(ScalarNode(python_tag('symbol'), text))

    def test_unused_symbols_are_released(self):
        name = 'released-symbol-name'
        symbol = Symbol(name)
        assert name in Symbol._table
        del symbol
        gc.collect()
        assert name not in Symbol._table


class TestRegexpTag:
    """Test the regexp kind."""

    def test_roundtrip(self, roundtrip):
        pattern = re.compile(r'a+b\d', re.IGNORECASE | re.MULTILINE)
        assert roundtrip(pattern) == pattern

    def test_encode(self):
        node = yamltypes.encode(re.compile('x.y', re.S | re.X))
        assert node.tag == python_tag('regexp')
        assert node.value == '/x.y/sx'

    def test_decode_mapping_form(self):
        node = mapping(python_tag('regexp'),
                       regexp=scalar('str', 'ab+'), mods=scalar('str', 'i'))
        assert yamltypes.decode(node) == re.compile('ab+', re.I)

    def test_decode_unknown_flag(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(ScalarNode(python_tag('regexp'), '/a/q'))

    def test_decode_invalid_pattern(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(ScalarNode(python_tag('regexp'), '/a(/'))

    def test_decode_without_slashes(self):
        with pytest.raises(MalformedPayloadError):
            yamltypes.decode(ScalarNode(python_tag('regexp'), 'abc'))

    def test_bytes_pattern_refused(self):
        with pytest.raises(RepresenterError):
            yamltypes.encode(re.compile(b'abc'))

    def test_m_flag_is_multiline(self):
        pattern = yamltypes.decode(ScalarNode(python_tag('regexp'), '/a.b/m'))
        assert pattern.flags & re.MULTILINE
        assert not pattern.flags & re.DOTALL
        assert pattern.search('a\nb') is None

    def test_s_flag_is_dotall(self):
        pattern = yamltypes.decode(ScalarNode(python_tag('regexp'), '/a.b/s'))
        assert pattern.search('a\nb') is not None
