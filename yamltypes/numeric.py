"""Numeric extension kinds: rational and complex numbers.

Both are written as mappings of their parts. For interoperability the
decoders also accept a single scalar such as ``3/4`` or ``1+2j``.
"""

import numbers
from fractions import Fraction

from yamltypes.error import MalformedPayloadError
from yamltypes.nodes import ScalarNode
from yamltypes.registry import python_tag

RATIONAL_TAG = python_tag('rational')
COMPLEX_TAG = python_tag('complex')


def _number_field(fields, name, tag, node, number_type):
    if name not in fields:
        raise MalformedPayloadError(tag, "missing field", field=name, mark=node.start_mark)
    value = fields[name]
    if isinstance(value, bool) or not isinstance(value, number_type):
        raise MalformedPayloadError(tag, "expected a number, but found %r" % (value,),
                                    field=name, mark=node.start_mark)
    return value


def construct_rational(constructor, node):
    if isinstance(node, ScalarNode):
        value = constructor.construct_scalar(node, RATIONAL_TAG)
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as exc:
            raise MalformedPayloadError(RATIONAL_TAG, "expected n/d, but found %r" % value,
                                        mark=node.start_mark) from exc
    fields = constructor.construct_fields(node, RATIONAL_TAG)
    numerator = _number_field(fields, 'numerator', RATIONAL_TAG, node, numbers.Rational)
    denominator = _number_field(fields, 'denominator', RATIONAL_TAG, node, numbers.Rational)
    if denominator == 0:
        raise MalformedPayloadError(RATIONAL_TAG, "denominator is zero",
                                    field='denominator', mark=node.start_mark)
    return Fraction(numerator, denominator)


def represent_rational(representer, data):
    return representer.represent_mapping(RATIONAL_TAG, [
        ('denominator', data.denominator),
        ('numerator', data.numerator),
    ])


def parse_complex(value):
    """Parse ``1+2j``, ``(1+2i)`` and similar forms."""
    text = ''.join(value.split())
    if text.startswith('(') and text.endswith(')'):
        text = text[1:-1]
    if text.endswith('i'):
        text = text[:-1] + 'j'
    return complex(text)


def construct_complex(constructor, node):
    if isinstance(node, ScalarNode):
        value = constructor.construct_scalar(node, COMPLEX_TAG)
        try:
            return parse_complex(value)
        except ValueError as exc:
            raise MalformedPayloadError(COMPLEX_TAG, "expected a complex number, but found %r"
                                        % value, mark=node.start_mark) from exc
    fields = constructor.construct_fields(node, COMPLEX_TAG)
    real = _number_field(fields, 'real', COMPLEX_TAG, node, numbers.Real)
    image = _number_field(fields, 'image', COMPLEX_TAG, node, numbers.Real)
    return complex(real, image)


def represent_complex(representer, data):
    return representer.represent_mapping(COMPLEX_TAG, [
        ('image', data.imag),
        ('real', data.real),
    ])


def register(registry):
    """Register the numeric extension kinds."""
    registry.register_kind(RATIONAL_TAG, represent_rational, construct_rational, types=Fraction)
    registry.register_kind(COMPLEX_TAG, represent_complex, construct_complex, types=complex)
