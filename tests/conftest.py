import sys
import os

import pytest

_tests_dir = os.path.dirname(os.path.abspath(__file__))
_src_dir = os.path.abspath(os.path.join(_tests_dir, '..'))

# Run against the source tree, installed or not
sys.path.insert(0, _src_dir)

import yamltypes  # noqa: E402
from yamltypes import ScalarNode, SequenceNode, MappingNode, yaml_tag  # noqa: E402


@pytest.fixture
def registry():
    """A registry with the built-in kinds, private to one test."""
    return yamltypes.create_registry()


@pytest.fixture
def roundtrip(registry):
    """Encode then decode a value with the test's registry."""
    def run(value, **kwargs):
        node = yamltypes.encode(value, registry=registry)
        return yamltypes.decode(node, registry=registry, **kwargs)
    return run


def scalar(tag, value, style=None):
    """Build a scalar node, expanding short tags like 'int'."""
    return ScalarNode(_expand(tag), value, style=style)


def seq(tag, *items):
    return SequenceNode(_expand(tag), list(items))


def mapping(tag, **fields):
    node = MappingNode(_expand(tag))
    for key, value in fields.items():
        node.add(ScalarNode(yaml_tag('str'), key), value)
    return node


def _expand(tag):
    if tag is None or ':' in tag or tag.startswith('!'):
        return tag
    return yaml_tag(tag)
