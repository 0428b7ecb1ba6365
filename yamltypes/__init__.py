"""
yamltypes - Tagged YAML node trees for Python values

This package converts Python values into trees of tagged YAML nodes and
back. Each tag names a value kind; kinds are kept in a registry that
applications can extend or override.

Key features:
- Scalars, collections, timestamps, rationals, complex numbers, ranges,
  symbols, regular expressions, records, exceptions and plain objects
- Last registration wins, so any built-in kind can be replaced
- Decoding only rebuilds classes that were registered explicitly
- Cycles and runaway nesting fail with clear errors

Example:
    >>> import yamltypes
    >>> node = yamltypes.encode({"a": [1, 2.5, None, True]})
    >>> node.tag
    'tag:yaml.org,2002:map'
    >>> yamltypes.decode(node)
    {'a': [1, 2.5, None, True]}
"""

from yamltypes.nodes import (
    Node,
    ScalarNode,
    CollectionNode,
    SequenceNode,
    MappingNode,
    PLAIN,
    SINGLE_QUOTED,
    DOUBLE_QUOTED,
    LITERAL,
    FOLDED,
)
from yamltypes.error import (
    Mark,
    YAMLError,
    MarkedYAMLError,
    ConstructorError,
    UnknownTagError,
    MalformedPayloadError,
    RepresenterError,
    CyclicStructureError,
    DepthExceededError,
)
from yamltypes.registry import (
    Registry,
    ValueKind,
    YAML_NAMESPACE,
    PYTHON_NAMESPACE,
    yaml_tag,
    python_tag,
)
from yamltypes.values import Symbol, Range, UnknownObject
from yamltypes.resolver import Resolver
from yamltypes.representer import Representer, DEFAULT_MAX_DEPTH
from yamltypes.constructor import Constructor
from yamltypes import scalars, numeric, temporal, composite

__version__ = "0.1.0"


def create_registry():
    """
    Create a registry holding every built-in value kind.

    Returns:
        A new Registry, independent of ``default_registry``
    """
    registry = Registry()
    for module in (scalars, numeric, temporal, composite):
        module.register(registry)
    return registry


default_registry = create_registry()


def encode(value, registry=None, max_depth=DEFAULT_MAX_DEPTH):
    """
    Encode a Python value into a tree of tagged nodes.

    Args:
        value: Value to encode
        registry: Registry to select value kinds from
            (default: ``default_registry``)
        max_depth: Maximum nesting of containers and composite values

    Returns:
        The root Node

    Raises:
        RepresenterError: A value has no kind, or is part of a cycle
        DepthExceededError: ``value`` nests deeper than ``max_depth``

    Example:
        >>> yamltypes.encode(3).value
        '3'
    """
    if registry is None:
        registry = default_registry
    return Representer(registry, max_depth=max_depth).represent(value)


def decode(node, registry=None, max_depth=DEFAULT_MAX_DEPTH, fallback=False):
    """
    Decode a tree of tagged nodes into a Python value.

    Args:
        node: Root Node
        registry: Registry to resolve tags with
            (default: ``default_registry``)
        max_depth: Maximum nesting of collection nodes
        fallback: Rebuild mappings with unknown tags as UnknownObject
            instead of raising UnknownTagError

    Returns:
        The decoded value

    Raises:
        UnknownTagError: A tag has no registered kind
        MalformedPayloadError: A node does not fit the kind of its tag
        DepthExceededError: ``node`` nests deeper than ``max_depth``
    """
    if registry is None:
        registry = default_registry
    constructor = Constructor(registry, max_depth=max_depth, fallback=fallback)
    return constructor.construct(node)


def register_kind(tag, encode=None, decode=None, types=(), predicate=None,
                  prefix=False, exact=False, registry=None):
    """Register a value kind; see ``Registry.register_kind``."""
    if registry is None:
        registry = default_registry
    return registry.register_kind(tag, encode, decode, types=types,
                                  predicate=predicate, prefix=prefix, exact=exact)


def register_class(cls, tag=None, required=None, registry=None):
    """
    Register a class so its instances can be encoded and decoded.

    Dataclasses and named tuples become struct kinds, exception classes
    exception kinds, and any other class a generic object kind.

    Args:
        cls: Class to register
        tag: Tag for its instances (default: from ``cls.yaml_tag`` or
            the namespace, kind and qualified name of the class)
        required: Attribute names a decoded plain object must carry
        registry: Registry to register in (default: ``default_registry``)

    Returns:
        The registered ValueKind
    """
    if registry is None:
        registry = default_registry
    return composite.register_class(registry, cls, tag, required)


class YAMLObjectMetaclass(type):
    """Metaclass for YAMLObject that registers classes with a yaml_tag."""

    def __init__(cls, name, bases, kwds):
        super().__init__(name, bases, kwds)
        if 'yaml_tag' in kwds and kwds['yaml_tag'] is not None:
            registry = cls.yaml_registry
            if registry is None:
                registry = default_registry
            registry.register_kind(cls.yaml_tag, cls.to_yaml, cls.from_yaml,
                                   types=cls, exact=True)


class YAMLObject(metaclass=YAMLObjectMetaclass):
    """Base class for objects that register themselves by tag.

    Subclasses should define:
        yaml_tag: The tag for this class (e.g., '!point')
        yaml_required: Attributes a decoded instance must have
        yaml_registry: Registry to register with (default: default_registry)

    And optionally override:
        from_yaml(cls, constructor, node): Construct object from a node
        to_yaml(cls, representer, data): Represent object as a node
    """
    yaml_tag = None
    yaml_required = ()
    yaml_registry = None

    @classmethod
    def from_yaml(cls, constructor, node):
        """Construct an instance from a node."""
        return composite.construct_object(constructor, node, cls, cls.yaml_tag,
                                          cls.yaml_required)

    @classmethod
    def to_yaml(cls, representer, data):
        """Represent an instance as a node."""
        return composite.represent_object(representer, data, cls.yaml_tag)


__all__ = [
    "Node",
    "ScalarNode",
    "CollectionNode",
    "SequenceNode",
    "MappingNode",
    "PLAIN",
    "SINGLE_QUOTED",
    "DOUBLE_QUOTED",
    "LITERAL",
    "FOLDED",
    "Mark",
    "YAMLError",
    "MarkedYAMLError",
    "ConstructorError",
    "UnknownTagError",
    "MalformedPayloadError",
    "RepresenterError",
    "CyclicStructureError",
    "DepthExceededError",
    "Registry",
    "ValueKind",
    "YAML_NAMESPACE",
    "PYTHON_NAMESPACE",
    "yaml_tag",
    "python_tag",
    "Symbol",
    "Range",
    "UnknownObject",
    "Resolver",
    "Representer",
    "Constructor",
    "DEFAULT_MAX_DEPTH",
    "create_registry",
    "default_registry",
    "encode",
    "decode",
    "register_kind",
    "register_class",
    "YAMLObject",
    "YAMLObjectMetaclass",
]
