"""Encoder dispatch.

Representer turns a Python value into a tree of nodes. The value kind
is chosen by the runtime type of each value through the registry; the
kind's encode function builds the node, calling back into the
representer for child values.
"""

import types

from yamltypes.error import RepresenterError, CyclicStructureError, DepthExceededError
from yamltypes.nodes import ScalarNode, SequenceNode, MappingNode
from yamltypes.resolver import Resolver

DEFAULT_MAX_DEPTH = 128

# Values that can never contain a reference back to a container
_ATOMIC_TYPES = (type(None), bool, int, float, complex, str, bytes)


class Representer:
    """Build node trees from Python values.

    Args:
        registry: Registry to select value kinds from (default: the
            package default registry)
        max_depth: Maximum nesting of containers and composite values
    """

    def __init__(self, registry=None, max_depth=DEFAULT_MAX_DEPTH):
        if registry is None:
            from yamltypes import default_registry as registry
        self.registry = registry
        self.max_depth = max_depth
        self.resolver = Resolver()
        self._in_progress = set()
        self._depth = 0

    def represent(self, data):
        """Represent a top-level value and return the root node."""
        self._in_progress = set()
        self._depth = 0
        return self.represent_data(data)

    def ignore_aliases(self, data):
        """Return True if ``data`` cannot take part in a cycle."""
        return isinstance(data, _ATOMIC_TYPES)

    def represent_data(self, data):
        """Represent a value, dispatching on its runtime type.

        Raises:
            CyclicStructureError: ``data`` is already being represented
                further up the tree.
            DepthExceededError: Nesting is deeper than ``max_depth``.
            RepresenterError: No value kind accepts ``data``.
        """
        kind = self.registry.kind_for(data)
        if kind is None:
            kind = self._object_kind(data)

        if self.ignore_aliases(data):
            return kind.encode(self, data)

        alias_key = id(data)
        if alias_key in self._in_progress:
            raise CyclicStructureError(data)
        if self._depth >= self.max_depth:
            raise DepthExceededError(self.max_depth, kind.tag)
        self._in_progress.add(alias_key)
        self._depth += 1
        try:
            return kind.encode(self, data)
        finally:
            self._depth -= 1
            self._in_progress.discard(alias_key)

    def _object_kind(self, data):
        if isinstance(data, (type, types.FunctionType, types.BuiltinFunctionType,
                             types.MethodType, types.ModuleType)):
            raise RepresenterError("cannot represent %s %r"
                                   % (type(data).__name__, data))
        kind = self.registry.object_kind
        if kind is None or not hasattr(data, '__dict__'):
            raise RepresenterError("cannot represent an object: %r" % (data,))
        return kind

    def represent_scalar(self, tag, value, style=None):
        """Represent a scalar as a ScalarNode.

        Args:
            tag: YAML tag for the scalar
            value: Scalar text
            style: Optional presentation hint for the scalar

        Returns:
            ScalarNode with the value
        """
        return ScalarNode(tag, value, style=style)

    def represent_sequence(self, tag, sequence, flow_style=None):
        """Represent an iterable as a SequenceNode."""
        node = SequenceNode(tag, flow_style=flow_style)
        for item in sequence:
            node.add(self.represent_data(item))
        return node

    def represent_mapping(self, tag, mapping, flow_style=None):
        """Represent a mapping as a MappingNode.

        ``mapping`` is a dict or an iterable of ``(key, value)`` pairs;
        pairs are emitted in iteration order.
        """
        node = MappingNode(tag, flow_style=flow_style)
        if hasattr(mapping, 'items'):
            mapping = mapping.items()
        for key, value in mapping:
            node.add(self.represent_data(key), self.represent_data(value))
        return node
