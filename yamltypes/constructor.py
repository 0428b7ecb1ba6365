"""Decoder dispatch.

Constructor rebuilds Python values from a node tree. The tag of each
node selects a value kind from the registry; untagged nodes get their
tag from the resolver. Kinds use the ``construct_*`` helpers to read
their payload, which check the node shape and decode child nodes.
"""

import logging

from yamltypes.error import (
    ConstructorError,
    MalformedPayloadError,
    DepthExceededError,
    UnknownTagError,
)
from yamltypes.nodes import ScalarNode, SequenceNode, MappingNode
from yamltypes.representer import DEFAULT_MAX_DEPTH
from yamltypes.resolver import Resolver

logger = logging.getLogger(__name__)

NON_SPECIFIC_TAGS = (None, '!', '?')


class Constructor:
    """Build Python values from node trees.

    Args:
        registry: Registry to resolve tags with (default: the package
            default registry)
        max_depth: Maximum nesting of collection nodes
        fallback: Rebuild mapping nodes with unknown tags as
            ``UnknownObject`` instances instead of failing
        resolver: Resolver for untagged nodes
    """

    def __init__(self, registry=None, max_depth=DEFAULT_MAX_DEPTH,
                 fallback=False, resolver=None):
        if registry is None:
            from yamltypes import default_registry as registry
        self.registry = registry
        self.max_depth = max_depth
        self.fallback = fallback
        self.resolver = resolver if resolver is not None else Resolver()
        self._depth = 0

    def construct(self, node):
        """Construct the value of a top-level node."""
        self._depth = 0
        return self.construct_object(node)

    def node_tag(self, node):
        """Return the explicit tag of ``node`` or its resolved tag."""
        if node.tag in NON_SPECIFIC_TAGS:
            if node.tag == '!' and isinstance(node, ScalarNode):
                return self.resolver.DEFAULT_SCALAR_TAG
            return self.resolver.resolve_node(node)
        return node.tag

    def construct_object(self, node):
        """Construct a value from a node, dispatching by tag.

        Raises:
            UnknownTagError: The tag is not registered and fallback is
                off or does not apply.
            MalformedPayloadError: The node does not fit its value kind.
            DepthExceededError: Nesting is deeper than ``max_depth``.
        """
        if not isinstance(node, (ScalarNode, SequenceNode, MappingNode)):
            raise ConstructorError(None, None,
                                   "expected a node, but found %r" % (node,))
        tag = self.node_tag(node)
        if isinstance(node, ScalarNode):
            return self._construct_tagged(tag, node)

        if self._depth >= self.max_depth:
            raise DepthExceededError(self.max_depth, tag)
        self._depth += 1
        try:
            return self._construct_tagged(tag, node)
        finally:
            self._depth -= 1

    def _construct_tagged(self, tag, node):
        try:
            kind, suffix = self.registry.resolve(tag, node.start_mark)
        except UnknownTagError:
            if self.fallback and isinstance(node, MappingNode):
                return self.construct_unknown(tag, node)
            raise
        if suffix is not None:
            return kind.decode(self, suffix, node)
        return kind.decode(self, node)

    def construct_unknown(self, tag, node):
        """Rebuild a mapping with an unregistered tag as an UnknownObject."""
        from yamltypes.values import UnknownObject
        logger.debug("no value kind for %s, rebuilding as UnknownObject", tag)
        fields = self.construct_fields(node, tag)
        return UnknownObject(tag, fields)

    def _expect(self, node, node_class, tag):
        if not isinstance(node, node_class):
            raise MalformedPayloadError(
                tag if tag is not None else node.tag,
                "expected a %s node, but found %s" % (node_class.id, node.id),
                mark=node.start_mark)

    def construct_scalar(self, node, tag=None):
        """Return the text of a scalar node."""
        self._expect(node, ScalarNode, tag)
        return node.value

    def construct_sequence(self, node, tag=None):
        """Construct the items of a sequence node into a new list."""
        self._expect(node, SequenceNode, tag)
        items = []
        for index, child in enumerate(node.value):
            try:
                items.append(self.construct_object(child))
            except ConstructorError as exc:
                exc.add_path(index)
                raise
        return items

    def construct_pairs(self, node, tag=None):
        """Construct a mapping node into a list of (key, value) pairs."""
        self._expect(node, MappingNode, tag)
        pairs = []
        for key_node, value_node in node.value:
            key = self.construct_object(key_node)
            try:
                value = self.construct_object(value_node)
            except ConstructorError as exc:
                exc.add_path(key)
                raise
            pairs.append((key, value))
        return pairs

    def construct_mapping(self, node, tag=None):
        """Construct a mapping node into a new dict.

        Later duplicate keys replace earlier ones.
        """
        mapping = {}
        for key, value in self.construct_pairs(node, tag):
            try:
                hash(key)
            except TypeError as exc:
                raise MalformedPayloadError(
                    tag if tag is not None else node.tag,
                    "found unhashable key %r" % (key,),
                    mark=node.start_mark) from exc
            mapping[key] = value
        return mapping

    def construct_fields(self, node, tag=None):
        """Construct a mapping node whose keys are all field names."""
        fields = self.construct_mapping(node, tag)
        for key in fields:
            if not isinstance(key, str):
                raise MalformedPayloadError(
                    tag if tag is not None else node.tag,
                    "expected field names, but found %r" % (key,),
                    mark=node.start_mark)
        return fields
