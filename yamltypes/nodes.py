"""Document model nodes.

Every codec builds and reads trees of these three node kinds. A node
carries its tag and a presentation hint; the hint never changes what
a node decodes to.
"""

# Scalar presentation hints (PyYAML style characters)
PLAIN = None
SINGLE_QUOTED = "'"
DOUBLE_QUOTED = '"'
LITERAL = '|'
FOLDED = '>'

SCALAR_STYLES = (PLAIN, SINGLE_QUOTED, DOUBLE_QUOTED, LITERAL, FOLDED)


class Node:
    """Base class for YAML nodes."""

    def __init__(self, tag=None, value=None, start_mark=None, end_mark=None):
        self.tag = tag
        self.value = value
        self.start_mark = start_mark
        self.end_mark = end_mark

    def __repr__(self):
        return '%s(tag=%r, value=%r)' % (self.__class__.__name__, self.tag, self.value)


class ScalarNode(Node):
    """Scalar node (strings, numbers, etc.)."""
    id = 'scalar'

    def __init__(self, tag, value, start_mark=None, end_mark=None, style=None):
        if style not in SCALAR_STYLES:
            raise ValueError("unknown scalar style %r" % (style,))
        super().__init__(tag, value, start_mark, end_mark)
        self.style = style

    @property
    def plain(self):
        return self.style is PLAIN


class CollectionNode(Node):
    """Base class for collection nodes."""

    def __init__(self, tag, value=None, start_mark=None, end_mark=None, flow_style=None):
        if value is None:
            value = []
        super().__init__(tag, value, start_mark, end_mark)
        self.flow_style = flow_style

    def __len__(self):
        return len(self.value)


class SequenceNode(CollectionNode):
    """Sequence node (lists/arrays)."""
    id = 'sequence'

    def add(self, item):
        """Append an item node and return self for chaining."""
        self.value.append(item)
        return self


class MappingNode(CollectionNode):
    """Mapping node (dicts/objects).

    ``value`` is a list of ``(key_node, value_node)`` pairs kept in
    insertion order.
    """
    id = 'mapping'

    def add(self, key, value):
        """Append a key/value pair of nodes and return self for chaining."""
        self.value.append((key, value))
        return self
