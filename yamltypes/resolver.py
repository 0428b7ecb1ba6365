"""Implicit tag resolution for untagged scalars.

Untagged plain scalars are matched against YAML 1.1 patterns to decide
whether they denote null, a boolean, a number or a timestamp. Quoted
scalars and everything else resolve to str.
"""

import re

from yamltypes.nodes import ScalarNode, SequenceNode, MappingNode
from yamltypes.registry import yaml_tag

NULL_TAG = yaml_tag('null')
BOOL_TAG = yaml_tag('bool')
INT_TAG = yaml_tag('int')
FLOAT_TAG = yaml_tag('float')
STR_TAG = yaml_tag('str')
SEQ_TAG = yaml_tag('seq')
MAP_TAG = yaml_tag('map')
TIMESTAMP_TAG = yaml_tag('timestamp')


class BaseResolver:
    """Base YAML tag resolver."""
    yaml_implicit_resolvers = {}

    DEFAULT_SCALAR_TAG = STR_TAG
    DEFAULT_SEQUENCE_TAG = SEQ_TAG
    DEFAULT_MAPPING_TAG = MAP_TAG

    @classmethod
    def add_implicit_resolver(cls, tag, regexp, first):
        """Add an implicit resolver.

        Args:
            tag: Tag given to scalars matching ``regexp``
            regexp: Compiled pattern matched against the whole scalar
            first: Characters a matching scalar may start with, or None
                to try the pattern on every scalar
        """
        if 'yaml_implicit_resolvers' not in cls.__dict__:
            cls.yaml_implicit_resolvers = {
                key: list(value)
                for key, value in cls.yaml_implicit_resolvers.items()}
        if first is None:
            first = [None]
        for ch in first:
            cls.yaml_implicit_resolvers.setdefault(ch, []).append((tag, regexp))

    def resolve(self, kind, value, implicit=(True, False)):
        """Resolve a tag for a node based on its kind and value.

        Args:
            kind: ScalarNode, SequenceNode or MappingNode
            value: The scalar text (ignored for collections)
            implicit: Pair of flags; the first says the scalar was plain
        """
        if kind is ScalarNode and implicit[0]:
            if value == '':
                resolvers = self.yaml_implicit_resolvers.get('', [])
            else:
                resolvers = self.yaml_implicit_resolvers.get(value[0], [])
            resolvers = resolvers + self.yaml_implicit_resolvers.get(None, [])
            for tag, regexp in resolvers:
                if regexp.match(value):
                    return tag
            return self.DEFAULT_SCALAR_TAG
        elif kind is SequenceNode:
            return self.DEFAULT_SEQUENCE_TAG
        elif kind is MappingNode:
            return self.DEFAULT_MAPPING_TAG
        return self.DEFAULT_SCALAR_TAG

    def resolve_node(self, node):
        """Resolve the tag of an untagged node."""
        if isinstance(node, ScalarNode):
            return self.resolve(ScalarNode, node.value, (node.plain, False))
        return self.resolve(type(node), None)


class Resolver(BaseResolver):
    """Standard resolver with the YAML 1.1 implicit scalar types."""
    pass


Resolver.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r'''^(?:true|True|TRUE|false|False|FALSE)$''', re.X),
    list('tTfF'))

Resolver.add_implicit_resolver(
    FLOAT_TAG,
    re.compile(r'''^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+]?[0-9]+)?
                    |\.[0-9][0-9_]*(?:[eE][-+]?[0-9]+)?
                    |[-+]?[0-9][0-9_]*(?::[0-5]?[0-9])+\.[0-9_]*
                    |[-+]?\.(?:inf|Inf|INF)
                    |\.(?:nan|NaN|NAN))$''', re.X),
    list('-+0123456789.'))

Resolver.add_implicit_resolver(
    INT_TAG,
    re.compile(r'''^(?:[-+]?0b[0-1_]+
                    |[-+]?0o?[0-7_]+
                    |[-+]?(?:0|[1-9][0-9_]*)
                    |[-+]?0x[0-9a-fA-F_]+
                    |[-+]?[1-9][0-9_]*(?::[0-5]?[0-9])+)$''', re.X),
    list('-+0123456789'))

Resolver.add_implicit_resolver(
    NULL_TAG,
    re.compile(r'''^(?: ~
                    |null|Null|NULL
                    | )$''', re.X),
    ['~', 'n', 'N', ''])

Resolver.add_implicit_resolver(
    TIMESTAMP_TAG,
    re.compile(r'''^(?:[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]
                    |[0-9][0-9][0-9][0-9] -[0-9][0-9]? -[0-9][0-9]?
                     (?:[Tt]|[ \t]+)[0-9][0-9]?
                     :[0-9][0-9] :[0-9][0-9] (?:\.[0-9]*)?
                     (?:[ \t]*(?:Z|[-+][0-9][0-9]?(?::[0-9][0-9])?))?)$''', re.X),
    list('0123456789'))
