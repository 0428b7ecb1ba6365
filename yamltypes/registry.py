"""Tag registry.

A Registry maps tags to value kinds for decoding and Python types to
value kinds for encoding. Built-in kinds are registered by the codec
modules (scalars, numeric, temporal, composite); applications add or
override kinds with ``register_kind``.

Re-registering a tag replaces the earlier kind entirely: the types the
old kind encoded are rebound to the new kind unless the new kind names
its own.
"""

import copy
import logging
import threading
from contextlib import contextmanager

from yamltypes.error import UnknownTagError

logger = logging.getLogger(__name__)

# Language-independent tags
YAML_NAMESPACE = 'tag:yaml.org,2002:'
# Tags for values that only exist in Python
PYTHON_NAMESPACE = 'tag:python.yaml.org,2002:'


def yaml_tag(kind):
    return YAML_NAMESPACE + kind


def python_tag(kind):
    return PYTHON_NAMESPACE + kind


class ValueKind:
    """An encode/decode pair bound to a tag.

    Args:
        tag: The tag, or the tag prefix when ``prefix`` is true
        encode: Function(representer, data) -> Node, or None for
            decode-only kinds
        decode: Function(constructor, node) -> value; prefix kinds
            receive Function(constructor, suffix, node)
        types: Python types encoded by this kind
        predicate: Function(data) -> bool selecting values that are not
            identified by type alone, e.g. dataclass instances
        prefix: Whether ``tag`` is a prefix matching a family of tags
        exact: Encode only instances of ``types`` themselves, not of
            their subclasses
    """

    def __init__(self, tag, encode=None, decode=None, types=(), predicate=None,
                 prefix=False, exact=False):
        if not tag or not isinstance(tag, str):
            raise ValueError("a value kind needs a non-empty tag, got %r" % (tag,))
        if isinstance(types, type):
            types = (types,)
        self.tag = tag
        self.encode = encode
        self.decode = decode
        self.types = tuple(types)
        self.predicate = predicate
        self.prefix = prefix
        self.exact = exact

    def __repr__(self):
        return '%s(%r%s)' % (self.__class__.__name__, self.tag,
                             ', prefix=True' if self.prefix else '')


class _ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def reading(self):
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def writing(self):
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class Registry:
    """Mapping of tags and Python types to value kinds.

    A registry is plain state: create one with ``create_registry()`` to
    get the built-in kinds, or ``Registry()`` for an empty one, and
    ``copy()`` it to override kinds without touching the original.
    """

    def __init__(self):
        self._tags = {}
        self._prefixes = {}
        self._types = {}
        self._predicates = []
        self._object_kind = None
        self._lock = _ReadWriteLock()

    def copy(self):
        clone = self.__class__()
        with self._lock.reading():
            clone._tags = dict(self._tags)
            clone._prefixes = dict(self._prefixes)
            clone._types = dict(self._types)
            clone._predicates = list(self._predicates)
            clone._object_kind = self._object_kind
        return clone

    def register(self, kind):
        """Bind ``kind.tag`` to ``kind``; the last registration wins.

        Returns:
            The kind as stored. When ``kind`` replaces another kind it is
            stored as a copy, so ``kind`` itself is never modified.
        """
        table_name = '_prefixes' if kind.prefix else '_tags'
        with self._lock.writing():
            table = getattr(self, table_name)
            old = table.get(kind.tag)
            if old is not None and old is not kind:
                # Bindings taken over from the old kind stay in this registry
                kind = copy.copy(kind)
                self._replace(old, kind)
            table[kind.tag] = kind
            for data_type in kind.types:
                self._types[data_type] = kind
            if kind.predicate is not None and kind not in self._predicates:
                self._predicates.append(kind)
        if old is not None and old is not kind:
            logger.info("tag %s re-registered, replacing %r", kind.tag, old)
        else:
            logger.debug("registered %r", kind)
        return kind

    def _replace(self, old, new):
        # Drop every binding of the replaced kind so it cannot be reached
        # through a type, a predicate or the object fallback.
        for data_type, kind in list(self._types.items()):
            if kind is old:
                if new.types:
                    del self._types[data_type]
                else:
                    self._types[data_type] = new
        if old in self._predicates:
            index = self._predicates.index(old)
            if new.predicate is not None:
                del self._predicates[index]
            else:
                new.predicate = old.predicate
                self._predicates[index] = new
        if self._object_kind is old:
            self._object_kind = new
        if not new.types:
            new.types = old.types

    def register_kind(self, tag, encode=None, decode=None, types=(),
                      predicate=None, prefix=False, exact=False):
        """Register a value kind from its tag and encode/decode functions."""
        return self.register(ValueKind(tag, encode, decode, types=types,
                                       predicate=predicate, prefix=prefix,
                                       exact=exact))

    def set_object_kind(self, kind):
        """Use ``kind`` for instances that no other kind encodes."""
        with self._lock.writing():
            self._object_kind = kind

    @property
    def object_kind(self):
        return self._object_kind

    def resolve(self, tag, mark=None):
        """Find the kind decoding ``tag``.

        Returns:
            A ``(kind, suffix)`` tuple. ``suffix`` is None for exact tag
            matches and the remainder of the tag for prefix matches.

        Raises:
            UnknownTagError: No exact or prefix registration matches.
        """
        with self._lock.reading():
            kind = self._tags.get(tag)
            if kind is not None and kind.decode is not None:
                return kind, None
            if tag:
                best = None
                for prefix, candidate in self._prefixes.items():
                    if tag.startswith(prefix) and \
                            (best is None or len(prefix) > len(best.tag)):
                        best = candidate
                if best is not None and best.decode is not None:
                    return best, tag[len(best.tag):]
        raise UnknownTagError(tag, mark)

    def kind_for(self, data):
        """Find the kind encoding ``data`` by its runtime type.

        The exact type wins, then predicate kinds (records and other
        specialised composites), then the nearest registered base class.
        Returns None when nothing matches.
        """
        data_type = type(data)
        with self._lock.reading():
            kind = self._types.get(data_type)
            if kind is not None and kind.encode is not None:
                return kind
            for kind in self._predicates:
                if kind.encode is not None and kind.predicate(data):
                    return kind
            for base in data_type.__mro__[1:]:
                kind = self._types.get(base)
                if kind is not None and kind.encode is not None and not kind.exact:
                    return kind
        return None

    def tags(self):
        with self._lock.reading():
            return sorted(self._tags) + sorted(self._prefixes)

    def __contains__(self, tag):
        with self._lock.reading():
            return tag in self._tags or tag in self._prefixes

    def __len__(self):
        with self._lock.reading():
            return len(self._tags) + len(self._prefixes)
