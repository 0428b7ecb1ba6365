"""Value types with no direct Python counterpart."""

import threading
import weakref


class Symbol(str):
    """An interned name.

    Two live symbols with the same name are the same object, so they can
    be compared with ``is``. ``repr()`` gives the ``:name`` form. The
    intern table only holds weak references, so unused symbols are freed.
    """

    _table = weakref.WeakValueDictionary()
    _lock = threading.Lock()

    def __new__(cls, name):
        name = str(name)
        with cls._lock:
            symbol = cls._table.get(name)
            if symbol is None:
                symbol = super().__new__(cls, name)
                cls._table[name] = symbol
        return symbol

    @property
    def name(self):
        return str.__str__(self)

    def __repr__(self):
        if self.name.isidentifier():
            return ':' + self.name
        return ':' + '"%s"' % self.name.replace('\\', '\\\\').replace('"', '\\"')

    def __reduce__(self):
        return (Symbol, (self.name,))


class Range:
    """An interval from ``begin`` to ``end``.

    The end is included unless ``excl`` is true. Bounds can be any
    comparable values; integer ranges can also be iterated.
    """

    __slots__ = ('begin', 'end', 'excl')

    def __init__(self, begin, end, excl=False):
        self.begin = begin
        self.end = end
        self.excl = bool(excl)

    def __contains__(self, value):
        if self.excl:
            return self.begin <= value < self.end
        return self.begin <= value <= self.end

    def __iter__(self):
        if not isinstance(self.begin, int) or not isinstance(self.end, int):
            raise TypeError("can't iterate from %s" % type(self.begin).__name__)
        return iter(range(self.begin, self.end if self.excl else self.end + 1))

    def __eq__(self, other):
        if not isinstance(other, Range):
            return NotImplemented
        return (self.begin, self.end, self.excl) == (other.begin, other.end, other.excl)

    def __hash__(self):
        return hash((Range, self.begin, self.end, self.excl))

    def __repr__(self):
        return '%r%s%r' % (self.begin, '...' if self.excl else '..', self.end)


class UnknownObject:
    """A mapping decoded under a tag no value kind is registered for.

    ``yaml_tag`` keeps the original tag and ``fields()`` returns the
    payload. Fields can also be read as attributes, except where a name
    clashes with an attribute of the class itself (``fields``,
    ``yaml_tag``).
    """

    def __init__(self, tag, fields):
        self.yaml_tag = tag
        self._fields = dict(fields)

    def __getattr__(self, name):
        fields = self.__dict__.get('_fields')
        if fields is not None and name in fields:
            return fields[name]
        raise AttributeError("%r object has no attribute %r"
                             % (self.__class__.__name__, name))

    def fields(self):
        return dict(self._fields)

    def __eq__(self, other):
        if not isinstance(other, UnknownObject):
            return NotImplemented
        return (self.yaml_tag, self._fields) == (other.yaml_tag, other._fields)

    def __repr__(self):
        return '%s(%r, %r)' % (self.__class__.__name__, self.yaml_tag, self._fields)
