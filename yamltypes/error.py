"""Error classes for the tag codec.

Provides YAMLError, MarkedYAMLError and Mark with PyYAML's formatting,
plus the errors raised by encode and decode.
"""


class Mark:
    """Represents a position in a YAML stream.

    Attributes:
        name: The name of the stream (e.g., filename or '<string>')
        index: Character index in the stream
        line: Line number (0-indexed)
        column: Column number (0-indexed)
        buffer: Optional buffer containing the source
        pointer: Optional pointer into the buffer
    """

    def __init__(self, name, index, line, column, buffer=None, pointer=None):
        self.name = name
        self.index = index
        self.line = line
        self.column = column
        self.buffer = buffer
        self.pointer = pointer

    def get_snippet(self, indent=4, max_length=75):
        """Return a snippet of the source at this mark."""
        if self.buffer is None or self.pointer is None:
            return None

        head = ''
        start = self.pointer
        while start > 0 and self.buffer[start - 1] not in '\0\r\n\x85\u2028\u2029':
            start -= 1
            if self.pointer - start > max_length / 2 - 1:
                head = ' ... '
                start += 5
                break

        tail = ''
        end = self.pointer
        while end < len(self.buffer) and self.buffer[end] not in '\0\r\n\x85\u2028\u2029':
            end += 1
            if end - self.pointer > max_length / 2 - 1:
                tail = ' ... '
                end -= 5
                break

        snippet = self.buffer[start:end]
        return ' ' * indent + head + snippet + tail + '\n' + \
               ' ' * (indent + self.pointer - start + len(head)) + '^'

    def __str__(self):
        snippet = self.get_snippet()
        where = "  in \"%s\", line %d, column %d" % (self.name, self.line + 1, self.column + 1)
        if snippet is not None:
            where += ":\n" + snippet
        return where


class YAMLError(Exception):
    """Base exception for YAML errors."""
    pass


class MarkedYAMLError(YAMLError):
    """YAML error with position marks.

    Attributes:
        context: Description of the parsing context
        context_mark: Mark pointing to the context
        problem: Description of the problem
        problem_mark: Mark pointing to the problem
        note: Additional note about the error
    """

    def __init__(self, context=None, context_mark=None,
                 problem=None, problem_mark=None, note=None):
        super().__init__(problem)
        self.context = context
        self.context_mark = context_mark
        self.problem = problem
        self.problem_mark = problem_mark
        self.note = note

    def __str__(self):
        lines = []
        if self.context is not None:
            lines.append(self.context)
        if self.context_mark is not None \
                and (self.problem is None or self.problem_mark is None
                     or self.context_mark.name != self.problem_mark.name
                     or self.context_mark.line != self.problem_mark.line
                     or self.context_mark.column != self.problem_mark.column):
            lines.append(str(self.context_mark))
        if self.problem is not None:
            lines.append(self.problem)
        if self.problem_mark is not None:
            lines.append(str(self.problem_mark))
        if self.note is not None:
            lines.append(self.note)
        return '\n'.join(lines)


class ConstructorError(MarkedYAMLError):
    """Raised while reconstructing a value from a node tree.

    ``path`` lists the mapping keys and sequence indexes leading from
    the top-level node down to the node that failed.
    """

    path = ()

    def add_path(self, key):
        self.path = (key,) + tuple(self.path)

    def __str__(self):
        text = super().__str__()
        if self.path:
            text += "\n  at path %s" % ''.join(
                '[%d]' % key if isinstance(key, int) else '.%s' % key
                for key in self.path)
        return text


class UnknownTagError(ConstructorError):
    """No value kind is registered for the tag of a node."""

    def __init__(self, tag, mark=None):
        super().__init__(None, None,
                         "could not determine a constructor for the tag %r" % tag,
                         mark)
        self.tag = tag


class MalformedPayloadError(ConstructorError):
    """A node did not have the shape or content its value kind expects.

    Attributes:
        tag: Tag of the value kind that rejected the payload
        field: Name of the offending mapping field, if any
    """

    def __init__(self, tag, problem, field=None, mark=None):
        if field is not None:
            context = "while constructing %r field %r" % (tag, field)
        else:
            context = "while constructing %r" % tag
        super().__init__(context, None, problem, mark)
        self.tag = tag
        self.field = field


class RepresenterError(YAMLError):
    """Raised when a value cannot be turned into a node tree."""
    pass


class CyclicStructureError(RepresenterError):
    """A value contains a reference to itself."""

    def __init__(self, data):
        super().__init__("cannot represent a self-referential %s object"
                         % type(data).__name__)
        self.data = data


class DepthExceededError(YAMLError):
    """Encode or decode nested deeper than the configured limit."""

    def __init__(self, limit, tag=None):
        message = "maximum nesting depth of %d exceeded" % limit
        if tag is not None:
            message += " at %r" % tag
        super().__init__(message)
        self.limit = limit
        self.tag = tag
