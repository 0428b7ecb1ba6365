"""Collection and composite value kinds.

Collections (seq, tuple, map, set) and ranges are registered by type.
Records, exceptions and plain objects are written under per-class tags
such as ``tag:python.yaml.org,2002:struct:Point``; decoding one needs
the class to be registered with ``register_class`` so that no class is
ever looked up by a name taken from the input.
"""

import builtins
import dataclasses

from yamltypes.error import MalformedPayloadError, RepresenterError
from yamltypes.nodes import ScalarNode, DOUBLE_QUOTED
from yamltypes.registry import ValueKind, yaml_tag, python_tag
from yamltypes.values import Range, UnknownObject

SEQ_TAG = yaml_tag('seq')
MAP_TAG = yaml_tag('map')
SET_TAG = yaml_tag('set')
TUPLE_TAG = python_tag('tuple')
RANGE_TAG = python_tag('range')
STRUCT_PREFIX = python_tag('struct:')
EXCEPTION_PREFIX = python_tag('exception:')
OBJECT_PREFIX = python_tag('object:')


def construct_yaml_seq(constructor, node):
    return constructor.construct_sequence(node, SEQ_TAG)


def represent_list(representer, data):
    return representer.represent_sequence(SEQ_TAG, data)


def construct_tuple(constructor, node):
    return tuple(constructor.construct_sequence(node, TUPLE_TAG))


def represent_tuple(representer, data):
    return representer.represent_sequence(TUPLE_TAG, data)


def construct_yaml_map(constructor, node):
    return constructor.construct_mapping(node, MAP_TAG)


def represent_dict(representer, data):
    return representer.represent_mapping(MAP_TAG, data.items())


def construct_yaml_set(constructor, node):
    return set(constructor.construct_mapping(node, SET_TAG))


def represent_set(representer, data):
    return representer.represent_mapping(SET_TAG, [(item, None) for item in data])


def construct_range(constructor, node):
    if isinstance(node, ScalarNode):
        return _construct_range_scalar(constructor, node)
    fields = constructor.construct_fields(node, RANGE_TAG)
    for name in ('begin', 'end', 'excl'):
        if name not in fields:
            raise MalformedPayloadError(RANGE_TAG, "missing field", field=name,
                                        mark=node.start_mark)
    extra = sorted(set(fields) - {'begin', 'end', 'excl'})
    if extra:
        raise MalformedPayloadError(RANGE_TAG, "unexpected field", field=extra[0],
                                    mark=node.start_mark)
    if not isinstance(fields['excl'], bool):
        raise MalformedPayloadError(RANGE_TAG, "expected a boolean, but found %r"
                                    % (fields['excl'],), field='excl', mark=node.start_mark)
    return Range(fields['begin'], fields['end'], fields['excl'])


def _construct_range_scalar(constructor, node):
    # The short form "begin..end" / "begin...end"
    value = constructor.construct_scalar(node, RANGE_TAG)
    begin, dots, end = value.partition('...')
    if not dots:
        begin, dots, end = value.partition('..')
    if not dots or not begin.strip() or not end.strip():
        raise MalformedPayloadError(RANGE_TAG, "expected begin..end or begin...end, "
                                    "but found %r" % value, mark=node.start_mark)
    bounds = []
    for part in (begin, end):
        part = part.strip()
        style = None
        if len(part) >= 2 and part[0] == part[-1] == '"':
            part, style = part[1:-1], DOUBLE_QUOTED
        bounds.append(constructor.construct_object(
            ScalarNode(None, part, node.start_mark, style=style)))
    return Range(bounds[0], bounds[1], dots == '...')


def represent_range(representer, data):
    return representer.represent_mapping(RANGE_TAG, [
        ('begin', data.begin),
        ('end', data.end),
        ('excl', data.excl),
    ])


def is_struct(data):
    """Return True for dataclass instances and named tuples."""
    if isinstance(data, type):
        return False
    if dataclasses.is_dataclass(data):
        return True
    return isinstance(data, tuple) and hasattr(type(data), '_fields')


def struct_fields(cls):
    """Return the declared field names of a record class."""
    if dataclasses.is_dataclass(cls):
        return [field.name for field in dataclasses.fields(cls)]
    return list(cls._fields)


def _struct_required(cls):
    if dataclasses.is_dataclass(cls):
        return [field.name for field in dataclasses.fields(cls)
                if field.init and field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING]
    defaults = getattr(cls, '_field_defaults', {})
    return [name for name in cls._fields if name not in defaults]


def default_tag(prefix, cls):
    name = cls.__qualname__
    if '<locals>' in name:
        raise RepresenterError("can't give a tag to anonymous class %s; register it "
                               "with an explicit tag" % name)
    return prefix + name


def _class_tag(data, prefix):
    cls = type(data)
    tag = vars(cls).get('yaml_tag')
    if isinstance(tag, str) and tag:
        return tag
    return default_tag(prefix, cls)


def represent_struct(representer, data, tag=None):
    if tag is None:
        tag = _class_tag(data, STRUCT_PREFIX)
    return representer.represent_mapping(tag, [
        (name, getattr(data, name)) for name in struct_fields(type(data))])


def _check_fields(tag, node, cls, fields, allowed, required):
    missing = [name for name in required if name not in fields]
    if missing:
        raise MalformedPayloadError(tag, "missing field required by %s" % cls.__name__,
                                    field=missing[0], mark=node.start_mark)
    if allowed is not None:
        unknown = [name for name in fields if name not in allowed]
        if unknown:
            raise MalformedPayloadError(tag, "%s has no such field" % cls.__name__,
                                        field=unknown[0], mark=node.start_mark)


def construct_struct(constructor, node, cls, tag):
    fields = constructor.construct_fields(node, tag)
    allowed = struct_fields(cls)
    _check_fields(tag, node, cls, fields, allowed, _struct_required(cls))
    late = {}
    if dataclasses.is_dataclass(cls):
        for field in dataclasses.fields(cls):
            if not field.init and field.name in fields:
                late[field.name] = fields.pop(field.name)
    try:
        instance = cls(**fields)
    except (TypeError, ValueError) as exc:
        raise MalformedPayloadError(tag, "cannot construct %s: %s" % (cls.__name__, exc),
                                    mark=node.start_mark) from exc
    # Fields outside __init__ are assigned directly, frozen or not
    for name, value in late.items():
        object.__setattr__(instance, name, value)
    return instance


def exception_message(data):
    if not data.args:
        return None
    if len(data.args) == 1:
        return str(data.args[0])
    return str(data)


def exception_attributes(data):
    return sorted(((name, value) for name, value in vars(data).items()
                   if not name.startswith('_')), key=lambda item: item[0])


def represent_exception(representer, data, tag=None):
    if tag is None:
        tag = _class_tag(data, EXCEPTION_PREFIX)
    items = [('message', exception_message(data))]
    items.extend(exception_attributes(data))
    return representer.represent_mapping(tag, items)


def construct_exception(constructor, node, cls, tag):
    fields = constructor.construct_fields(node, tag)
    if 'message' not in fields:
        raise MalformedPayloadError(tag, "missing field", field='message',
                                    mark=node.start_mark)
    message = fields.pop('message')
    if message is not None and not isinstance(message, str):
        raise MalformedPayloadError(tag, "expected a string, but found %r" % (message,),
                                    field='message', mark=node.start_mark)
    for name in fields:
        if name.startswith('_'):
            raise MalformedPayloadError(tag, "private attributes can't be set",
                                        field=name, mark=node.start_mark)
    # Allocate without running __init__, whose signature is unknown
    exc = cls.__new__(cls, *(() if message is None else (message,)))
    for name, value in fields.items():
        try:
            setattr(exc, name, value)
        except (AttributeError, TypeError) as error:
            raise MalformedPayloadError(tag, "cannot set attribute: %s" % error,
                                        field=name, mark=node.start_mark) from error
    return exc


def object_state(data):
    """Return the attributes of an object as a list sorted by name."""
    cls = type(data)
    getstate = getattr(cls, '__getstate__', None)
    if getstate is not None and getstate is not getattr(object, '__getstate__', None):
        state = data.__getstate__()
        if not isinstance(state, dict):
            raise RepresenterError("%s.__getstate__ must return a dict" % cls.__name__)
    else:
        state = vars(data)
    return sorted(state.items(), key=lambda item: item[0])


def represent_object(representer, data, tag=None):
    if tag is None:
        tag = _class_tag(data, OBJECT_PREFIX)
    return representer.represent_mapping(tag, object_state(data))


def construct_object(constructor, node, cls, tag, required=()):
    fields = constructor.construct_fields(node, tag)
    if hasattr(cls, '__setstate__'):
        instance = cls.__new__(cls)
        instance.__setstate__(fields)
        return instance
    _check_fields(tag, node, cls, fields, None, required)
    for name in fields:
        if name.startswith('__'):
            raise MalformedPayloadError(tag, "special attributes can't be set",
                                        field=name, mark=node.start_mark)
    # All fields are decoded and checked before the instance exists, so a
    # failure never leaves a partly initialized object behind.
    instance = cls.__new__(cls)
    for name, value in fields.items():
        try:
            setattr(instance, name, value)
        except (AttributeError, TypeError) as exc:
            raise MalformedPayloadError(tag, "cannot set attribute: %s" % exc,
                                        field=name, mark=node.start_mark) from exc
    return instance


def represent_unknown(representer, data):
    fields = sorted(data.fields().items(), key=lambda item: item[0])
    return representer.represent_mapping(data.yaml_tag, fields)


def class_kind(cls, tag=None, required=None):
    """Build the value kind for a record, exception or plain class.

    Args:
        cls: The class to encode and decode
        tag: Tag for instances (default: from ``cls.yaml_tag`` or the
            class name)
        required: Field names a plain object must have when decoded
            (default: ``cls.yaml_required`` or none)
    """
    if isinstance(cls, type) and (dataclasses.is_dataclass(cls) or
                                  (issubclass(cls, tuple) and hasattr(cls, '_fields'))):
        prefix, represent, construct = STRUCT_PREFIX, represent_struct, construct_struct
        extra = {}
    elif isinstance(cls, type) and issubclass(cls, BaseException):
        prefix, represent, construct = EXCEPTION_PREFIX, represent_exception, construct_exception
        extra = {}
    elif isinstance(cls, type):
        prefix, represent, construct = OBJECT_PREFIX, represent_object, construct_object
        if required is None:
            required = getattr(cls, 'yaml_required', ())
        extra = {'required': tuple(required)}
    else:
        raise TypeError("expected a class, got %r" % (cls,))
    if tag is None:
        tag = vars(cls).get('yaml_tag') or default_tag(prefix, cls)

    def encode(representer, data):
        return represent(representer, data, tag)

    def decode(constructor, node):
        return construct(constructor, node, cls, tag, **extra)

    return ValueKind(tag, encode, decode, types=(cls,), exact=True)


def register_class(registry, cls, tag=None, required=None):
    """Register ``cls`` so its instances encode and decode under one tag."""
    return registry.register(class_kind(cls, tag, required))


def _builtin_exceptions():
    for value in vars(builtins).values():
        if isinstance(value, type) and issubclass(value, BaseException):
            yield value


def register(registry):
    """Register the collection and composite value kinds."""
    registry.register_kind(SEQ_TAG, represent_list, construct_yaml_seq, types=list)
    registry.register_kind(TUPLE_TAG, represent_tuple, construct_tuple, types=tuple)
    registry.register_kind(MAP_TAG, represent_dict, construct_yaml_map, types=dict)
    registry.register_kind(SET_TAG, represent_set, construct_yaml_set, types=(set, frozenset))
    registry.register_kind(RANGE_TAG, represent_range, construct_range, types=Range)
    registry.register_kind(STRUCT_PREFIX, represent_struct, predicate=is_struct)
    registry.register_kind(EXCEPTION_PREFIX, represent_exception, types=BaseException)
    registry.register_kind(OBJECT_PREFIX + 'UnknownObject', represent_unknown,
                           types=UnknownObject)
    registry.set_object_kind(ValueKind(OBJECT_PREFIX, represent_object))
    for cls in _builtin_exceptions():
        # Decode only: unregistered subclasses keep their own tag on encode
        kind = class_kind(cls)
        registry.register_kind(kind.tag, decode=kind.decode)
