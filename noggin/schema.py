# -*- coding: utf-8 -*-
"""
noggin/schema
~~~~~~~~~~~~~

Contains the structures that describe which headers a parser looks for, and
what it does with them.

A :class:`HeaderSchema` is an ordered set of :class:`FieldDescriptor` objects,
one per field of the record the parser produces. Schemas can be written out by
hand with :func:`field`, or derived from an annotated class with
:meth:`HeaderSchema.from_class`. They are immutable once built, and can be
shared freely between parsers and threads.
"""
import collections
import enum
import types
import typing

from .common.util import normalize_key
from .converters import TYPE_TAGS


class Cardinality(enum.Enum):
    """
    Whether a field takes the first value it sees, or collects all of them.
    """
    SINGLE = 'single'
    REPEATED = 'repeated'


class Necessity(enum.Enum):
    """
    Whether the absence of a field is an error.
    """
    REQUIRED = 'required'
    OPTIONAL = 'optional'


FieldDescriptor = collections.namedtuple(
    'FieldDescriptor', ['name', 'key', 'cardinality', 'necessity', 'value_type']
)


def field(name, value_type='str', repeated=False, optional=False, key=None):
    """
    Builds a :class:`FieldDescriptor`.

    :param name: The attribute name of the field on the parsed record.
    :param value_type: A converter tag (see :mod:`noggin.converters`), a Python
        type listed in ``TYPE_TAGS``, or a converter callable.
    :param repeated: (optional) Whether all values of the header are collected
        into a list, rather than the first one being kept.
    :param optional: (optional) Whether the header may be absent.
    :param key: (optional) The header key, if it is not simply ``name`` with
        underscores replaced by hyphens.
    """
    return FieldDescriptor(
        name=name,
        key=normalize_key(key if key is not None else name),
        cardinality=Cardinality.REPEATED if repeated else Cardinality.SINGLE,
        necessity=Necessity.OPTIONAL if optional else Necessity.REQUIRED,
        value_type=value_type,
    )


class HeaderSchema(object):
    """
    An ordered, immutable collection of field descriptors.

    :param fields: An iterable of :class:`FieldDescriptor` objects, in the
        order of the fields of the parsed record.
    :param record_type: (optional) The type of the parsed record. It is called
        with every field as a keyword argument. If not provided, a
        ``namedtuple`` called ``Headers`` is generated.
    """
    def __init__(self, fields, record_type=None):
        # Keys are normalized here, once, so that the parser only has to fold
        # the keys it reads from the wire.
        fields = tuple(f._replace(key=normalize_key(f.key)) for f in fields)

        seen_names = set()
        seen_keys = set()
        for f in fields:
            if f.name in seen_names:
                raise ValueError("Duplicate field name: %s" % f.name)
            if f.key in seen_keys:
                raise ValueError("Duplicate header key: %s" % f.key)
            seen_names.add(f.name)
            seen_keys.add(f.key)

        self._fields = fields

        if record_type is None:
            record_type = collections.namedtuple(
                'Headers', [f.name for f in fields]
            )

        #: The type the parsed record is built as.
        self.record_type = record_type

    @classmethod
    def from_class(cls, record_type):
        """
        Derives a schema from the annotations of a class, in declaration
        order. The class must accept its fields as keyword arguments;
        dataclasses and ``typing.NamedTuple`` classes both do.

        - ``str``, ``bytes``, ``bool``, ``int``, ``float`` and
          ``rfc3986.URIReference`` select the matching converter.
        - ``typing.Annotated[T, tag]`` selects the converter registered under
          ``tag``, e.g. ``Annotated[int, 'u32']``.
        - ``List[T]`` makes the field repeated, ``Optional[T]`` makes it
          optional, and ``Optional[List[T]]`` makes it both.

        :raises TypeError: if an annotation cannot be mapped to a field.
        """
        hints = typing.get_type_hints(record_type, include_extras=True)
        fields = [
            _field_from_annotation(name, hint)
            for name, hint in hints.items()
            if not name.startswith('_') and
            typing.get_origin(hint) is not typing.ClassVar
        ]
        return cls(fields, record_type=record_type)

    @property
    def fields(self):
        """
        The field descriptors, as a tuple.
        """
        return self._fields

    def __iter__(self):
        return iter(self._fields)

    def __len__(self):
        return len(self._fields)

    def __getitem__(self, index):
        return self._fields[index]

    def __eq__(self, other):
        if not isinstance(other, HeaderSchema):
            return NotImplemented
        return (
            self._fields == other._fields and
            self.record_type is other.record_type
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "HeaderSchema(%s)" % ', '.join(
            f.key for f in self._fields
        )


_UNION_TYPES = (typing.Union, getattr(types, 'UnionType', typing.Union))


def _field_from_annotation(name, hint):
    optional = False
    if typing.get_origin(hint) in _UNION_TYPES:
        args = typing.get_args(hint)
        members = [a for a in args if a is not type(None)]
        if len(members) != 1 or len(args) != 2:
            raise TypeError(
                "Field %s: only Optional[T] unions are supported" % name
            )
        hint = members[0]
        optional = True

    repeated = False
    if typing.get_origin(hint) is list:
        args = typing.get_args(hint)
        if len(args) != 1:
            raise TypeError("Field %s: list fields need an item type" % name)
        hint = args[0]
        repeated = True

    return field(
        name,
        value_type=_value_type(name, hint),
        repeated=repeated,
        optional=optional,
    )


def _value_type(name, hint):
    if typing.get_origin(hint) is typing.Annotated:
        base, *metadata = typing.get_args(hint)
        for tag in metadata:
            if isinstance(tag, str) or callable(tag):
                return tag
        hint = base

    try:
        return TYPE_TAGS[hint]
    except (KeyError, TypeError):
        raise TypeError(
            "Field %s: no header value type for %r" % (name, hint)
        ) from None
