# -*- coding: utf-8 -*-
"""
noggin/parser
~~~~~~~~~~~~~

This module contains noggin's head parser. A parser is built once for a
:class:`HeaderSchema <noggin.schema.HeaderSchema>` and then turns message heads
into records of that schema.

Parsing happens in four steps:

1. The buffer is split at the first empty line into the head, which must be
   ASCII, and the body, which is returned untouched.
2. The head is walked line by line. Each line's key is compared,
   case-insensitively, against the keys of the schema, and matching values
   are converted and collected.
3. Required fields are checked for.
4. The record is built.

Any failure raises a :class:`ParseError <noggin.common.exceptions.ParseError>`
and aborts the parse; no partial record is ever returned.
"""
import logging
import re

from .common.exceptions import (
    IncompleteHeadError, NonAsciiError, MalformedHeaderError,
    InvalidHeaderValueError, MissingHeaderError
)
from .common.util import ascii_lower
from .converters import lookup, repeated
from .schema import Cardinality, HeaderSchema, Necessity

log = logging.getLogger(__name__)

#: The empty line that ends the head of a message.
HEAD_DELIMITER = b'\r\n\r\n'

#: The separator between header lines.
LINE_SEPARATOR = '\r\n'

#: The separator between a header key and its value.
KEY_VALUE_SEPARATOR = ':'

_HEAD_DELIMITER_RE = re.compile(re.escape(HEAD_DELIMITER))

# Marks a single-valued field that has not been seen yet. None can't be used,
# as a converter is free to return it.
_UNBOUND = object()


def split_head(buffer):
    """
    Splits a buffer holding a message into its head and its body.

    :param buffer: A ``bytes``, ``bytearray`` or ``memoryview`` holding the
        head, an empty line, and the body.
    :returns: A tuple of the head, as a ``str``, and the body, as a
        ``memoryview`` into ``buffer``. The body is not copied, and keeps
        ``buffer`` alive for as long as it is referenced.
    :raises IncompleteHeadError: if there is no empty line in the buffer.
    :raises NonAsciiError: if the head contains non-ASCII bytes.
    """
    view = memoryview(buffer).cast('B')

    if isinstance(buffer, (bytes, bytearray)):
        head_end = buffer.find(HEAD_DELIMITER)
    else:
        match = _HEAD_DELIMITER_RE.search(view)
        head_end = match.start() if match is not None else -1

    if head_end < 0:
        raise IncompleteHeadError()

    # Once the head is known to be ASCII it is also valid text, so decoding
    # it is the check.
    try:
        head = str(view[:head_end], 'ascii')
    except UnicodeDecodeError:
        raise NonAsciiError() from None

    body = view[head_end + len(HEAD_DELIMITER):]
    return head, body


def iter_lines(head):
    """
    Yields the ``(key, value)`` pairs of a head section. Values are returned
    exactly as they appear after the first ``:``. An empty head has no lines.

    :raises MalformedHeaderError: when a line without a ``:`` is reached.
    """
    if not head:
        return

    for line in head.split(LINE_SEPARATOR):
        key, sep, value = line.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            raise MalformedHeaderError(line)

        yield key, value


def iter_pairs(headers):
    """
    Yields the ``(key, value)`` pairs of an already split header list, such
    as one decoded from an HTTP/2 header block. Bytestrings are decoded as
    ASCII.

    :raises NonAsciiError: if a key or value is not ASCII.
    """
    for key, value in headers:
        yield _to_text(key), _to_text(value)


def _to_text(element):
    if isinstance(element, (bytes, bytearray, memoryview)):
        try:
            return str(element, 'ascii')
        except UnicodeDecodeError:
            raise NonAsciiError() from None

    if not element.isascii():
        raise NonAsciiError()

    return element


def extract(pairs, fields):
    """
    Walks ``(key, value)`` pairs and collects the values of every field.

    Single-valued fields keep the first value they see. Later values for the
    same key are ignored, and never converted. Repeated fields collect every
    item of every matching line, in order. Keys that match no field are
    skipped.

    :param pairs: An iterable of ``(key, value)`` pairs.
    :param fields: A sequence of ``(descriptor, converter)`` pairs. The
        converter of a repeated field must return a list.
    :returns: A list with one slot per field: the bound value or ``_UNBOUND``
        for single fields, a list for repeated ones.
    :raises InvalidHeaderValueError: if a converter rejects a value.
    """
    slots = [
        [] if d.cardinality is Cardinality.REPEATED else _UNBOUND
        for d, _ in fields
    ]

    for key, value in pairs:
        key = ascii_lower(key)

        for index, (descriptor, converter) in enumerate(fields):
            if descriptor.key != key:
                continue

            if descriptor.cardinality is Cardinality.REPEATED:
                slots[index].extend(_convert(descriptor, converter, value))
            elif slots[index] is _UNBOUND:
                slots[index] = _convert(descriptor, converter, value)
            else:
                log.debug("Ignoring duplicate %s header", descriptor.key)

    return slots


def _convert(descriptor, converter, value):
    try:
        return converter(value)
    except ValueError as e:
        raise InvalidHeaderValueError(descriptor.key) from e


def validate(fields, slots):
    """
    Checks that every required field was found.

    :raises MissingHeaderError: for the first required field, in schema
        order, that has no value.
    """
    for (descriptor, _), slot in zip(fields, slots):
        if descriptor.necessity is not Necessity.REQUIRED:
            continue

        if slot is _UNBOUND or (
            descriptor.cardinality is Cardinality.REPEATED and not slot
        ):
            log.debug("Required header %s is missing", descriptor.key)
            raise MissingHeaderError(descriptor.key)


def build(record_type, fields, slots):
    """
    Builds the parsed record from validated slots. Optional fields that were
    not found are ``None``; so are optional repeated fields with no items.
    """
    values = {}

    for (descriptor, _), slot in zip(fields, slots):
        if slot is _UNBOUND:
            assert descriptor.necessity is Necessity.OPTIONAL
            slot = None
        elif (descriptor.cardinality is Cardinality.REPEATED and
              descriptor.necessity is Necessity.OPTIONAL and
              not slot):
            slot = None

        values[descriptor.name] = slot

    return record_type(**values)


class HeadParser(object):
    """
    Parses message heads into records of a single schema.

    A parser holds no per-parse state: it can be reused for any number of
    messages, and shared between threads.

    :param schema: A :class:`HeaderSchema <noggin.schema.HeaderSchema>`, or
        an annotated class to derive one from.
    :param converters: (optional) A mapping of value type tags to converters,
        consulted before the global registry.
    :raises KeyError: if a field names an unknown value type.
    """
    def __init__(self, schema, converters=None):
        if not isinstance(schema, HeaderSchema):
            schema = HeaderSchema.from_class(schema)

        #: The schema this parser produces records for.
        self.schema = schema

        # Converters are resolved once, here, rather than on every line.
        self._fields = tuple(
            (d, self._resolve(d, converters)) for d in schema
        )

    @staticmethod
    def _resolve(descriptor, converters):
        converter = lookup(descriptor.value_type, converters)
        if descriptor.cardinality is Cardinality.REPEATED:
            converter = repeated(converter)
        return converter

    def parse_headers(self, buffer):
        """
        Parses the head of a complete message.

        :param buffer: A bytes-like object holding the head, an empty line,
            and the body.
        :returns: A tuple of the parsed record and the body, as a
            ``memoryview`` into ``buffer``.
        """
        head, body = split_head(buffer)
        return self.parse_head_section(head), body

    def parse_head_section(self, head):
        """
        Parses a head section that has already been split from its body: a
        ``str`` of header lines joined by CRLF, without the final empty line.

        :raises NonAsciiError: if the head is not ASCII.
        """
        if not head.isascii():
            raise NonAsciiError()

        return self._parse(iter_lines(head))

    def parse_header_list(self, headers):
        """
        Parses an already split header list: an iterable of ``(key, value)``
        pairs, as text or ASCII bytestrings.
        """
        return self._parse(iter_pairs(headers))

    def _parse(self, pairs):
        slots = extract(pairs, self._fields)
        validate(self._fields, slots)
        return build(self.schema.record_type, self._fields, slots)


def parse_headers(schema, buffer):
    """
    Parses the head of a complete message with a one-off parser.
    See :meth:`HeadParser.parse_headers`.
    """
    return HeadParser(schema).parse_headers(buffer)


def parse_head_section(schema, head):
    """
    Parses a head section with a one-off parser.
    See :meth:`HeadParser.parse_head_section`.
    """
    return HeadParser(schema).parse_head_section(head)
