# -*- coding: utf-8 -*-
"""
noggin/converters
~~~~~~~~~~~~~~~~~

The value converters that turn the text of a header value into a typed
Python value.

A converter is any callable that takes the raw value of a single header line
(everything after the first ``:``, untrimmed) and returns the converted value.
Converters signal unparseable input by raising ``ValueError``; the parser turns
that into an :class:`InvalidHeaderValueError
<noggin.common.exceptions.InvalidHeaderValueError>` naming the field.

Converters are looked up by tag. The built-in tags are registered in
``CONVERTERS``; further ones can be added with :func:`register`.
"""
import logging
import math
import re
import struct

import rfc3986
from rfc3986 import exceptions as uri_exceptions
from rfc3986 import validators

from .common.util import trim

log = logging.getLogger(__name__)

#: The separator between the items of a repeated header value.
VALUE_SEPARATOR = ','

_SIGNED = re.compile(r'[+-]?[0-9]+')
_UNSIGNED = re.compile(r'\+?[0-9]+')
_FLOAT = re.compile(
    r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?'
    r'|inf|infinity|nan)',
    re.IGNORECASE
)

# The characters RFC 3986 allows in a URI reference, with well-formed escapes.
# rfc3986 percent-encodes anything else before validating, so malformed text
# has to be caught first.
_URI_TEXT = re.compile(
    r"(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})*"
)

_URI_VALIDATOR = validators.Validator().check_validity_of(
    'scheme', 'userinfo', 'host', 'port', 'path', 'query', 'fragment'
)


def to_str(value):
    """
    Returns the value with surrounding spaces removed.
    """
    return trim(value)


def to_bytes(value):
    """
    Returns the trimmed value as an ASCII bytestring.
    """
    return trim(value).encode('ascii')


def to_bool(value):
    """
    Accepts exactly ``true`` or ``false``.
    """
    value = trim(value)
    if value == 'true':
        return True
    elif value == 'false':
        return False

    raise ValueError("Invalid boolean: %r" % value)


def integer(bits=None, signed=True):
    """
    Builds a converter for integers of the given width. ``bits=None`` places
    no bound on the value. Values outside the range of the width are
    rejected, as are unsigned values carrying a ``-`` sign.
    """
    if bits is None:
        low, high = None, None
    elif signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1

    pattern = _SIGNED if signed else _UNSIGNED

    def to_integer(value):
        value = trim(value)
        if not pattern.fullmatch(value):
            raise ValueError("Invalid integer: %r" % value)

        number = int(value)
        if low is not None and not low <= number <= high:
            raise ValueError("Integer %d out of range for %d bits" % (number, bits))

        return number

    return to_integer


def _parse_float(value):
    value = trim(value)
    if not _FLOAT.fullmatch(value):
        raise ValueError("Invalid float: %r" % value)

    return float(value)


def to_float(value):
    """
    Converts to a double precision float.
    """
    return _parse_float(value)


def to_single(value):
    """
    Converts to a float rounded to single precision. Values too large for
    single precision become infinite.
    """
    number = _parse_float(value)
    try:
        return struct.unpack('f', struct.pack('f', number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def to_uri(value):
    """
    Parses the trimmed value as a URI reference, returning an
    ``rfc3986.URIReference``. Relative references are allowed. Text
    containing characters that would need percent-encoding is rejected, not
    encoded.
    """
    text = trim(value)
    if not _URI_TEXT.fullmatch(text):
        raise ValueError("Invalid URI reference: %r" % value)

    uri = rfc3986.uri_reference(text)
    try:
        _URI_VALIDATOR.validate(uri)
    except uri_exceptions.ValidationError as e:
        raise ValueError("Invalid URI reference: %r" % value) from e

    return uri


def repeated(converter):
    """
    Builds a converter for comma-separated values. The raw value is split on
    every comma and each part is handed to ``converter``; if any part fails,
    the whole value fails.
    """
    def to_list(value):
        return [converter(part) for part in value.split(VALUE_SEPARATOR)]

    return to_list


CONVERTERS = {
    'str': to_str,
    'bytes': to_bytes,
    'bool': to_bool,
    'int': integer(),
    'u8': integer(8, signed=False),
    'u16': integer(16, signed=False),
    'u32': integer(32, signed=False),
    'u64': integer(64, signed=False),
    'u128': integer(128, signed=False),
    'usize': integer(64, signed=False),
    'i8': integer(8),
    'i16': integer(16),
    'i32': integer(32),
    'i64': integer(64),
    'i128': integer(128),
    'isize': integer(64),
    'float': to_float,
    'f64': to_float,
    'f32': to_single,
    'uri': to_uri,
}

#: The tags used when a field is declared with a Python type.
TYPE_TAGS = {
    str: 'str',
    bytes: 'bytes',
    bool: 'bool',
    int: 'int',
    float: 'float',
    rfc3986.URIReference: 'uri',
}


def register(tag, converter):
    """
    Registers ``converter`` under ``tag``, replacing any converter already
    registered there.
    """
    if not callable(converter):
        raise TypeError("Converter for %r is not callable" % tag)

    if tag in CONVERTERS:
        log.debug("Replacing converter for value type %r", tag)

    CONVERTERS[tag] = converter


def lookup(tag, overrides=None):
    """
    Resolves a value type to a converter. The Python types in ``TYPE_TAGS``
    resolve to their tag. Other callables are returned as they are; anything
    else is looked up first in ``overrides``, then in the registry.

    :raises KeyError: if the tag is not known.
    """
    if isinstance(tag, type) and tag in TYPE_TAGS:
        tag = TYPE_TAGS[tag]

    if callable(tag):
        return tag

    if overrides and tag in overrides:
        return overrides[tag]

    try:
        return CONVERTERS[tag]
    except KeyError:
        raise KeyError("Unknown value type: %r" % (tag,)) from None
