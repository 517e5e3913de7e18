# -*- coding: utf-8 -*-
"""
noggin
~~~~~~

Declarative, schema-driven parsing of HTTP message heads.

Describe the headers you care about, and noggin turns the head of a message
into a typed record of them, handing back the body untouched:

    >>> from typing import List, Optional
    >>> from typing import NamedTuple
    >>> import noggin
    >>> class Headers(NamedTuple):
    ...     content_length: int
    ...     accept: List[str]
    ...     connection: Optional[str]
    >>> parser = noggin.HeadParser(Headers)
    >>> headers, body = parser.parse_headers(
    ...     b'Content-Length: 2\\r\\nAccept: text/html, text/plain\\r\\n\\r\\nhi'
    ... )
    >>> headers
    Headers(content_length=2, accept=['text/html', 'text/plain'], connection=None)
    >>> bytes(body)
    b'hi'
"""
__version__ = '0.4.0'

# Throw import errors on Python < 3.9.
import sys as _sys
if _sys.version_info < (3, 9):
    raise ImportError("noggin only supports Python 3.9 or higher.")

from .common.exceptions import (
    ParseError, IncompleteHeadError, NonAsciiError, MalformedHeaderError,
    InvalidHeaderValueError, MissingHeaderError
)
from .converters import register
from .parser import HeadParser, parse_headers, parse_head_section
from .schema import (
    Cardinality, Necessity, FieldDescriptor, HeaderSchema, field
)

__all__ = [
    'HeadParser', 'parse_headers', 'parse_head_section',
    'HeaderSchema', 'FieldDescriptor', 'Cardinality', 'Necessity', 'field',
    'register',
    'ParseError', 'IncompleteHeadError', 'NonAsciiError',
    'MalformedHeaderError', 'InvalidHeaderValueError', 'MissingHeaderError',
]

# Set default logging handler.
import logging
logging.getLogger(__name__).addHandler(logging.NullHandler())
