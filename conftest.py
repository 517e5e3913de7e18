# -*- coding: utf-8 -*-
import collections

import pytest

from noggin import HeadParser, HeaderSchema, field


RequestHeaders = collections.namedtuple(
    'RequestHeaders',
    ['content_type', 'content_length', 'accept', 'connection', 'pragma']
)


@pytest.fixture(scope="session")
def schema():
    """
    Provides the schema most tests parse with: one field for each mix of
    cardinality and necessity.
    """
    return HeaderSchema([
        field('content_type'),
        field('content_length', 'u32'),
        field('accept', repeated=True),
        field('connection', optional=True),
        field('pragma', repeated=True, optional=True),
    ], record_type=RequestHeaders)


@pytest.fixture(scope="session")
def parser(schema):
    """
    Provides a parser for ``schema``. Parsers are stateless, so one is shared
    by the whole session.
    """
    return HeadParser(schema)
