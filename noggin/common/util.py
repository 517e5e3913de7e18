# -*- coding: utf-8 -*-
"""
noggin/common/util
~~~~~~~~~~~~~~~~~~

General utility functions for use with noggin.
"""


def normalize_key(name):
    """
    Returns the canonical header key for a field name: lower case, with
    underscores turned into hyphens. ``content_type`` becomes
    ``content-type``. One trailing underscore is dropped first, so that
    ``from_`` can name the ``From`` header.
    """
    if name.endswith('_'):
        name = name[:-1]

    return ascii_lower(name.replace('_', '-'))


def ascii_lower(s):
    # str.lower() also folds non-ASCII letters, header keys are ASCII.
    return s.translate(_ASCII_LOWER)


def trim(value):
    """
    Strips leading and trailing ASCII spaces. Tabs and other whitespace are
    left alone.
    """
    return value.strip(' ')


_ASCII_LOWER = {c: c + 32 for c in range(ord('A'), ord('Z') + 1)}
