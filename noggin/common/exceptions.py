# -*- coding: utf-8 -*-
"""
noggin/common/exceptions
~~~~~~~~~~~~~~~~~~~~~~~~

Contains noggin's exceptions.
"""


class ParseError(Exception):
    """
    The base class for all errors raised while parsing a message head. Any
    of these should be treated as a fault in the input, not in noggin.
    """
    pass


class IncompleteHeadError(ParseError):
    """
    The buffer does not contain the empty line that terminates the head.
    """
    def __init__(self, msg="the http head was not complete"):
        super(IncompleteHeadError, self).__init__(msg)


class NonAsciiError(ParseError):
    """
    The head contained bytes outside of 7-bit ASCII.
    """
    def __init__(self, msg="the http head contained non-ascii characters"):
        super(NonAsciiError, self).__init__(msg)


class MalformedHeaderError(ParseError):
    """
    A header line did not contain a ``:`` separator.
    """
    def __init__(self, line=None):
        #: The offending header line.
        self.line = line
        super(MalformedHeaderError, self).__init__("malformed http header")


class InvalidHeaderValueError(ParseError):
    """
    The value of a recognised header could not be converted to the type its
    field asks for.
    """
    def __init__(self, field):
        #: The canonical key of the field whose value was rejected.
        self.field = field
        super(InvalidHeaderValueError, self).__init__(
            "invalid http header value: %s" % field
        )


class MissingHeaderError(ParseError):
    """
    A required header was not present in the head.
    """
    def __init__(self, field):
        #: The canonical key of the missing field.
        self.field = field
        super(MissingHeaderError, self).__init__(
            "missing http header: %s" % field
        )
