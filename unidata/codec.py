#! /usr/bin/env python
"""Encodes single code points to UTF-8 and UTF-16

The functions in this module work on integer code points rather than
on Python strings so that they can be used with any code point in the
Unicode code space, including the surrogate code points that Python
refuses to encode."""

MAX_CODE_POINT = 0x10FFFF

HIGH_SURROGATES = (0xD800, 0xDBFF)
LOW_SURROGATES = (0xDC00, 0xDFFF)


class EncodingError(ValueError):

    """Raised when a code point can't be encoded

    code_point
        The offending value.

    EncodingError is a subclass of ValueError."""

    def __init__(self, code_point, msg=None):
        self.code_point = code_point
        if msg is None:
            msg = "Invalid code point: %r" % (code_point, )
        super(EncodingError, self).__init__(msg)


def _check(code_point):
    if isinstance(code_point, bool) or not isinstance(code_point, int):
        raise EncodingError(code_point)
    if code_point < 0 or code_point > MAX_CODE_POINT:
        raise EncodingError(code_point)


def to_utf8(code_point):
    """Returns the UTF-8 encoding of code_point as a bytes object

    Surrogate code points are encoded with the same three byte pattern
    as any other code point in the Basic Multilingual Plane."""
    _check(code_point)
    if code_point <= 0x7F:
        return bytes((code_point, ))
    elif code_point <= 0x7FF:
        return bytes((
            0xC0 | (code_point >> 6),
            0x80 | (code_point & 0x3F)))
    elif code_point <= 0xFFFF:
        return bytes((
            0xE0 | (code_point >> 12),
            0x80 | ((code_point >> 6) & 0x3F),
            0x80 | (code_point & 0x3F)))
    else:
        return bytes((
            0xF0 | (code_point >> 18),
            0x80 | ((code_point >> 12) & 0x3F),
            0x80 | ((code_point >> 6) & 0x3F),
            0x80 | (code_point & 0x3F)))


def to_utf16(code_point):
    """Returns a tuple of the 16-bit code units encoding code_point

    Code points outside the Unicode code space, and the surrogates
    themselves, raise :class:`EncodingError`."""
    _check(code_point)
    if code_point <= 0xD7FF or 0xE000 <= code_point <= 0xFFFF:
        return (code_point, )
    elif code_point >= 0x10000:
        x = code_point - 0x10000
        return (HIGH_SURROGATES[0] + (x >> 10),
                LOW_SURROGATES[0] + (x & 0x3FF))
    else:
        raise EncodingError(
            code_point, "Surrogate code point U+%04X has no UTF-16 form" %
            code_point)


def from_surrogate_pair(high, low):
    """Returns the code point encoded by a UTF-16 surrogate pair

    high
        A code unit in the range D800-DBFF

    low
        A code unit in the range DC00-DFFF"""
    if not (HIGH_SURROGATES[0] <= high <= HIGH_SURROGATES[1]):
        raise EncodingError(high, "Not a high surrogate: %r" % (high, ))
    if not (LOW_SURROGATES[0] <= low <= LOW_SURROGATES[1]):
        raise EncodingError(low, "Not a low surrogate: %r" % (low, ))
    return 0x10000 + ((high - HIGH_SURROGATES[0]) << 10) + \
        (low - LOW_SURROGATES[0])


def to_string(code_point):
    """Returns a character string containing just code_point"""
    _check(code_point)
    return chr(code_point)


def format_code_point(code_point, wide=None):
    """Formats code_point in U+ notation

    wide
        Forces six hex digits when True, four (minimum) when False.  By
        default six digits are used for code points outside the Basic
        Multilingual Plane."""
    if wide is None:
        wide = code_point >= 0x10000
    if wide:
        return "U+%06X" % code_point
    else:
        return "U+%04X" % code_point
