#! /usr/bin/env python
"""Parsers for the UnicodeData.txt and Blocks.txt source files

Both parsers work a line at a time and are lenient: a line that can't
be understood yields None rather than raising an error so that a
single bad line in the upstream data doesn't prevent the rest of the
database from loading."""

import logging
import re

from . import codec
from .characters import (
    DEFAULT_DECOMPOSITION,
    parse_numeric,
    UnicodeCharacter)


FIRST_SUFFIX = ", First>"
LAST_SUFFIX = ", Last>"

CONTROL_NAME = "<control>"

NFIELDS = 15

_tag_re = re.compile(r"^<(\w+)>$")


class ParseError(ValueError):

    """Raised when source data is structurally invalid

    Individual lines that can't be parsed are skipped, this error is
    reserved for data that can't be used at all.  ParseError is a
    subclass of ValueError."""
    pass


def _ignorable(line):
    return not line or not line.strip() or line.lstrip()[0] == '#'


def _parse_int(src, base, what, code_point):
    if not src:
        return None
    try:
        return int(src, base)
    except ValueError:
        logging.debug("U+%04X: bad %s value %r ignored", code_point, what,
                      src)
        return None


def parse_decomposition(src, code_point=None):
    """Parses the decomposition field of a UnicodeData.txt line

    src
        The field value, a space separated list of hex code points
        optionally preceded by a tag such as <compat>

    Returns a dictionary mapping decomposition tags onto lists of code
    points, or None if there is no decomposition.  Decompositions
    without a tag are stored against the 'canonical' tag."""
    decomp = {}
    tag = DEFAULT_DECOMPOSITION
    for token in src.split():
        match = _tag_re.match(token)
        if match:
            tag = match.group(1)
            continue
        try:
            decomp.setdefault(tag, []).append(int(token, 16))
        except ValueError:
            logging.debug("%s: bad decomposition token %r ignored",
                          "?" if code_point is None else
                          codec.format_code_point(code_point), token)
    return decomp or None


def parse_character_line(line):
    """Parses a line from UnicodeData.txt

    line
        A single line of text (with or without the line terminator)

    Returns a :class:`UnicodeCharacter` or None if the line is blank, a
    comment or has no code point.  The first and last lines of a
    character range (names of the form "<Name, First>" and "<Name,
    Last>") return records with just the :attr:`first` or just the
    :attr:`last` attribute set, these are paired up by
    :func:`unidata.merge.merge`."""
    if _ignorable(line):
        return None
    fields = [f.strip() for f in line.split(';')]
    if not fields[0]:
        return None
    try:
        code_point = int(fields[0], 16)
    except ValueError:
        logging.debug("Unparsable code point %r in line: %s", fields[0],
                      line.rstrip())
        return None
    if len(fields) < NFIELDS:
        fields = fields + [''] * (NFIELDS - len(fields))
    name = fields[1]
    oldname = fields[10] or None
    comment = fields[11] or None
    numeric = None
    if fields[8]:
        try:
            numeric = parse_numeric(fields[8])
        except (ValueError, ZeroDivisionError):
            logging.debug("U+%04X: bad numeric value %r ignored",
                          code_point, fields[8])
    cp = code_point
    first = last = None
    if not name or name == CONTROL_NAME:
        if oldname:
            name, oldname = oldname, None
        elif comment:
            name, comment = comment, None
    elif name.endswith(FIRST_SUFFIX):
        name = _strip_range_name(name, FIRST_SUFFIX)
        first, code_point = code_point, None
    elif name.endswith(LAST_SUFFIX):
        name = _strip_range_name(name, LAST_SUFFIX)
        last, code_point = code_point, None
    if not name:
        name = codec.format_code_point(cp)
    return UnicodeCharacter(
        code_point=code_point,
        first=first,
        last=last,
        name=name,
        general=fields[2] or None,
        combining=_parse_int(fields[3], 10, 'combining class', cp),
        bidi=fields[4] or None,
        decomp=parse_decomposition(fields[5], cp),
        decimal=_parse_int(fields[6], 10, 'decimal digit', cp),
        digit=_parse_int(fields[7], 10, 'digit', cp),
        numeric=numeric,
        mirrored=(fields[9] == 'Y'),
        oldname=oldname,
        comment=comment,
        uppercase=_parse_int(fields[12], 16, 'uppercase mapping', cp),
        lowercase=_parse_int(fields[13], 16, 'lowercase mapping', cp),
        titlecase=_parse_int(fields[14], 16, 'titlecase mapping', cp))


def _strip_range_name(name, suffix):
    name = name[:-len(suffix)]
    if name.startswith('<'):
        name = name[1:]
    return name


def parse_block_line(line):
    """Parses a line from Blocks.txt

    line
        A line of the form "0000..007F; Basic Latin"

    Returns a range :class:`UnicodeCharacter` with :attr:`first`,
    :attr:`last` and :attr:`name` set or None if the line is blank, a
    comment or malformed."""
    if _ignorable(line):
        return None
    line = line.split('#')[0]
    dotdot = line.find('..')
    semicolon = line.find(';')
    if dotdot < 2 or semicolon < dotdot + 2:
        # at least two hex digits before the '..'
        return None
    try:
        first = int(line[:dotdot].strip(), 16)
        last = int(line[dotdot + 2:semicolon].strip(), 16)
    except ValueError:
        logging.debug("Unparsable block range in line: %s", line.rstrip())
        return None
    name = line[semicolon + 1:].strip()
    if not name or first > last:
        return None
    return UnicodeCharacter(first=first, last=last, name=name)


def _lines(text):
    if text.startswith('\ufeff'):
        text = text[1:]
    return text.splitlines()


def parse_character_data(text):
    """Parses the complete text of UnicodeData.txt

    Returns a list of :class:`UnicodeCharacter` instances in file order,
    including the unpaired halves of character ranges."""
    result = []
    for line in _lines(text):
        record = parse_character_line(line)
        if record is not None:
            result.append(record)
    return result


def parse_block_data(text):
    """Parses the complete text of Blocks.txt

    Returns a list of range :class:`UnicodeCharacter` instances in file
    order."""
    result = []
    for line in _lines(text):
        record = parse_block_line(line)
        if record is not None:
            result.append(record)
    return result
