#! /usr/bin/env python
"""The queryable index of the Unicode character database"""

import datetime
import json

from . import merge
from . import parser
from .characters import UnicodeCharacter


YEAR = datetime.timedelta(days=365)
"""The default lifetime of a copy of the database"""


def utcnow():
    """Returns the current time as a timezone-aware UTC datetime"""
    return datetime.datetime.now(datetime.timezone.utc)


def format_timestamp(value):
    return value.astimezone(datetime.timezone.utc).isoformat()


def parse_timestamp(src):
    """Parses an ISO 8601 timestamp written by :func:`format_timestamp`

    A trailing 'Z' is accepted as UTC and timestamps without a zone are
    assumed to be UTC.  Raises ValueError if src is not a timestamp."""
    if not isinstance(src, str):
        raise TypeError("timestamp must be a string: %r" % (src, ))
    if src.endswith('Z'):
        src = src[:-1] + '+00:00'
    value = datetime.datetime.fromisoformat(src)
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value


class SnapshotError(parser.ParseError):

    """Raised when a serialized database can't be parsed

    SnapshotError is a subclass of
    :class:`unidata.parser.ParseError`."""
    pass


class UnidataHeaders(object):

    """Dates that govern the validity of a copy of the database

    date
        The date the database was downloaded, defaults to now

    modified
        The date the database was last modified on the server, defaults
        to *date*

    expires
        The date the copy expires, or a :class:`datetime.timedelta` to
        add to *modified*.  Defaults to one year after *modified*."""

    def __init__(self, date=None, modified=None, expires=None):
        if date is None:
            date = utcnow()
        if modified is None:
            modified = date
        if expires is None:
            expires = modified + YEAR
        elif isinstance(expires, datetime.timedelta):
            expires = modified + expires
        #: the date the database was downloaded
        self.date = date
        #: the date the database was last updated on the server
        self.modified = modified
        #: the date the cached copy is presumed to expire
        self.expires = expires

    @classmethod
    def from_download(cls, now, date=None, last_modified=None,
                      lifetime=YEAR):
        """Calculates the headers for a freshly downloaded copy

        now
            The local time of the download

        date
            The time reported by the server, defaults to *now*

        last_modified
            The last modification time reported by the server, defaults
            to *date*

        The server's idea of how old the data is, rather than its clock,
        is used to estimate the modification time in local terms.  The
        copy expires one *lifetime* after the later of the server date
        and the estimated modification time but never more than one
        lifetime from now."""
        if date is None:
            date = now
        if last_modified is None:
            last_modified = date
        delta = abs(date - last_modified)
        modified = now - delta
        expires = min(now + lifetime,
                      max(date + lifetime, modified + lifetime))
        return cls(now, modified, expires)

    def is_expired(self, now=None):
        """Returns True unless the expiry date is after *now*"""
        if now is None:
            now = utcnow()
        return not (self.expires > now)

    def __eq__(self, other):
        if not isinstance(other, UnidataHeaders):
            return NotImplemented
        return (self.date, self.modified, self.expires) == \
            (other.date, other.modified, other.expires)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "UnidataHeaders(%r, %r, %r)" % (
            self.date, self.modified, self.expires)

    def to_json(self):
        return {
            'date': format_timestamp(self.date),
            'modified': format_timestamp(self.modified),
            'expires': format_timestamp(self.expires)}

    @classmethod
    def from_json(cls, obj):
        if not isinstance(obj, dict):
            raise TypeError("headers must be an object")
        date = obj.get('date')
        modified = obj.get('modified')
        return cls(
            date=None if date is None else parse_timestamp(date),
            modified=None if modified is None else parse_timestamp(modified),
            expires=parse_timestamp(obj['expires']))


class UnicodeDatabase(object):

    """An index of the Unicode character database

    characters
        A dictionary mapping code points onto :class:`UnicodeCharacter`
        instances that describe single characters

    ranges
        A list of range :class:`UnicodeCharacter` instances sorted by
        (first, last)

    headers
        A :class:`UnidataHeaders` instance (optional)

    Instances are built once and treated as read-only thereafter, a
    fresh copy of the database results in a new instance."""

    def __init__(self, characters=None, ranges=None, headers=None):
        #: maps code points to single character records
        self.characters = dict(characters) if characters else {}
        #: range records sorted by (first, last)
        self.ranges = list(ranges) if ranges else []
        #: the :class:`UnidataHeaders` for this copy, may be None
        self.headers = headers

    @classmethod
    def from_records(cls, character_records, block_records, headers=None):
        """Creates an instance from parsed records

        The records are merged with :func:`unidata.merge.merge`."""
        characters, ranges = merge.merge(character_records, block_records)
        return cls(characters, ranges, headers)

    @classmethod
    def from_text(cls, data_text, block_text, headers=None):
        """Creates an instance from the text of the source files

        data_text
            The contents of UnicodeData.txt

        block_text
            The contents of Blocks.txt

        Lines that can't be parsed are skipped but if there are no
        character records at all :class:`unidata.parser.ParseError` is
        raised."""
        character_records = parser.parse_character_data(data_text)
        if not character_records:
            raise parser.ParseError("no character records found")
        return cls.from_records(
            character_records, parser.parse_block_data(block_text), headers)

    def __len__(self):
        return len(self.characters) + len(self.ranges)

    def __contains__(self, code_point):
        return self.get(code_point) is not None

    def __eq__(self, other):
        if not isinstance(other, UnicodeDatabase):
            return NotImplemented
        return self.characters == other.characters and \
            self.ranges == other.ranges

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def get(self, code_point):
        """Gets the record describing a character

        code_point
            An integer code point (or a string of decimal digits)

        If the character is defined individually its record is
        returned, otherwise the first range that includes the character
        is returned.  If neither is found, None is returned."""
        if isinstance(code_point, str):
            code_point = int(code_point)
        result = self.characters.get(code_point)
        if result is not None:
            return result
        for r in self.ranges:
            if r.first > code_point:
                break
            if code_point <= r.last:
                return r
        return None

    def find(self, filter, unique=False, selection=None):
        """Searches the database

        filter
            A string, matched case-insensitively against the names of
            characters, or a function that takes a
            :class:`UnicodeCharacter` and returns True if it matches.

        unique
            If True, the first match is returned (or None if there are
            no matches).  By default a list of all matches is returned.

        selection
            A string containing 'c' to search the individual
            characters, 'r' to search the ranges or 'cr' to search both.
            The default is to search the characters only.

        Characters are searched before ranges."""
        if isinstance(filter, str):
            term = filter.upper()

            def test(c):
                return term in c.name.upper()

        elif callable(filter):
            test = filter
        else:
            raise TypeError("%r must be a string or function" % (filter, ))
        if selection is None:
            selection = 'c'
        elif not isinstance(selection, str):
            raise TypeError("selection must be a string: %r" % (selection, ))
        sources = []
        if 'c' in selection:
            sources.append(self.characters.values())
        if 'r' in selection:
            sources.append(self.ranges)
        result = []
        for source in sources:
            for c in source:
                if test(c):
                    if unique:
                        return c
                    result.append(c)
        if unique:
            return None
        return result

    def join(self, *args):
        """Concatenates code points into a string

        Arguments may be integer code points, strings (which are
        concatenated directly), single character records or lists or
        tuples of any of these."""
        result = []
        for i, a in enumerate(args):
            if isinstance(a, bool):
                raise TypeError("Illegal argument at index %i: %r" % (i, a))
            elif isinstance(a, int):
                result.append(UnicodeCharacter(code_point=a).string())
            elif isinstance(a, str):
                result.append(a)
            elif isinstance(a, UnicodeCharacter):
                if a.code_point is None:
                    raise TypeError(
                        "Illegal argument at index %i: %s is a range" %
                        (i, a.name))
                result.append(a.string())
            elif isinstance(a, (list, tuple)):
                result.append(self.join(*a))
            else:
                raise TypeError("Illegal argument at index %i: %r" % (i, a))
        return ''.join(result)

    def split(self, text):
        """Splits a string into a list of records

        The result contains the record for each character in text, or
        None for characters not described by the database."""
        return [self.get(ord(c)) for c in text]

    def to_json(self):
        """Returns a dictionary suitable for serializing as JSON

        The keys of the 'characters' dictionary are the decimal string
        representations of the code points.  For example, U+0041 LATIN
        CAPITAL LETTER A is at key "65"."""
        headers = self.headers
        if headers is None:
            headers = UnidataHeaders()
        return {
            'headers': headers.to_json(),
            'characters': dict(
                (str(cp), c.to_json()) for cp, c in self.characters.items()),
            'ranges': [r.to_json() for r in self.ranges]}

    def dumps(self):
        """Returns the serialized form of this database as a string"""
        return json.dumps(self.to_json(), separators=(',', ':'))

    @classmethod
    def from_json(cls, obj):
        """Creates an instance from the result of :meth:`to_json`

        Raises :class:`SnapshotError` if obj is not a valid
        serialization of the database."""
        try:
            if not isinstance(obj, dict):
                raise TypeError("snapshot must be an object")
            headers = UnidataHeaders.from_json(obj['headers'])
            characters = {}
            for key, value in obj['characters'].items():
                c = UnicodeCharacter.from_json(value)
                if c.code_point is None or c.code_point != int(key):
                    raise ValueError(
                        "character record at key %s does not match" % key)
                characters[c.code_point] = c
            ranges = []
            for value in obj['ranges']:
                r = UnicodeCharacter.from_json(value)
                if not r.is_range():
                    raise ValueError("%s is not a range" % r.name)
                ranges.append(r)
        except (AttributeError, KeyError, TypeError, ValueError,
                ZeroDivisionError) as err:
            raise SnapshotError("invalid snapshot: %s" % err) from err
        return cls(characters, merge.sort_ranges(ranges), headers)

    @classmethod
    def loads(cls, src):
        """Creates an instance from the result of :meth:`dumps`"""
        try:
            obj = json.loads(src)
        except ValueError as err:
            raise SnapshotError("invalid snapshot: %s" % err) from err
        return cls.from_json(obj)
