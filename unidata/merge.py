#! /usr/bin/env python
"""Merges parsed records into the character map and range list

UnicodeData.txt describes large ranges of characters (such as the CJK
ideographs) with a pair of lines, the first with a name of the form
"<Name, First>" and the second "<Name, Last>".  Blocks.txt describes
blocks directly as ranges.  The two sources overlap: a block often
starts at the same code point as a range from UnicodeData.txt.  The
functions in this module pair up the range halves and fuse ranges that
start at the same code point."""

import logging


def pair_ranges(records):
    """Pairs up the halves of ranges

    records
        An iterable of :class:`UnicodeCharacter` instances in file
        order.  Records with a code point, or that are already complete
        ranges, are ignored.

    Each record with only :attr:`first` set is matched with the next
    record with only :attr:`last` set that has the same name.  The
    result is a list of complete ranges in the order their last halves
    appear.  The attributes of the range are taken from the first half.

    Halves that can't be matched are dropped with a warning."""
    result = []
    open_ranges = []
    for record in records:
        if record.code_point is not None or record.is_range():
            continue
        if record.first is not None:
            open_ranges.append(record)
            continue
        for i, opener in enumerate(open_ranges):
            if opener.name == record.name:
                if record.last < opener.first:
                    logging.warning(
                        "Range %s: last U+%04X precedes first U+%04X, "
                        "dropped", record.name, record.last, opener.first)
                else:
                    result.append(opener.replace(last=record.last))
                del open_ranges[i]
                break
        else:
            logging.warning("Range %s: U+%04X has no matching First, "
                            "dropped", record.name, record.last)
    for opener in open_ranges:
        logging.warning("Range %s: U+%04X has no matching Last, dropped",
                        opener.name, opener.first)
    return result


def sort_ranges(ranges):
    """Returns a new list of ranges sorted by (first, last)

    The sort is stable, ranges with identical spans keep their relative
    order."""
    return sorted(ranges, key=lambda r: (r.first, r.last))


def fuse_ranges(ranges):
    """Fuses ranges that start at the same code point

    ranges
        A list of ranges sorted by (first, last)

    When a range starts at the same code point as the range before it
    (and so is at least as long) its attributes, other than the name and
    span, are copied onto the earlier range, the span of the earlier
    range is extended to cover it and the later range is dropped.  The
    effect is that the narrower, attribute-rich ranges from
    UnicodeData.txt keep their names and properties while spanning the
    full block.

    Ranges that overlap without sharing a first code point are left
    alone, see :func:`check_overlaps`."""
    result = []
    for r in ranges:
        if result and result[-1].first == r.first and \
                r.last >= result[-1].last:
            changes = r.fields()
            for name in ('name', 'first', 'last'):
                changes.pop(name, None)
            changes['last'] = r.last
            logging.debug("Fusing range %s into %s", r, result[-1])
            result[-1] = result[-1].replace(**changes)
        else:
            result.append(r)
    return result


def check_overlaps(ranges):
    """Returns a list of (a, b) pairs of overlapping ranges

    ranges
        A list of ranges sorted by (first, last)

    A warning is logged for each overlapping pair, overlapping ranges
    make the result of a lookup depend on the order of the range
    list."""
    overlaps = []
    for i, a in enumerate(ranges):
        for b in ranges[i + 1:]:
            if b.first > a.last:
                break
            logging.warning("Overlapping ranges: %s and %s", a, b)
            overlaps.append((a, b))
    return overlaps


def merge(character_records, block_records):
    """Merges records into a character map and a list of ranges

    character_records
        An iterable of :class:`UnicodeCharacter` instances parsed from
        UnicodeData.txt, in file order

    block_records
        An iterable of range :class:`UnicodeCharacter` instances parsed
        from Blocks.txt

    Returns a tuple of (characters, ranges) where characters is a
    dictionary mapping code points onto single character records and
    ranges is a list of range records sorted by (first, last)."""
    character_records = list(character_records)
    characters = {}
    for record in character_records:
        if record.code_point is not None:
            characters[record.code_point] = record
    ranges = pair_ranges(character_records)
    ranges.extend(r for r in block_records if r.is_range())
    ranges = fuse_ranges(sort_ranges(ranges))
    check_overlaps(ranges)
    return characters, ranges
