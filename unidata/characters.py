#! /usr/bin/env python
"""Records describing characters in the Unicode character database"""

import types

from fractions import Fraction

from . import codec


CATEGORY = {
    'Lu': 'Letter, Uppercase',
    'Ll': 'Letter, Lowercase',
    'Lt': 'Letter, Titlecase',
    'Lm': 'Letter, Modifier',
    'Lo': 'Letter, Other',
    'Mn': 'Mark, Non-Spacing',
    'Mc': 'Mark, Spacing Combining',
    'Me': 'Mark, Enclosing',
    'Nd': 'Number, Decimal Digit',
    'Nl': 'Number, Letter',
    'No': 'Number, Other',
    'Pc': 'Punctuation, Connector',
    'Pd': 'Punctuation, Dash',
    'Ps': 'Punctuation, Open',
    'Pe': 'Punctuation, Close',
    'Pi': 'Punctuation, Initial quote '
          '(may behave like Ps or Pe depending on usage)',
    'Pf': 'Punctuation, Final quote '
          '(may behave like Ps or Pe depending on usage)',
    'Po': 'Punctuation, Other',
    'Sm': 'Symbol, Math',
    'Sc': 'Symbol, Currency',
    'Sk': 'Symbol, Modifier',
    'So': 'Symbol, Other',
    'Zs': 'Separator, Space',
    'Zl': 'Separator, Line',
    'Zp': 'Separator, Paragraph',
    'Cc': 'Other, Control',
    'Cf': 'Other, Format',
    'Cs': 'Other, Surrogate',
    'Co': 'Other, Private Use',
    'Cn': 'Other, Not Assigned '
          '(no characters in the file have this property)'}
"""Maps general category abbreviations onto their descriptions"""

DEFAULT_CATEGORY = 'Lo'

NON_PRINTABLE = frozenset(
    ('Lm', 'Sk', 'Zs', 'Zl', 'Zp', 'Cc', 'Cf', 'Cs', 'Co', 'Cn'))
"""The general categories of characters that are not rendered in the
display form of a character."""

BIDIRECTIONALITY = {
    'L': 'Left-to-Right',
    'LRE': 'Left-to-Right Embedding',
    'LRO': 'Left-to-Right Override',
    'R': 'Right-to-Left',
    'AL': 'Right-to-Left Arabic',
    'RLE': 'Right-to-Left Embedding',
    'RLO': 'Right-to-Left Override',
    'PDF': 'Pop Directional Format',
    'EN': 'European Number',
    'ES': 'European Number Separator',
    'ET': 'European Number Terminator',
    'AN': 'Arabic Number',
    'CS': 'Common Number Separator',
    'NSM': 'Non-Spacing Mark',
    'BN': 'Boundary Neutral',
    'B': 'Paragraph Separator',
    'S': 'Segment Separator',
    'WS': 'Whitespace',
    'ON': 'Other Neutrals',
    'LRI': 'Left-to-Right Isolate',
    'RLI': 'Right-to-Left Isolate',
    'FSI': 'First Strong Isolate',
    'PDI': 'Pop Directional Isolate'}

DEFAULT_BIDI = 'L'

DECOMPOSITION = {
    'canonical': 'Canonical decomposition',
    'font': 'A font variant (e.g. a blackletter form)',
    'noBreak': 'A no-break version of a space or hyphen',
    'initial': 'An initial presentation form (Arabic)',
    'medial': 'A medial presentation form (Arabic)',
    'final': 'A final presentation form (Arabic)',
    'isolated': 'An isolated presentation form (Arabic)',
    'circle': 'An encircled form',
    'super': 'A superscript form',
    'sub': 'A subscript form',
    'vertical': 'A vertical layout presentation form',
    'wide': 'A wide (or zenkaku) compatibility character',
    'narrow': 'A narrow (or hankaku) compatibility character',
    'small': 'A small variant form (CNS compatibility)',
    'square': 'A CJK squared font variant',
    'fraction': 'A vulgar fraction form',
    'compat': 'Otherwise unspecified compatibility character'}

DEFAULT_DECOMPOSITION = 'canonical'

COMBINING = {
    0: 'Spacing, split, enclosing, reordrant, and Tibetan subjoined',
    1: 'Overlays and interior',
    7: 'Nuktas',
    8: 'Hiragana/Katakana voicing marks',
    9: 'Viramas',
    10: 'Start of fixed position classes',
    199: 'End of fixed position classes',
    200: 'Below left attached',
    202: 'Below attached',
    204: 'Below right attached',
    208: 'Left attached (reordrant around single base character)',
    210: 'Right attached',
    212: 'Above left attached',
    214: 'Above attached',
    216: 'Above right attached',
    218: 'Below left',
    220: 'Below',
    222: 'Below right',
    224: 'Left (reordrant around single base character)',
    226: 'Right',
    228: 'Above left',
    230: 'Above',
    232: 'Above right',
    233: 'Double below',
    234: 'Double above',
    240: 'Below (iota subscript)'}

DEFAULT_COMBINING = 0


def parse_numeric(src):
    """Parses a numeric value field

    src
        A string of the form 'n' or 'n/d'

    Returns a :class:`fractions.Fraction` instance.  Raises ValueError
    if src is not a valid number."""
    if not src or not src.strip():
        raise ValueError("empty numeric value")
    return Fraction(src)


def format_numeric(value):
    """Formats a numeric value as a whole number or 'n/d'"""
    if value.denominator == 1:
        return str(value.numerator)
    else:
        return "%i/%i" % (value.numerator, value.denominator)


class UnicodeCharacter(object):

    """Represents a single character or a range of characters

    A character record has a :attr:`code_point`, a range record has
    both :attr:`first` and :attr:`last` instead.  Records parsed from
    the opening (or closing) line of a range pair in UnicodeData.txt
    carry only :attr:`first` (or only :attr:`last`) until they are
    paired up.

    All other attributes are optional and are None when the character
    takes the default value for that attribute.  Values passed to the
    constructor that are equal to the default are dropped, use the
    properties such as :attr:`general_category` to read the effective
    value.

    Instances are immutable, use :meth:`replace` to derive a modified
    copy."""

    __slots__ = (
        'code_point', 'first', 'last', 'name', 'general', 'combining',
        'bidi', 'decomp', 'decimal', 'digit', 'numeric', 'mirrored',
        'oldname', 'comment', 'uppercase', 'titlecase', 'lowercase')

    IDENTITY = ('code_point', 'first', 'last')

    def __init__(self, code_point=None, first=None, last=None, name=None,
                 general=None, combining=None, bidi=None, decomp=None,
                 decimal=None, digit=None, numeric=None, mirrored=None,
                 oldname=None, comment=None, uppercase=None, titlecase=None,
                 lowercase=None):
        if code_point is not None and (first is not None or
                                       last is not None):
            raise ValueError(
                "character record can't be both a code point and a range")
        if first is not None and last is not None and first > last:
            raise ValueError("range U+%04X~%04X is backwards" % (first, last))
        if general == DEFAULT_CATEGORY:
            general = None
        if combining == DEFAULT_COMBINING:
            combining = None
        if bidi == DEFAULT_BIDI:
            bidi = None
        if decomp:
            decomp = types.MappingProxyType(
                dict((tag, tuple(cps)) for tag, cps in decomp.items()))
        else:
            decomp = None
        if numeric is not None and not isinstance(numeric, Fraction):
            numeric = Fraction(numeric)
        mirrored = True if mirrored else None
        if titlecase is not None and titlecase == uppercase:
            titlecase = None
        setter = super(UnicodeCharacter, self).__setattr__
        setter('code_point', code_point)
        setter('first', first)
        setter('last', last)
        setter('name', name)
        setter('general', general)
        setter('combining', combining)
        setter('bidi', bidi)
        setter('decomp', decomp)
        setter('decimal', decimal)
        setter('digit', digit)
        setter('numeric', numeric)
        setter('mirrored', mirrored)
        setter('oldname', oldname)
        setter('comment', comment)
        setter('uppercase', uppercase)
        setter('titlecase', titlecase)
        setter('lowercase', lowercase)

    def __setattr__(self, name, value):
        raise AttributeError(
            "UnicodeCharacter is immutable: \n"
            "Replace c.%s = value with: c = c.replace(%s=value)" %
            (name, name))

    def __delattr__(self, name):
        raise AttributeError("UnicodeCharacter is immutable")

    def fields(self):
        """Returns a dictionary of the attributes that are set"""
        result = {}
        for name in self.__slots__:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result

    def replace(self, **kwargs):
        """Returns a copy of this record with some attributes replaced

        Attributes can be removed by passing None."""
        args = self.fields()
        args.update(kwargs)
        return UnicodeCharacter(**args)

    def sortkey(self):
        if self.code_point is not None:
            return (self.code_point, self.code_point)
        else:
            return (self.first, self.last)

    def __eq__(self, other):
        if not isinstance(other, UnicodeCharacter):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name)
                   for name in self.__slots__)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.code_point, self.first, self.last, self.name))

    def __repr__(self):
        args = []
        for name, value in self.fields().items():
            if name in ('code_point', 'first', 'last', 'uppercase',
                        'titlecase', 'lowercase'):
                args.append("%s=0x%04X" % (name, value))
            elif name == 'decomp':
                args.append("decomp=%r" % dict(value))
            else:
                args.append("%s=%r" % (name, value))
        return "UnicodeCharacter(%s)" % ", ".join(args)

    def __str__(self):
        if self.code_point is not None:
            result = [codec.format_code_point(self.code_point)]
            if self.is_printable():
                result.append("(%s)" % self.string())
            result.append(self.name)
            return " ".join(result)
        elif self.is_range():
            wide = max(self.first, self.last) >= 0x10000
            return "%s~%s %s" % (
                codec.format_code_point(self.first, wide),
                codec.format_code_point(self.last, wide)[2:],
                self.name)
        else:
            return repr(self)

    def is_range(self):
        """True if this record describes a complete range"""
        return self.first is not None and self.last is not None

    def contains(self, code_point):
        """True if code_point is described by this record"""
        if self.code_point is not None:
            return code_point == self.code_point
        elif self.is_range():
            return self.first <= code_point <= self.last
        else:
            return False

    @property
    def general_category(self):
        """The general category, defaults to 'Lo'"""
        return DEFAULT_CATEGORY if self.general is None else self.general

    @property
    def category_description(self):
        return CATEGORY.get(self.general_category, self.general_category)

    @property
    def combining_class(self):
        """The canonical combining class, defaults to 0"""
        return DEFAULT_COMBINING if self.combining is None else \
            self.combining

    @property
    def combining_description(self):
        cclass = self.combining_class
        if cclass in COMBINING:
            return COMBINING[cclass]
        elif 10 <= cclass <= 199:
            return "Fixed position class %i" % cclass
        else:
            return str(cclass)

    @property
    def bidi_class(self):
        """The bidirectional class, defaults to 'L'"""
        return DEFAULT_BIDI if self.bidi is None else self.bidi

    @property
    def bidi_description(self):
        return BIDIRECTIONALITY.get(self.bidi_class, self.bidi_class)

    @property
    def is_mirrored(self):
        return bool(self.mirrored)

    def is_printable(self):
        """Returns True if this character is printable."""
        return self.general_category not in NON_PRINTABLE

    def _require_code_point(self):
        if self.code_point is None:
            raise codec.EncodingError(
                None, "%s is not a single character" % self.name)
        return self.code_point

    def utf8(self):
        """Returns the UTF-8 encoding of this character as bytes"""
        return codec.to_utf8(self._require_code_point())

    def utf16(self):
        """Returns the UTF-16 code units of this character as a tuple"""
        return codec.to_utf16(self._require_code_point())

    def string(self):
        """Returns this character as a (single character) string"""
        return codec.to_string(self._require_code_point())

    def to_json(self):
        """Returns a dictionary suitable for serializing as JSON

        Attributes that take their default value are omitted."""
        result = {}
        for name, value in self.fields().items():
            if name == 'decomp':
                value = dict((tag, list(cps)) for tag, cps in value.items())
            elif name == 'numeric':
                value = format_numeric(value)
            result[name] = value
        return result

    @classmethod
    def from_json(cls, obj):
        """Creates an instance from the result of :meth:`to_json`

        Raises ValueError or TypeError if obj is not a valid
        serialization of a character record."""
        if not isinstance(obj, dict):
            raise TypeError("character record must be an object")
        args = {}
        for name, value in obj.items():
            if name not in cls.__slots__:
                raise ValueError("unknown character attribute: %s" % name)
            if name in ('name', 'general', 'bidi', 'oldname', 'comment'):
                if not isinstance(value, str):
                    raise TypeError("%s must be a string" % name)
            elif name == 'mirrored':
                if not isinstance(value, bool):
                    raise TypeError("mirrored must be a boolean")
            elif name == 'numeric':
                if not isinstance(value, (str, int)) or \
                        isinstance(value, bool):
                    raise TypeError("numeric must be a string or integer")
                value = parse_numeric(str(value))
            elif name == 'decomp':
                if not isinstance(value, dict):
                    raise TypeError("decomp must be an object")
                for tag, cps in value.items():
                    if not isinstance(cps, list) or not all(
                            _is_int(cp) for cp in cps):
                        raise TypeError(
                            "decomposition %s must be a list of code "
                            "points" % tag)
            elif not _is_int(value):
                raise TypeError("%s must be an integer" % name)
            args[name] = value
        if not args.get('name'):
            raise ValueError("character record has no name")
        if 'code_point' not in args and not (
                'first' in args and 'last' in args):
            raise ValueError(
                "character record %s has no code point or range" %
                args['name'])
        return cls(**args)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)
