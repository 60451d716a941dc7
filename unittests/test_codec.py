#! /usr/bin/env python

import logging
import unittest

from unidata import codec


def suite():
    loader = unittest.TestLoader()
    loader.testMethodPrefix = 'test'
    return unittest.TestSuite((
        loader.loadTestsFromTestCase(UTF8Tests),
        loader.loadTestsFromTestCase(UTF16Tests),
        loader.loadTestsFromTestCase(FormatTests),
    ))


class UTF8Tests(unittest.TestCase):

    def test_lengths(self):
        for cp, n in ((0, 1), (0x7F, 1), (0x80, 2), (0x7FF, 2),
                      (0x800, 3), (0xFFFF, 3), (0x10000, 4),
                      (0x10FFFF, 4)):
            data = codec.to_utf8(cp)
            self.assertTrue(isinstance(data, bytes))
            self.assertTrue(len(data) == n, "U+%04X: %r" % (cp, data))

    def test_values(self):
        for cp in (0x41, 0xE9, 0x2026, 0xFFFD, 0x1F577, 0x10FFFF):
            self.assertTrue(codec.to_utf8(cp) == chr(cp).encode('utf-8'),
                            "U+%04X" % cp)

    def test_surrogates(self):
        # a lone surrogate still has a three byte form
        self.assertTrue(codec.to_utf8(0xD800) == b'\xed\xa0\x80')
        self.assertTrue(codec.to_utf8(0xDFFF) == b'\xed\xbf\xbf')

    def test_errors(self):
        for bad in (-1, 0x110000):
            try:
                codec.to_utf8(bad)
                self.fail("to_utf8(%r)" % bad)
            except codec.EncodingError as err:
                self.assertTrue(err.code_point == bad)
        for bad in (1.0, "A", None, True):
            try:
                codec.to_utf8(bad)
                self.fail("to_utf8(%r)" % bad)
            except (codec.EncodingError, TypeError):
                pass
        # EncodingError is a ValueError
        self.assertTrue(issubclass(codec.EncodingError, ValueError))


class UTF16Tests(unittest.TestCase):

    def test_round_trip(self):
        for cp in (0x41, 0x2026, 0x1F577, 0x10FFFF):
            units = codec.to_utf16(cp)
            self.assertTrue(isinstance(units, tuple))
            if cp < 0x10000:
                self.assertTrue(units == (cp, ))
            else:
                self.assertTrue(len(units) == 2)
                self.assertTrue(
                    codec.from_surrogate_pair(*units) == cp,
                    "U+%04X: %r" % (cp, units))

    def test_pair_values(self):
        self.assertTrue(codec.to_utf16(0x1F577) == (0xD83D, 0xDD77))
        self.assertTrue(codec.to_utf16(0x10000) == (0xD800, 0xDC00))
        self.assertTrue(codec.to_utf16(0x10FFFF) == (0xDBFF, 0xDFFF))

    def test_errors(self):
        for bad in (0xD800, 0xDBFF, 0xDC00, 0xDFFF, -1, 0x110000):
            try:
                codec.to_utf16(bad)
                self.fail("to_utf16(0x%X)" % bad)
            except codec.EncodingError:
                pass
        for high, low in ((0xDC00, 0xDC00), (0xD800, 0xD800),
                          (0x41, 0xDC00), (0xD800, 0xE000)):
            try:
                codec.from_surrogate_pair(high, low)
                self.fail("from_surrogate_pair(0x%X, 0x%X)" % (high, low))
            except codec.EncodingError:
                pass

    def test_string(self):
        self.assertTrue(codec.to_string(0x41) == "A")
        self.assertTrue(codec.to_string(0x1F577) == "\U0001F577")


class FormatTests(unittest.TestCase):

    def test_format(self):
        self.assertTrue(codec.format_code_point(0x41) == "U+0041")
        self.assertTrue(codec.format_code_point(0xFFFF) == "U+FFFF")
        self.assertTrue(codec.format_code_point(0x1F577) == "U+01F577")
        self.assertTrue(codec.format_code_point(0x41, True) == "U+000041")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    unittest.main()
