#! /usr/bin/env python

import logging
import unittest

from unidata import merge
from unidata.characters import UnicodeCharacter


def suite():
    loader = unittest.TestLoader()
    loader.testMethodPrefix = 'test'
    return unittest.TestSuite((
        loader.loadTestsFromTestCase(PairTests),
        loader.loadTestsFromTestCase(FuseTests),
        loader.loadTestsFromTestCase(MergeTests),
    ))


def first_half(cp, name, **kwargs):
    return UnicodeCharacter(first=cp, name=name, **kwargs)


def last_half(cp, name, **kwargs):
    return UnicodeCharacter(last=cp, name=name, **kwargs)


class PairTests(unittest.TestCase):

    def test_pairs(self):
        records = [
            UnicodeCharacter(code_point=0x41, name="A"),
            first_half(0x4E00, "CJK Ideograph"),
            last_half(0x9FFF, "CJK Ideograph"),
            first_half(0xAC00, "Hangul Syllable"),
            last_half(0xD7A3, "Hangul Syllable")]
        ranges = merge.pair_ranges(records)
        self.assertTrue(len(ranges) == 2)
        self.assertTrue(ranges[0].first == 0x4E00)
        self.assertTrue(ranges[0].last == 0x9FFF)
        self.assertTrue(ranges[1].name == "Hangul Syllable")

    def test_attributes_from_first(self):
        ranges = merge.pair_ranges([
            first_half(0xD800, "High Surrogate", general='Cs'),
            last_half(0xDB7F, "High Surrogate", general='Co')])
        self.assertTrue(ranges[0].general == 'Cs')

    def test_interleaved(self):
        ranges = merge.pair_ranges([
            first_half(0x100, "Outer"),
            first_half(0x110, "Inner"),
            last_half(0x120, "Inner"),
            last_half(0x200, "Outer")])
        self.assertTrue(len(ranges) == 2)
        self.assertTrue(ranges[0].name == "Inner")
        self.assertTrue(ranges[1].first == 0x100 and ranges[1].last == 0x200)

    def test_orphans(self):
        ranges = merge.pair_ranges([
            last_half(0x50, "Lonely Last"),
            first_half(0x100, "Lonely First"),
            first_half(0x300, "Backwards"),
            last_half(0x200, "Backwards"),
            first_half(0x400, "Good"),
            last_half(0x4FF, "Good")])
        self.assertTrue(len(ranges) == 1)
        self.assertTrue(ranges[0].name == "Good")


class FuseTests(unittest.TestCase):

    def test_sort(self):
        a = UnicodeCharacter(first=0x80, last=0xFF, name="A")
        b = UnicodeCharacter(first=0x00, last=0x7F, name="B")
        c = UnicodeCharacter(first=0x80, last=0x8F, name="C")
        d = UnicodeCharacter(first=0x80, last=0xFF, name="D")
        self.assertTrue(merge.sort_ranges([a, b, c, d]) == [b, c, a, d])

    def test_fuse_equal(self):
        chars = UnicodeCharacter(first=0x80, last=0xFF, name="X",
                                 general='Cc')
        block = UnicodeCharacter(first=0x80, last=0xFF, name="X")
        result = merge.fuse_ranges([chars, block])
        self.assertTrue(len(result) == 1)
        self.assertTrue(result[0].general == 'Cc')
        self.assertTrue(result[0].general_category == 'Cc')
        self.assertTrue(result[0].first == 0x80 and result[0].last == 0xFF)

    def test_fuse_longer(self):
        chars = UnicodeCharacter(first=0xAC00, last=0xD7A3,
                                 name="Hangul Syllable")
        block = UnicodeCharacter(first=0xAC00, last=0xD7AF,
                                 name="Hangul Syllables", bidi='ON')
        result = merge.fuse_ranges([chars, block])
        self.assertTrue(len(result) == 1)
        self.assertTrue(result[0].name == "Hangul Syllable")
        self.assertTrue(result[0].last == 0xD7AF)
        self.assertTrue(result[0].bidi == 'ON')

    def test_no_fuse(self):
        a = UnicodeCharacter(first=0x00, last=0x7F, name="A")
        b = UnicodeCharacter(first=0x40, last=0xFF, name="B")
        c = UnicodeCharacter(first=0x100, last=0x17F, name="C")
        result = merge.fuse_ranges([a, b, c])
        self.assertTrue(result == [a, b, c])
        overlaps = merge.check_overlaps(result)
        self.assertTrue(overlaps == [(a, b)])

    def test_contained_overlap(self):
        a = UnicodeCharacter(first=0x00, last=0xFF, name="A")
        b = UnicodeCharacter(first=0x10, last=0x1F, name="B")
        c = UnicodeCharacter(first=0x20, last=0x2F, name="C")
        self.assertTrue(merge.check_overlaps([a, b, c]) == [(a, b), (a, c)])


class MergeTests(unittest.TestCase):

    def test_merge(self):
        records = [
            UnicodeCharacter(code_point=0x41, name="A", general='Lu'),
            first_half(0x80, "X", general='Cc'),
            last_half(0xFF, "X", general='Cc'),
            UnicodeCharacter(code_point=0x100, name="B", general='Lu')]
        blocks = [
            UnicodeCharacter(first=0x2190, last=0x21FF, name="Arrows"),
            UnicodeCharacter(first=0x80, last=0xFF, name="X")]
        characters, ranges = merge.merge(records, blocks)
        self.assertTrue(sorted(characters) == [0x41, 0x100])
        self.assertTrue(len(ranges) == 2)
        self.assertTrue(ranges[0].first == 0x80)
        self.assertTrue(ranges[0].general_category == 'Cc')
        self.assertTrue(ranges[1].name == "Arrows")

    def test_incomplete_blocks(self):
        characters, ranges = merge.merge(
            [], [UnicodeCharacter(first=0x2190, name="Half")])
        self.assertTrue(characters == {} and ranges == [])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    unittest.main()
