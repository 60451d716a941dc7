#! /usr/bin/env python
"""Runs unit tests on all unidata modules"""

import unittest
import logging
import sys

import test_acquire
import test_app
import test_cache
import test_characters
import test_codec
import test_database
import test_download
import test_events
import test_merge
import test_parser


all_tests = unittest.TestSuite()
all_tests.addTest(test_acquire.suite())
all_tests.addTest(test_app.suite())
all_tests.addTest(test_cache.suite())
all_tests.addTest(test_characters.suite())
all_tests.addTest(test_codec.suite())
all_tests.addTest(test_database.suite())
all_tests.addTest(test_download.suite())
all_tests.addTest(test_events.suite())
all_tests.addTest(test_merge.suite())
all_tests.addTest(test_parser.suite())


def suite():
    global all_tests
    return all_tests


def load_tests(loader, tests, pattern):
    return suite()

if __name__ == "__main__":
    logging.basicConfig(level=logging.ERROR)
    result = unittest.TextTestRunner(verbosity=0).run(suite())
    sys.exit(not result.wasSuccessful())
