#! /usr/bin/env python
"""Command line access to the Unicode character database

Usage::

    python -m unidata [options] [codepoint|character ...]

Each positional argument is looked up and the record describing it is
printed.  Arguments may be given as U+XXXX, 0xXXXX, plain hexadecimal
or as a single literal character."""

import datetime
import json
import logging
import optparse
import os.path
import sys

from . import info
from .acquire import BUNDLE, UnicodeData
from .codec import format_code_point


def parse_code_point(src):
    """Parses a code point given on the command line

    src
        One of "U+XXXX", "0xXXXX", a plain hexadecimal number or a
        single character.  A single character is always taken
        literally, so "A" is U+0041 and not U+000A.

    Returns an integer.  Raises ValueError if src is not understood."""
    if len(src) == 1:
        return ord(src)
    hex_src = src
    if src[:2] in ('U+', 'u+', '0x', '0X'):
        hex_src = src[2:]
    if not hex_src:
        raise ValueError("bad code point: %r" % src)
    return int(hex_src, 16)


class UnidataApp(object):

    """The command line application

    The class is configured once with :meth:`setup`, from a settings
    file and the command line options, before an instance is created
    to do the work."""

    settings_file = None
    """The path to the settings file.  Defaults to None.

    The format of the settings file is a json dictionary.  The key
    'UnicodeData' is reserved for the settings defined by this class:

    level (None)
        If specified, used to set the root logging level, a value
        between 0 (NOTSET) and 50 (CRITICAL).

    cache (None)
        The cache folder, see :func:`unidata.cache.cache_location`.
        Relative paths are relative to the settings file.

    bundle (the package's own snapshot)
        The snapshot tried before the cache, null to skip it.  Relative
        paths are relative to the settings file.

    data_url, blocks_url
        The URLs of UnicodeData.txt and Blocks.txt

    lifetime (365)
        The number of days a downloaded copy stays fresh"""

    #: the class settings loaded from :attr:`settings_file` by
    #: :meth:`setup`
    settings = None

    @classmethod
    def main(cls, argv=None):
        """Runs the application, returning the exit status"""
        parser = optparse.OptionParser(
            usage="%prog [options] [codepoint|character ...]",
            version=info.version)
        cls.add_options(parser)
        (options, args) = parser.parse_args(argv)
        cls.setup(options=options, args=args)
        app = cls()
        return app.run(options, args)

    @classmethod
    def add_options(cls, parser):
        """Defines command line options.

        parser
            An OptionParser instance, as defined by Python's built-in
            optparse module.

        The following options are added to *parser*:

        -v          Sets the logging level to WARNING, INFO or DEBUG
                    depending on the number of times it is specified.
                    Overrides the 'level' setting in the settings file.

        --settings  Sets the path to the :attr:`settings_file`.

        --cache     Overrides the 'cache' setting.

        --clear-cache   Removes the cached files before loading.

        --update-sources    Rebuilds the package snapshot from freshly
                            downloaded source files.

        -f, --find  Prints the characters whose names contain the term.

        -r, --ranges    Includes ranges in the search.

        -u, --unique    Prints only the first match."""
        parser.add_option(
            "-v", action="count", dest="logging",
            default=None, help="increase verbosity of output up to 3x")
        parser.add_option(
            "--settings", dest="settings", action="store", default=None,
            help="Path to the settings file")
        parser.add_option(
            "--cache", dest="cache", action="store", default=None,
            help="Path to the cache folder")
        parser.add_option(
            "--clear-cache", dest="clear_cache", action="store_true",
            default=False, help="Remove cached files before loading")
        parser.add_option(
            "--update-sources", dest="update_sources", action="store_true",
            default=False,
            help="Rebuild the bundled snapshot from the published sources")
        parser.add_option(
            "-f", "--find", dest="find", action="store", default=None,
            help="Search character names for TERM", metavar="TERM")
        parser.add_option(
            "-r", "--ranges", dest="ranges", action="store_true",
            default=False, help="Search ranges as well as characters")
        parser.add_option(
            "-u", "--unique", dest="unique", action="store_true",
            default=False, help="Show only the first match")

    @classmethod
    def setup(cls, options=None, args=None, **kwargs):
        """Perform one-time class setup

        options
            An optional object containing the command line options, such
            as an optparse.Values instance created by calling parse_args
            on the OptionParser instance passed to
            :meth:`add_options`.

        args
            An optional list of positional command-line arguments.

        Loads the settings file, applies the command line overrides and
        initialises the root logger based on the level setting."""
        if options and options.settings:
            cls.settings_file = os.path.abspath(options.settings)
        cls.settings = {}
        if cls.settings_file and os.path.isfile(cls.settings_file):
            with open(cls.settings_file, 'rb') as f:
                cls.settings = json.loads(f.read().decode('utf-8'))
        settings = cls.settings.setdefault('UnicodeData', {})
        if options and options.logging is not None:
            settings['level'] = (
                logging.ERROR, logging.WARNING, logging.INFO,
                logging.DEBUG)[min(options.logging, 3)]
        level = settings.setdefault('level', None)
        if level is not None:
            logging.basicConfig(level=settings['level'])
        if options and options.cache:
            settings['cache'] = os.path.abspath(options.cache)
        else:
            path = settings.setdefault('cache', None)
            if path:
                settings['cache'] = cls.resolve_setup_path(path)
        path = settings.setdefault('bundle', BUNDLE)
        if path:
            settings['bundle'] = cls.resolve_setup_path(path)
        settings.setdefault('data_url', info.UCDDatabaseURL)
        settings.setdefault('blocks_url', info.UCDBlockDatabaseURL)
        settings.setdefault('lifetime', 365)
        logging.debug("Logging configured for %s", cls.__name__)

    @classmethod
    def resolve_setup_path(cls, path):
        """Resolves a path relative to the settings file"""
        if cls.settings_file and not os.path.isabs(path):
            path = os.path.join(os.path.dirname(cls.settings_file), path)
        return os.path.abspath(path)

    def __init__(self, out=None):
        if self.settings is None:
            self.setup()
        self.out = sys.stdout if out is None else out
        settings = self.settings['UnicodeData']
        #: the :class:`unidata.acquire.UnicodeData` instance used
        self.unidata = UnicodeData(
            cachedir=settings['cache'],
            bundle=settings['bundle'],
            data_url=settings['data_url'],
            blocks_url=settings['blocks_url'],
            lifetime=datetime.timedelta(days=settings['lifetime']))

    def run(self, options, args):
        """Carries out the actions requested on the command line

        Returns 0 on success, 1 if the database could not be loaded and
        2 if an argument was not understood."""
        status = 0
        try:
            if options.clear_cache:
                for path in self.unidata.uncache():
                    self.write("Removed %s" % path)
            if options.update_sources:
                path = self.unidata.update_sources()
                self.write("Wrote %s" % path)
            else:
                self.unidata.load()
        except Exception as err:
            logging.error("Unicode database could not be loaded: %s", err)
            return 1
        if options.find:
            selection = 'cr' if options.ranges else 'c'
            if options.unique:
                match = self.unidata.find(options.find, True, selection)
                matches = [] if match is None else [match]
            else:
                matches = self.unidata.find(options.find, False, selection)
            for c in matches:
                self.write(str(c))
        for arg in args:
            try:
                code_point = parse_code_point(arg)
            except ValueError:
                logging.error("Not a code point or character: %s", arg)
                status = 2
                continue
            c = self.unidata.get(code_point)
            if c is None:
                self.write("%s not found" % format_code_point(code_point))
            else:
                self.write(str(c))
        return status

    def write(self, line):
        self.out.write(line + "\n")


def main(argv=None):
    return UnidataApp.main(argv)
