#! /usr/bin/env python
"""Local storage for the source files and the parsed database

The source files and the parsed snapshot are cached in a per-user
application data folder:

Windows
    %APPDATA%\\www.unicode.org\\Public\\UNIDATA

Mac OS X
    ~/Library/Application Support/www.unicode.org/Public/UNIDATA

Other systems
    ~/.www.unicode.org/Public/UNIDATA"""

import errno
import logging
import os
import os.path
import platform
import re
import stat
import tempfile


SNAPSHOT_FILE = "UnicodeData.json"
DATA_FILE = "UnicodeData.txt"
BLOCK_FILE = "Blocks.txt"

VENDOR_PATH = ("www.unicode.org", "Public", "UNIDATA")


def bundle_location():
    """The path of the snapshot distributed with the package"""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)),
                        SNAPSHOT_FILE)


def split_path(path, system=None):
    """Splits a path into a list of segments

    The first segment of an absolute path includes the root (and the
    drive, where there is one) so that the segments can be rejoined
    with os.path.join."""
    if system is None:
        system = platform.system()
    if system == 'Windows':
        seps = r'[\\/]'
    else:
        seps = re.escape(os.sep)
    drive, rest = os.path.splitdrive(path)
    segments = [s for s in re.split(seps, rest) if s]
    if re.match(seps, rest):
        head = drive + os.sep
    else:
        head = drive
    if head:
        segments.insert(0, head)
    return segments


def cache_location(cachedir=None, system=None, environ=None, home=None):
    """Returns the cache folder as a list of path segments

    cachedir
        Overrides the default location, either a path string or a list
        of segments

    The remaining arguments are provided for testing and default to the
    values for the running system."""
    if cachedir:
        if isinstance(cachedir, (list, tuple)):
            return list(cachedir)
        return split_path(cachedir, system)
    if system is None:
        system = platform.system()
    if environ is None:
        environ = os.environ
    if home is None:
        home = os.path.expanduser("~")
    if system == 'Darwin':
        return [home, 'Library', 'Application Support'] + list(VENDOR_PATH)
    elif system == 'Windows':
        appdata = environ.get('APPDATA') or os.path.join(
            home, 'AppData', 'Roaming')
        return [appdata] + list(VENDOR_PATH)
    else:
        return [home, '.' + VENDOR_PATH[0]] + list(VENDOR_PATH[1:])


class LocalStore(object):

    """Blocking file system operations used by the loader

    The loader runs these methods in an executor so that they don't
    block the event loop.  A missing file is never an error: methods
    that look for a file return None (or False) instead of raising
    FileNotFoundError.  All other OSErrors are raised."""

    def stat(self, path, kind='file'):
        """Returns the os.stat_result for path or None if it is missing

        kind
            'file' or 'dir', if path exists but is not of the expected
            kind IsADirectoryError or NotADirectoryError is raised."""
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return None
        if kind == 'dir':
            if not stat.S_ISDIR(st.st_mode):
                raise NotADirectoryError(
                    errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        elif stat.S_ISDIR(st.st_mode):
            raise IsADirectoryError(
                errno.EISDIR, os.strerror(errno.EISDIR), path)
        return st

    def mkdirs(self, segments):
        """Creates a folder hierarchy

        segments
            A list of path segments, each is created if it does not
            already exist.

        Returns the path to the folder."""
        path = None
        for segment in segments:
            path = segment if path is None else os.path.join(path, segment)
            if self.stat(path, 'dir') is not None:
                continue
            try:
                os.mkdir(path)
                logging.debug("Created folder %s", path)
            except FileExistsError:
                # created since we looked, fine if it's a folder
                self.stat(path, 'dir')
        if path is None:
            raise ValueError("empty folder path")
        return path

    def read_text(self, path, errors='strict'):
        """Reads a UTF-8 file

        errors is passed to the decoder, use 'replace' to substitute
        U+FFFD for bytes that are not valid UTF-8."""
        with open(path, 'r', encoding='utf-8', errors=errors) as f:
            return f.read()

    def write_text(self, path, data):
        """Writes data to path, replacing any existing file

        The data is written to a temporary file in the same folder which
        is then renamed so that readers never see a partial file."""
        folder, fname = os.path.split(path)
        fd, tmp_path = tempfile.mkstemp(prefix=fname + '.', suffix='.tmp',
                                        dir=folder or None)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(data)
            os.replace(tmp_path, path)
        except BaseException:
            self.unlink(tmp_path)
            raise

    def unlink(self, path):
        """Removes path, returns False if it did not exist"""
        try:
            os.unlink(path)
            return True
        except FileNotFoundError:
            return False


def uncache(cachedir=None, store=None):
    """Removes the cached files from the per-user cache folder

    cachedir
        Overrides the default location, see :func:`cache_location`

    The folder itself is left in place.  Returns a list of the paths of
    the files that were removed."""
    if store is None:
        store = LocalStore()
    segments = cache_location(cachedir)
    folder = os.path.join(*segments)
    removed = []
    for fname in (SNAPSHOT_FILE, DATA_FILE, BLOCK_FILE):
        path = os.path.join(folder, fname)
        if store.unlink(path):
            logging.info("Removed %s", path)
            removed.append(path)
    return removed
