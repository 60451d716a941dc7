#! /usr/bin/env python
"""Downloads the source files of the Unicode character database"""

import datetime
import email.utils
import http.client
import logging
import os
import urllib.error
import urllib.request


CHUNK_SIZE = 0x10000

# ValueError is raised by urlopen for an unknown URL type
TRANSFER_ERRORS = (
    urllib.error.URLError, http.client.HTTPException, OSError, ValueError)


class NetworkError(IOError):

    """Raised when a source file can't be downloaded

    url
        The URL being downloaded

    NetworkError is a subclass of IOError."""

    def __init__(self, url, msg):
        self.url = url
        super(NetworkError, self).__init__("%s: %s" % (url, msg))


def parse_http_date(src):
    """Parses an HTTP date header value

    Returns a timezone-aware UTC datetime or None if src is missing or
    can't be parsed."""
    if not src:
        return None
    try:
        value = email.utils.parsedate_to_datetime(src)
    except (TypeError, ValueError, IndexError):
        logging.debug("Ignoring unparsable HTTP date: %r", src)
        return None
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


class Download(object):

    """A single transfer of a URL to a local file

    url
        The URL to download

    path
        The local file to save the data to

    opener
        A function with the signature of urllib.request.urlopen, used to
        open the URL (defaults to urlopen itself).

    Instances are passed to observers before the transfer starts,
    :attr:`bytes_read` and :attr:`total` can be used to report
    progress.  The data is written to a temporary file alongside *path*
    and renamed when the transfer completes, a failed transfer leaves
    no file behind."""

    def __init__(self, url, path, opener=None, timeout=60):
        self.url = url
        self.path = path
        self.opener = urllib.request.urlopen if opener is None else opener
        self.timeout = timeout
        #: the HTTP status of the response (None until the URL is opened)
        self.status = None
        #: the value of the server's Date header as a datetime, or None
        self.date = None
        #: the value of the server's Last-Modified header, or None
        self.last_modified = None
        #: the number of bytes transferred so far
        self.bytes_read = 0
        #: the expected length of the data, or None if not known
        self.total = None
        #: True when the file has been saved
        self.finished = False

    def __repr__(self):
        return "Download(%r, %r)" % (self.url, self.path)

    def run(self):
        """Transfers the data, blocking until done

        Raises :class:`NetworkError` if the transfer fails.  Errors
        writing the local file are raised as OSError."""
        tmp_path = self.path + '.part'
        logging.info("Downloading %s", self.url)
        try:
            try:
                response = self.opener(self.url, timeout=self.timeout)
            except TRANSFER_ERRORS as err:
                raise NetworkError(
                    self.url, getattr(err, 'reason', err)) from err
            with response:
                self.status = getattr(response, 'status', None)
                headers = response.headers
                self.date = parse_http_date(headers.get('Date'))
                self.last_modified = parse_http_date(
                    headers.get('Last-Modified'))
                length = headers.get('Content-Length')
                if length and length.isdigit():
                    self.total = int(length)
                with open(tmp_path, 'wb') as f:
                    while True:
                        try:
                            data = response.read(CHUNK_SIZE)
                        except TRANSFER_ERRORS as err:
                            raise NetworkError(self.url, err) from err
                        if not data:
                            break
                        f.write(data)
                        self.bytes_read += len(data)
            if self.total is not None and self.bytes_read < self.total:
                raise NetworkError(
                    self.url, "incomplete transfer: %i of %i bytes" %
                    (self.bytes_read, self.total))
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise
        self.finished = True
        logging.debug("Saved %i bytes to %s", self.bytes_read, self.path)


class Downloader(object):

    """Creates :class:`Download` instances

    opener
        Passed to each :class:`Download`, see there for details."""

    def __init__(self, opener=None, timeout=60):
        self.opener = opener
        self.timeout = timeout

    def download(self, url, path):
        """Returns a new :class:`Download`, the transfer is not started"""
        return Download(url, path, opener=self.opener, timeout=self.timeout)
