#! /usr/bin/env python

import datetime
import email.message
import http.client
import io
import logging
import os
import os.path
import shutil
import tempfile
import unittest
import urllib.error

from unidata import download


def suite():
    loader = unittest.TestLoader()
    loader.testMethodPrefix = 'test'
    return unittest.TestSuite((
        loader.loadTestsFromTestCase(DateTests),
        loader.loadTestsFromTestCase(DownloadTests),
    ))


class MockResponse(io.BytesIO):

    """Stands in for the response returned by urlopen"""

    def __init__(self, data, headers=None, status=200, fail_after=None,
                 failure=None):
        super(MockResponse, self).__init__(data)
        self.status = status
        self.headers = email.message.Message()
        for name, value in (headers or {}).items():
            self.headers[name] = value
        self.fail_after = fail_after
        self.failure = failure

    def read(self, size=-1):
        if self.fail_after is not None and self.tell() >= self.fail_after:
            if self.failure is not None:
                raise self.failure
            raise ConnectionResetError("connection reset by peer")
        if self.fail_after is not None:
            size = min(size, self.fail_after - self.tell())
        return super(MockResponse, self).read(size)


class MockOpener(object):

    """Serves canned responses keyed on URL"""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, url, timeout=None):
        self.requests.append(url)
        response = self.responses.get(url)
        if response is None:
            raise urllib.error.HTTPError(url, 404, "Not Found", None, None)
        elif isinstance(response, Exception):
            raise response
        return response


class DateTests(unittest.TestCase):

    def test_parse(self):
        value = download.parse_http_date("Mon, 19 Oct 2026 12:00:00 GMT")
        self.assertTrue(value == datetime.datetime(
            2026, 10, 19, 12, 0, 0, tzinfo=datetime.timezone.utc))
        value = download.parse_http_date("Mon, 19 Oct 2026 14:00:00 +0200")
        self.assertTrue(value.hour == 12)
        self.assertTrue(value.utcoffset() == datetime.timedelta(0))
        for bad in (None, "", "yesterday"):
            self.assertTrue(download.parse_http_date(bad) is None)


class DownloadTests(unittest.TestCase):

    def setUp(self):        # noqa
        self.d = tempfile.mkdtemp('.d', 'unidata-test_download-')
        self.path = os.path.join(self.d, 'Blocks.txt')

    def tearDown(self):     # noqa
        shutil.rmtree(self.d)

    def test_download(self):
        data = b"0000..007F; Basic Latin\n"
        opener = MockOpener({'http://localhost/Blocks.txt': MockResponse(
            data, {'Date': "Mon, 19 Oct 2026 12:00:00 GMT",
                   'Last-Modified': "Fri, 19 Sep 2025 12:00:00 GMT",
                   'Content-Length': str(len(data))})})
        d = download.Downloader(opener).download(
            'http://localhost/Blocks.txt', self.path)
        self.assertFalse(d.finished)
        self.assertFalse(os.path.exists(self.path))
        d.run()
        self.assertTrue(d.finished)
        self.assertTrue(d.status == 200)
        self.assertTrue(d.bytes_read == len(data))
        self.assertTrue(d.total == len(data))
        self.assertTrue(d.date.year == 2026)
        self.assertTrue(d.last_modified.year == 2025)
        with open(self.path, 'rb') as f:
            self.assertTrue(f.read() == data)
        self.assertTrue(os.listdir(self.d) == ['Blocks.txt'])

    def test_no_headers(self):
        opener = MockOpener({'http://localhost/Blocks.txt': MockResponse(
            b"x" * (download.CHUNK_SIZE * 2 + 1))})
        d = download.Download('http://localhost/Blocks.txt', self.path,
                              opener=opener)
        d.run()
        self.assertTrue(d.date is None and d.last_modified is None)
        self.assertTrue(d.total is None)
        self.assertTrue(d.bytes_read == download.CHUNK_SIZE * 2 + 1)

    def test_not_found(self):
        d = download.Download('http://localhost/Missing.txt', self.path,
                              opener=MockOpener({}))
        try:
            d.run()
            self.fail("download of missing resource")
        except download.NetworkError as err:
            self.assertTrue(err.url == 'http://localhost/Missing.txt')
            self.assertTrue(isinstance(err, IOError))
        self.assertFalse(d.finished)
        self.assertTrue(os.listdir(self.d) == [])

    def test_connection_refused(self):
        opener = MockOpener({'http://localhost/Blocks.txt':
                             urllib.error.URLError("connection refused")})
        d = download.Download('http://localhost/Blocks.txt', self.path,
                              opener=opener)
        try:
            d.run()
            self.fail("download with refused connection")
        except download.NetworkError as err:
            self.assertTrue("connection refused" in str(err))

    def test_reset(self):
        data = b"x" * 100
        opener = MockOpener({'http://localhost/Blocks.txt': MockResponse(
            data, fail_after=50)})
        d = download.Download('http://localhost/Blocks.txt', self.path,
                              opener=opener)
        try:
            d.run()
            self.fail("download with connection reset")
        except download.NetworkError:
            pass
        # the partial file is removed
        self.assertTrue(os.listdir(self.d) == [])

    def test_incomplete_read(self):
        data = b"x" * 100
        opener = MockOpener({'http://localhost/Blocks.txt': MockResponse(
            data, fail_after=50,
            failure=http.client.IncompleteRead(data[:10], 90))})
        d = download.Download('http://localhost/Blocks.txt', self.path,
                              opener=opener)
        try:
            d.run()
            self.fail("download with incomplete chunked read")
        except download.NetworkError as err:
            self.assertTrue(isinstance(err.__cause__,
                                       http.client.IncompleteRead))
        self.assertTrue(os.listdir(self.d) == [])

    def test_bad_url(self):
        # no scheme, urlopen raises ValueError
        d = download.Download('Blocks.txt', self.path)
        try:
            d.run()
            self.fail("download of URL with no scheme")
        except download.NetworkError as err:
            self.assertTrue(err.url == 'Blocks.txt')
        self.assertTrue(os.listdir(self.d) == [])

    def test_truncated(self):
        opener = MockOpener({'http://localhost/Blocks.txt': MockResponse(
            b"x" * 10, {'Content-Length': "100"})})
        d = download.Download('http://localhost/Blocks.txt', self.path,
                              opener=opener)
        try:
            d.run()
            self.fail("truncated download")
        except download.NetworkError as err:
            self.assertTrue("incomplete" in str(err))
        self.assertTrue(os.listdir(self.d) == [])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    unittest.main()
