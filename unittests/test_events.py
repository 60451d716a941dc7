#! /usr/bin/env python

import logging
import unittest

from unidata import events


def suite():
    loader = unittest.TestLoader()
    loader.testMethodPrefix = 'test'
    return unittest.TestSuite((
        loader.loadTestsFromTestCase(EmitterTests),
    ))


class EmitterTests(unittest.TestCase):

    def setUp(self):        # noqa
        self.emitter = events.EventEmitter()
        self.calls = []

    def handler(self, *args):
        self.calls.append(('handler', args))

    def other(self, *args):
        self.calls.append(('other', args))

    def test_on(self):
        self.assertTrue(self.emitter.on(events.READY, self.handler) ==
                        self.handler)
        self.emitter.on(events.READY, self.other)
        n = self.emitter.emit(events.READY, 1, 2)
        self.assertTrue(n == 2)
        self.assertTrue(self.calls == [('handler', (1, 2)),
                                       ('other', (1, 2))])
        self.assertTrue(self.emitter.emit(events.ERROR, 3) == 0)
        try:
            self.emitter.on(events.READY, "not callable")
            self.fail("non-callable handler")
        except TypeError:
            pass

    def test_off(self):
        self.emitter.on(events.READY, self.handler)
        self.emitter.on(events.READY, self.other)
        self.emitter.off(events.READY, self.handler)
        self.emitter.emit(events.READY)
        self.assertTrue(self.calls == [('other', ())])
        # unknown handlers are ignored
        self.emitter.off(events.READY, self.handler)
        self.emitter.off(events.ERROR, self.handler)
        self.emitter.on(events.READY, self.handler)
        self.emitter.off(events.READY)
        self.assertTrue(self.emitter.listeners(events.READY) == [])

    def test_once(self):
        self.emitter.once(events.DOWNLOAD, self.handler)
        self.emitter.emit(events.DOWNLOAD, 'a')
        self.emitter.emit(events.DOWNLOAD, 'b')
        self.assertTrue(self.calls == [('handler', ('a', ))])
        self.emitter.once(events.DOWNLOAD, self.handler)
        self.emitter.off(events.DOWNLOAD, self.handler)
        self.assertTrue(self.emitter.emit(events.DOWNLOAD, 'c') == 0)

    def test_failing_handler(self):

        def bad_handler(*args):
            raise RuntimeError("observer failure")

        self.emitter.on(events.ERROR, bad_handler)
        self.emitter.on(events.ERROR, self.handler)
        # the failure is logged, later handlers still run
        n = self.emitter.emit(events.ERROR, 'x')
        self.assertTrue(n == 2)
        self.assertTrue(self.calls == [('handler', ('x', ))])

    def test_event_objects(self):
        e = events.ReadyStateChangeEvent(self.emitter, 0, 1)
        self.assertTrue(e.sender is self.emitter)
        self.assertTrue(e.prev == 0 and e.next == 1)
        self.assertTrue("0 -> 1" in repr(e))
        e = events.DownloadEvent(self.emitter, 'download')
        self.assertTrue(e.download == 'download')


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    unittest.main()
