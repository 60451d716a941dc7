#! /usr/bin/env python
"""Notifications sent while the database is being loaded"""

import logging
import threading


READYSTATECHANGE = 'readystatechange'
DOWNLOAD = 'download'
READY = 'ready'
ERROR = 'error'

EVENTS = (READYSTATECHANGE, DOWNLOAD, READY, ERROR)


class EventEmitter(object):

    """A registry of event handlers

    Handlers are registered against an event name and are called, in
    the order they were registered, each time the event is emitted.
    A handler that raises an exception is logged and the remaining
    handlers are still called: a failing observer never changes the
    outcome of the operation being observed."""

    def __init__(self):
        self._listeners = {}
        self._listener_lock = threading.RLock()

    def on(self, event, handler):
        """Registers handler for event, returns handler"""
        if not callable(handler):
            raise TypeError("event handler must be callable: %r" %
                            (handler, ))
        with self._listener_lock:
            self._listeners.setdefault(event, []).append(handler)
        return handler

    def once(self, event, handler):
        """Registers handler to be called the next time event occurs"""

        def wrapper(*args):
            self.off(event, wrapper)
            return handler(*args)

        wrapper.handler = handler
        self.on(event, wrapper)
        return handler

    def off(self, event, handler=None):
        """Removes a handler

        If handler is None all handlers for event are removed.  Removing
        a handler that is not registered has no effect."""
        with self._listener_lock:
            if handler is None:
                self._listeners.pop(event, None)
                return
            handlers = self._listeners.get(event, [])
            for i, h in enumerate(handlers):
                # bound methods compare equal but are not identical
                if h == handler or getattr(h, 'handler', None) == handler:
                    del handlers[i]
                    break

    def listeners(self, event):
        """Returns a list of the handlers registered for event"""
        with self._listener_lock:
            return list(self._listeners.get(event, []))

    def emit(self, event, *args):
        """Calls the handlers for event with args

        Returns the number of handlers called."""
        handlers = self.listeners(event)
        for handler in handlers:
            try:
                handler(*args)
            except Exception:
                logging.exception("Handler for %s event failed", event)
        return len(handlers)


class ReadyStateChangeEvent(object):

    """Passed to handlers of the 'readystatechange' event

    sender
        The object that emitted the event

    prev
        The previous ready state

    next
        The new (current) ready state"""

    def __init__(self, sender, prev, next):
        self.sender = sender
        self.prev = prev
        self.next = next

    def __repr__(self):
        return "ReadyStateChangeEvent(%s -> %s)" % (
            getattr(self.prev, 'name', self.prev),
            getattr(self.next, 'name', self.next))


class DownloadEvent(object):

    """Passed to handlers of the 'download' event

    sender
        The object that emitted the event

    download
        The :class:`unidata.download.Download` that is about to start"""

    def __init__(self, sender, download):
        self.sender = sender
        self.download = download

    def __repr__(self):
        return "DownloadEvent(%r)" % (self.download, )
