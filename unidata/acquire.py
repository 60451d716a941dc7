#! /usr/bin/env python
"""Loads the Unicode character database

The database is built from the UnicodeData.txt and Blocks.txt files
published at www.unicode.org.  The files are downloaded and cached in a
per-user folder (see :mod:`unidata.cache`), parsed and merged, and the
result is saved as a JSON snapshot in the same folder.  The next time
the database is loaded the snapshot is read directly, until it expires.

Loading is asynchronous.  Progress is reported through the ready state
of a :class:`UnicodeData` instance: it starts at UNINITIALIZED and each
time it changes the instance emits a 'readystatechange' event with a
:class:`unidata.events.ReadyStateChangeEvent` argument.  A 'download'
event is emitted as each download starts.

If loading fails the ready state moves back to UNINITIALIZED and an
'error' event is emitted with the exception as its argument.  If it
succeeds the state moves to READY and a 'ready' event is emitted with
the new :class:`unidata.database.UnicodeDatabase`.  No events follow
either of these."""

import asyncio
import datetime
import enum
import logging
import os.path
import threading

from . import cache
from . import info
from .database import (
    SnapshotError,
    UnicodeDatabase,
    UnidataHeaders,
    utcnow,
    YEAR)
from .download import Downloader
from .events import (
    DOWNLOAD,
    DownloadEvent,
    ERROR,
    EventEmitter,
    READY,
    READYSTATECHANGE,
    ReadyStateChangeEvent)


BUNDLE = cache.bundle_location()
"""The location of the snapshot distributed with the package"""


class ReadyState(enum.IntEnum):

    """Enumeration of the states of a load"""

    #: not loaded, or loading failed with a terminal error
    UNINITIALIZED = 0
    #: constructing the cache folders
    INITIALIZING = 1
    #: loading a cached snapshot
    LOADING = 2
    #: downloading source text
    DOWNLOADING = 3
    #: parsing source text
    PARSING = 4
    #: caching the parsed data
    CACHING = 5
    #: loading completed successfully
    READY = 6


class Acquisition(object):

    """A single attempt to load the database

    sender
        The :class:`unidata.events.EventEmitter` used to notify
        observers, also passed as the sender of each event.

    cachedir
        The cache folder, see :func:`unidata.cache.cache_location`

    bundle
        Path to a snapshot that is tried before the cache, None to skip
        it

    store
        A :class:`unidata.cache.LocalStore` used for all file access

    downloader
        A :class:`unidata.download.Downloader` used to fetch the source
        files

    data_url, blocks_url
        The URLs of UnicodeData.txt and Blocks.txt

    lifetime
        A :class:`datetime.timedelta`, how long a copy stays fresh

    clock
        A function that returns the current time as an aware datetime

    publish
        A function called with (acquisition, database) just before the
        state moves to READY

    Blocking file and network calls are made in the event loop's
    default executor, parsing and merging happen in the loop itself.
    An instance can only be run once."""

    def __init__(self, sender, cachedir=None, bundle=None, store=None,
                 downloader=None, data_url=info.UCDDatabaseURL,
                 blocks_url=info.UCDBlockDatabaseURL, lifetime=YEAR,
                 clock=None, publish=None):
        self.sender = sender
        self.cachedir = cachedir
        self.bundle = bundle
        self.store = cache.LocalStore() if store is None else store
        self.downloader = Downloader() if downloader is None else downloader
        self.data_url = data_url
        self.blocks_url = blocks_url
        self.lifetime = lifetime
        self.clock = utcnow if clock is None else clock
        self.publish = publish
        #: the current :class:`ReadyState`
        self.state = ReadyState.UNINITIALIZED
        #: the cache folder, once it has been created
        self.cache = None
        #: the exception that ended the load, if it failed
        self.error = None
        #: the database, once loaded
        self.database = None
        self._started = False

    def set_state(self, next):
        """Changes the state, emitting readystatechange if different"""
        if self.state != next:
            prev = self.state
            self.state = next
            logging.debug("Unicode database: %s -> %s", prev.name, next.name)
            self.sender.emit(
                READYSTATECHANGE,
                ReadyStateChangeEvent(self.sender, prev, next))

    async def _call(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def run(self):
        """Loads the database

        Returns the :class:`unidata.database.UnicodeDatabase`.  Any
        error is stored in :attr:`error`, emitted as an 'error' event
        and then raised."""
        if self._started:
            raise RuntimeError("Acquisition can only be run once")
        self._started = True
        try:
            database = await self._acquire()
        except Exception as err:
            self.error = err
            logging.warning("Unicode database failed to load: %s", err)
            self.set_state(ReadyState.UNINITIALIZED)
            self.sender.emit(ERROR, err)
            raise
        self.database = database
        if self.publish is not None:
            self.publish(self, database)
        self.set_state(ReadyState.READY)
        self.sender.emit(READY, database)
        return database

    async def _acquire(self):
        self.set_state(ReadyState.INITIALIZING)
        if self.bundle:
            if await self._call(self.store.stat, self.bundle) is not None:
                database = await self.load_snapshot(self.bundle)
                if database is not None:
                    return database
        folder = await self._call(
            self.store.mkdirs, cache.cache_location(self.cachedir))
        self.cache = folder
        jsfile = os.path.join(folder, cache.SNAPSHOT_FILE)
        txtfile = os.path.join(folder, cache.DATA_FILE)
        blkfile = os.path.join(folder, cache.BLOCK_FILE)
        if await self._call(self.store.stat, jsfile) is not None:
            database = await self.load_snapshot(jsfile)
            if database is not None:
                return database
        return await self.load_text(txtfile, blkfile, jsfile)

    async def load_snapshot(self, path):
        """Loads a snapshot

        Returns the database or None if the snapshot can't be read or
        has expired.  A snapshot that can be read but not parsed raises
        :class:`unidata.database.SnapshotError`."""
        self.set_state(ReadyState.LOADING)
        try:
            data = await self._call(self.store.read_text, path)
        except OSError as err:
            logging.warning("Can't read %s: %s", path, err)
            return None
        except UnicodeDecodeError as err:
            raise SnapshotError("invalid snapshot: %s" % err) from err
        database = UnicodeDatabase.loads(data)
        if database.headers.is_expired(self.clock()):
            logging.info("Snapshot %s expired on %s", path,
                         database.headers.expires)
            return None
        logging.info("Loaded Unicode database from %s", path)
        return database

    async def load_text(self, txtfile, blkfile, jsfile):
        """Loads the database from the source text files

        The files are downloaded if they are missing and the result is
        cached in jsfile."""
        st = await self._call(self.store.stat, txtfile)
        if st is None:
            now = self.clock()
            download = await self.download(self.data_url, txtfile)
            headers = UnidataHeaders.from_download(
                now, download.date, download.last_modified, self.lifetime)
        else:
            now = self.clock()
            modified = datetime.datetime.fromtimestamp(
                st.st_mtime, datetime.timezone.utc)
            headers = UnidataHeaders(now, modified, now + self.lifetime)
        if await self._call(self.store.stat, blkfile) is None:
            await self.download(self.blocks_url, blkfile)
        self.set_state(ReadyState.PARSING)
        data_text = await self._call(self.store.read_text, txtfile, 'replace')
        block_text = await self._call(self.store.read_text, blkfile, 'replace')
        database = UnicodeDatabase.from_text(data_text, block_text, headers)
        logging.info("Parsed %i characters and %i ranges",
                     len(database.characters), len(database.ranges))
        self.set_state(ReadyState.CACHING)
        await self._call(self.store.write_text, jsfile, database.dumps())
        return database

    async def download(self, url, path):
        """Downloads url to path, emitting a 'download' event"""
        self.set_state(ReadyState.DOWNLOADING)
        download = self.downloader.download(url, path)
        self.sender.emit(DOWNLOAD, DownloadEvent(self.sender, download))
        await self._call(download.run)
        return download


def _retrieve_exception(task):
    # errors are reported through the 'error' event
    if not task.cancelled():
        task.exception()


class UnicodeData(EventEmitter):

    """Provides access to the Unicode character database

    cachedir
        Overrides the cache folder, either a path or a list of path
        segments.  See :func:`unidata.cache.cache_location`.

    bundle
        Path to a snapshot that is tried before the cache, defaults to
        the snapshot distributed with the package.  Pass None to skip.

    data_url, blocks_url
        Override the URLs of UnicodeData.txt and Blocks.txt

    lifetime
        A :class:`datetime.timedelta`, how long a download stays fresh

    store, downloader, clock
        Override the file system access, network access and current
        time, see :class:`Acquisition`.

    Creating an instance does not load the database, use
    :meth:`reload` (in a running event loop), :meth:`acquire` (from a
    coroutine) or :meth:`load` (from synchronous code).

    Until a load succeeds the instance has an empty database.  A
    subsequent load replaces the database only when it succeeds."""

    ReadyState = ReadyState

    _instance = None
    _instance_lock = threading.RLock()

    def __init__(self, cachedir=None, bundle=BUNDLE,
                 data_url=info.UCDDatabaseURL,
                 blocks_url=info.UCDBlockDatabaseURL, lifetime=YEAR,
                 store=None, downloader=None, clock=None):
        super(UnicodeData, self).__init__()
        self.cachedir = cachedir
        self.bundle = bundle
        self.data_url = data_url
        self.blocks_url = blocks_url
        self.lifetime = lifetime
        self.store = cache.LocalStore() if store is None else store
        self.downloader = downloader
        self.clock = clock
        #: the most recently published
        #: :class:`unidata.database.UnicodeDatabase`
        self.database = UnicodeDatabase()
        #: the most recent :class:`Acquisition`
        self.acquisition = None
        self._task = None

    @classmethod
    def instance(cls, **kwargs):
        """Returns the shared instance

        The instance is created on first use, with kwargs passed to the
        constructor.  It is not loaded automatically.  Passing kwargs
        once the instance exists is an error, use :meth:`set_instance`
        to replace it."""
        with cls._instance_lock:
            if UnicodeData._instance is None:
                UnicodeData._instance = cls(**kwargs)
            elif kwargs:
                raise ValueError("shared UnicodeData instance already exists")
            return UnicodeData._instance

    @classmethod
    def set_instance(cls, obj):
        """Replaces the shared instance with obj (which may be None)"""
        with cls._instance_lock:
            UnicodeData._instance = obj

    @classmethod
    def reset_instance(cls):
        """Discards the shared instance"""
        cls.set_instance(None)

    @property
    def ready_state(self):
        """The :class:`ReadyState` of the most recent load"""
        if self.acquisition is None:
            return ReadyState.UNINITIALIZED
        return self.acquisition.state

    @property
    def error(self):
        """The exception that ended the most recent load, if it failed"""
        if self.acquisition is None:
            return None
        return self.acquisition.error

    @property
    def cache(self):
        """The cache folder used by the most recent load"""
        if self.acquisition is None:
            return None
        return self.acquisition.cache

    @property
    def headers(self):
        return self.database.headers

    def new_acquisition(self, cachedir=None):
        """Creates and records a fresh :class:`Acquisition`"""
        self.acquisition = Acquisition(
            self,
            cachedir=self.cachedir if cachedir is None else cachedir,
            bundle=self.bundle,
            store=self.store,
            downloader=self.downloader,
            data_url=self.data_url,
            blocks_url=self.blocks_url,
            lifetime=self.lifetime,
            clock=self.clock,
            publish=self._publish)
        return self.acquisition

    def _publish(self, acquisition, database):
        if acquisition is self.acquisition:
            self.database = database

    async def acquire(self, cachedir=None):
        """Loads the database in the current task

        Returns the new database, or raises the error that ended the
        load."""
        return await self.new_acquisition(cachedir).run()

    def reload(self, cachedir=None):
        """Starts loading the database

        cachedir
            Overrides the cache folder for this load

        Must be called with a running event loop.  Returns an
        :class:`asyncio.Task` that completes with the new database.
        Starting a load while another is in progress is not
        supported."""
        loop = asyncio.get_running_loop()
        acquisition = self.new_acquisition(cachedir)
        self._task = loop.create_task(acquisition.run())
        self._task.add_done_callback(_retrieve_exception)
        return self._task

    async def wait(self):
        """Waits for the load started by :meth:`reload` to complete

        Returns the database or raises the error that ended the load."""
        if self._task is None:
            if self.ready_state == ReadyState.READY:
                return self.database
            raise RuntimeError("UnicodeData is not loading")
        return await self._task

    def load(self, cachedir=None):
        """Loads the database, blocking until done

        Can't be called from a running event loop."""
        return asyncio.run(self.acquire(cachedir))

    def uncache(self, cachedir=None):
        """Removes the cached snapshot and source files

        Does not affect the loaded database.  Returns a list of the
        files removed."""
        return cache.uncache(
            self.cachedir if cachedir is None else cachedir, self.store)

    def update_sources(self, output=None):
        """Rebuilds the database from freshly downloaded sources

        output
            Where to write the snapshot, defaults to :attr:`bundle` (or
            the package location if there is no bundle).

        The cache is cleared first and the bundle is not consulted, it
        is only replaced if it is also the output.  Returns the path of
        the snapshot written."""
        if output is None:
            output = self.bundle or BUNDLE
        self.uncache()
        acquisition = self.new_acquisition()
        acquisition.bundle = None
        database = asyncio.run(acquisition.run())
        self.store.write_text(output, database.dumps())
        logging.info("Wrote %s, valid until %s", output,
                     database.headers.expires)
        return output

    def get(self, code_point):
        """See :meth:`unidata.database.UnicodeDatabase.get`"""
        return self.database.get(code_point)

    def find(self, filter, unique=False, selection=None):
        """See :meth:`unidata.database.UnicodeDatabase.find`"""
        return self.database.find(filter, unique, selection)

    def join(self, *args):
        """See :meth:`unidata.database.UnicodeDatabase.join`"""
        return self.database.join(*args)

    def split(self, text):
        return self.database.split(text)

    def to_json(self):
        return self.database.to_json()

    def __len__(self):
        return len(self.database)
