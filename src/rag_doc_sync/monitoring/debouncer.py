"""
Per-path coalescing of file system notifications.

Editors and file systems emit several notifications for one logical save
(truncate, write, close, rename-over). The debouncer buffers one pending
event per path, OR-merges the operation flags of every notification that
arrives while the path is pending, and only emits once the path has been
quiet for the configured delay.

All state lives in a single task (``run``). Timers never touch the pending
map: on expiry they post a message into the debouncer's inbox carrying the
token of the entry they were armed for, and the owning task flushes the entry
only if the token still matches.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass
from pathlib import Path

from rag_doc_sync.models import FileChangeEvent

logger = logging.getLogger(__name__)


@dataclass
class PendingEvent:
    """A path's buffered change while it is inside the debounce window."""

    event: FileChangeEvent
    token: int
    timer: asyncio.TimerHandle


@dataclass(frozen=True)
class _Expired:
    path: Path
    token: int


_CLOSE = object()


class EventDebouncer:
    """
    Coalesces bursts of per-path change events.

    Producers call ``submit`` and finally ``close``; the owner runs ``run`` as
    a task; consumers call ``get`` until it returns ``None``.
    """

    def __init__(self, delay_seconds: float):
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be positive")
        self.delay_seconds = delay_seconds

        self._inbox: asyncio.Queue = asyncio.Queue()
        self._outbox: asyncio.Queue[FileChangeEvent | None] = asyncio.Queue()
        self._pending: dict[Path, PendingEvent] = {}
        self._tokens = itertools.count(1)
        self._closing = False
        self._closed = False

    def submit(self, event: FileChangeEvent) -> None:
        """
        Queue a raw notification. Must be called from the event loop thread.

        Events submitted after ``close`` would land behind the end marker and
        are dropped instead.
        """
        if self._closing:
            logger.debug("Dropping %s submitted after close", event)
            return
        self._inbox.put_nowait(event)

    def close(self) -> None:
        """Signal end of input; pending events are flushed before the output closes."""
        if self._closing:
            return
        self._closing = True
        self._inbox.put_nowait(_CLOSE)

    async def get(self) -> FileChangeEvent | None:
        """Wait for the next coalesced event; ``None`` marks the end of the stream."""
        return await self._outbox.get()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def closing(self) -> bool:
        """True once ``close`` was called or the owner task ended; no input is accepted."""
        return self._closing or self._closed

    @property
    def closed(self) -> bool:
        return self._closed

    async def run(self) -> None:
        """Process the inbox until ``close`` is called."""
        loop = asyncio.get_running_loop()
        try:
            while True:
                message = await self._inbox.get()
                if message is _CLOSE:
                    break
                if isinstance(message, _Expired):
                    self._on_expired(message)
                else:
                    self._on_event(loop, message)
            self._flush_all()
        finally:
            for pending in self._pending.values():
                pending.timer.cancel()
            self._pending.clear()
            self._closing = True
            self._closed = True
            self._outbox.put_nowait(None)

    def _on_event(self, loop: asyncio.AbstractEventLoop, event: FileChangeEvent) -> None:
        pending = self._pending.get(event.file_path)
        token = next(self._tokens)

        if pending is None:
            logger.debug("Buffering %s", event)
            timer = self._arm(loop, event.file_path, token)
            self._pending[event.file_path] = PendingEvent(event=event, token=token, timer=timer)
            return

        pending.timer.cancel()
        pending.event.merge(event)
        pending.token = token
        pending.timer = self._arm(loop, event.file_path, token)
        logger.debug("Merged into %s, window restarted", pending.event)

    def _arm(self, loop: asyncio.AbstractEventLoop, path: Path, token: int) -> asyncio.TimerHandle:
        return loop.call_later(self.delay_seconds, self._inbox.put_nowait, _Expired(path, token))

    def _on_expired(self, message: _Expired) -> None:
        pending = self._pending.get(message.path)
        if pending is None or pending.token != message.token:
            # superseded by a later notification for the same path
            return
        del self._pending[message.path]
        logger.debug("Flushing %s", pending.event)
        self._outbox.put_nowait(pending.event)

    def _flush_all(self) -> None:
        if self._pending:
            logger.debug("Flushing %d pending events on close", len(self._pending))
        for pending in self._pending.values():
            pending.timer.cancel()
            self._outbox.put_nowait(pending.event)
        self._pending.clear()
