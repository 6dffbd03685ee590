"""
Blocking event stream shared between a producer and a single consumer.

Bindings publish notifications and buses publish messages on an EventStream.
The bridge iterates over it; iteration blocks for the next event and ends
once the stream is closed and drained.
"""

import queue
import threading
from typing import Generic, Iterator, TypeVar

from .errors import StreamClosed

T = TypeVar("T")

_CLOSED = object()


class EventStream(Generic[T]):
    """
    FIFO event queue with close semantics.

    Args:
        maxsize: Queue bound, 0 for unbounded (put blocks while full)
    """

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue" = queue.Queue(maxsize)
        self._closed = threading.Event()
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put(self, event: T) -> None:
        """
        Append an event.

        Blocks while a bounded stream is full; close() waits for it.

        Raises:
            StreamClosed: If close() was already called
        """
        with self._lock:
            if self._closed.is_set():
                raise StreamClosed("event stream is closed")
            self._queue.put(event)

    def close(self) -> None:
        """Close the stream. Events already queued are still delivered."""
        with self._lock:
            if self._closed.is_set():
                return
            self._closed.set()
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[T]:
        while True:
            event = self._queue.get()
            if event is _CLOSED:
                # Leave the marker for any later iteration
                self._queue.put(_CLOSED)
                return
            yield event
