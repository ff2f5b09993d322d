"""
One-way message passing between a worker thread and the event loop.

Producers call send() and, when they stop for good, close(). The consumer
polls with try_recv(), which never blocks. Items sent before close() are
still delivered; after that try_recv() raises ChannelClosed.
"""
from queue import Empty, Queue
from typing import Any, Optional


class ChannelClosed(Exception):
    def __init__(self, name: str, reason: Optional[BaseException] = None):
        super().__init__(f"{name} channel closed" + (f": {reason}" if reason else ""))
        self.name = name
        self.reason = reason


class _Closed:
    def __init__(self, reason):
        self.reason = reason


class Channel:
    def __init__(self, name: str):
        self.name = name
        self._queue: Queue = Queue()
        self._closed: Optional[_Closed] = None

    def send(self, item: Any):
        self._queue.put(item)

    def close(self, reason: Optional[BaseException] = None):
        self._queue.put(_Closed(reason))

    def try_recv(self) -> Optional[Any]:
        """Next item, or None when nothing is waiting."""
        if self._closed:
            raise ChannelClosed(self.name, self._closed.reason)
        try:
            item = self._queue.get_nowait()
        except Empty:
            return None
        if isinstance(item, _Closed):
            self._closed = item
            raise ChannelClosed(self.name, item.reason)
        return item
