# channel.py: bounded, closeable point-to-point channel
import threading
import time
from collections import deque
from typing import Iterator, Optional


class ChannelClosed(Exception):
    """The other side has gone away; treated as end-of-stream, not a fault."""


class ChannelTimeout(TimeoutError):
    pass


class ChannelFull(Exception):
    pass


class Channel:
    """
    Blocking FIFO shared between threads.

    capacity == 0 gives a rendezvous: send() returns only once a receiver
    has taken the value. capacity > 0 lets up to that many values sit in the
    buffer before send() blocks.

    close() disconnects both directions: pending and later sends fail with
    ChannelClosed, while recv() drains whatever is still buffered and then
    fails with ChannelClosed.
    """

    def __init__(self, capacity: int = 0):
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self.capacity = capacity
        self._items = deque()
        self._cv = threading.Condition()
        self._closed = False
        self._sent = 0
        self._taken = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._items)

    def close(self):
        with self._cv:
            self._closed = True
            self._cv.notify_all()

    def _wait(self, predicate, deadline: Optional[float]) -> bool:
        while not predicate():
            if deadline is None:
                self._cv.wait()
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self._cv.wait(timeout=remaining)
        return True

    def try_send(self, value: int):
        """Enqueue without blocking; only succeeds while buffer room remains."""
        with self._cv:
            if self._closed:
                raise ChannelClosed()
            if len(self._items) >= self.capacity:
                raise ChannelFull()
            self._items.append(value)
            self._sent += 1
            self._cv.notify_all()

    def send(self, value: int, timeout: Optional[float] = None):
        deadline = None if timeout is None else time.monotonic() + timeout
        room = max(self.capacity, 1)
        with self._cv:
            ok = self._wait(lambda: self._closed or len(self._items) < room, deadline)
            if self._closed:
                raise ChannelClosed()
            if not ok:
                raise ChannelTimeout("send timed out")
            self._items.append(value)
            self._sent += 1
            ticket = self._sent
            self._cv.notify_all()
            if self.capacity:
                return

            # rendezvous: wait for a receiver to take this exact value
            ok = self._wait(lambda: self._taken >= ticket or self._closed, deadline)
            if self._taken >= ticket:
                return
            # still the only pending value, withdraw it
            self._items.pop()
            self._sent -= 1
            self._cv.notify_all()
            if self._closed:
                raise ChannelClosed()
            raise ChannelTimeout("send timed out")

    def recv(self, timeout: Optional[float] = None) -> int:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cv:
            ok = self._wait(lambda: self._items or self._closed, deadline)
            if self._items:
                value = self._items.popleft()
                self._taken += 1
                self._cv.notify_all()
                return value
            if self._closed:
                raise ChannelClosed()
            raise ChannelTimeout("recv timed out")

    def __iter__(self) -> Iterator[int]:
        """Yield received values until the channel is closed and drained."""
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return

    def __repr__(self):
        state = "closed" if self._closed else "open"
        return f"Channel(capacity={self.capacity}, pending={len(self._items)}, {state})"
