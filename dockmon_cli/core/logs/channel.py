"""
Multi-producer, single-consumer channel for log lines.

Every producer owns its own ``Sender``; the consumer owns the ``Receiver``.
The receive side ends once every sender has been closed and the queue is
drained. Closing the receiver makes every later ``send`` fail, which is how
producers learn that nobody is reading anymore.
"""

import queue
import threading
from typing import Iterator, Optional, Tuple


class SendFailed(Exception):
    """Raised by Sender.send when the receiver is closed."""
    pass


class ChannelClosed(Exception):
    """Raised by Receiver.recv when no more items will ever arrive."""
    pass


_CLOSED = object()

POLL_INTERVAL = 0.5


class _ChannelState:
    def __init__(self):
        self.items = queue.SimpleQueue()
        self.lock = threading.Lock()
        self.senders = 0
        self.receiver_closed = threading.Event()


class Sender:
    """Producer handle. Clone it for every additional producer."""

    def __init__(self, state: _ChannelState):
        self._state = state
        self._closed = False
        with state.lock:
            state.senders += 1

    def send(self, item: str) -> None:
        """
        Queue an item. Never blocks.

        Raises:
            SendFailed: If the receiver is closed or this sender was closed
        """
        if self._closed:
            raise SendFailed("sender is closed")
        if self._state.receiver_closed.is_set():
            raise SendFailed("receiver is closed")
        self._state.items.put(item)

    def clone(self) -> "Sender":
        if self._closed:
            raise SendFailed("cannot clone a closed sender")
        return Sender(self._state)

    def close(self) -> None:
        """Release this handle. The last one to close ends the channel."""
        if self._closed:
            return
        self._closed = True
        with self._state.lock:
            self._state.senders -= 1
            last = self._state.senders == 0
        if last:
            self._state.items.put(_CLOSED)

    def __enter__(self) -> "Sender":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Receiver:
    """Consumer handle. Only one thread may receive."""

    def __init__(self, state: _ChannelState):
        self._state = state
        self._done = False

    def recv(self, timeout: Optional[float] = None) -> str:
        """
        Take the next item in arrival order.

        Args:
            timeout: Seconds to wait, None to block until an item arrives

        Raises:
            ChannelClosed: If all senders are closed and the queue is drained,
                or the receiver was closed
            queue.Empty: If the timeout expired
        """
        if self._done or self._state.receiver_closed.is_set():
            self._done = True
            raise ChannelClosed()
        item = self._state.items.get(timeout=timeout)
        if item is _CLOSED:
            self._done = True
            raise ChannelClosed()
        return item

    def close(self) -> None:
        """Stop receiving. Pending items are dropped, later sends fail."""
        if self._state.receiver_closed.is_set():
            return
        self._state.receiver_closed.set()
        # wake a recv() blocked in another thread
        self._state.items.put(_CLOSED)

    def __iter__(self) -> Iterator[str]:
        while True:
            try:
                item = self.recv(timeout=POLL_INTERVAL)
            except queue.Empty:
                # lets KeyboardInterrupt through on every platform
                continue
            except ChannelClosed:
                return
            yield item


def open_channel() -> Tuple[Sender, Receiver]:
    """Create a channel and return its first sender and its receiver."""
    state = _ChannelState()
    return Sender(state), Receiver(state)
