"""One-way message channel between a training thread and its consumer.

``channel()`` returns a (Sender, Receiver) pair sharing a FIFO buffer guarded
by a lock and two condition variables. Disconnection is part of the protocol:

- When the Receiver is closed (explicitly, or because it was garbage
  collected) every subsequent ``Sender.send`` returns False. Training loops
  use this as their only cancellation signal.
- When every Sender is closed and the buffer is drained, receiving raises
  ``Disconnected``.

Senders can be cloned for multiple producers. Messages from one producer are
delivered in the order they were sent.
"""

import threading
import time
import weakref
from collections import deque
from typing import Any, Deque, Generic, Iterator, Optional, Tuple, TypeVar

from .errors import ConfigError, PhysicsRLError

T = TypeVar("T")

DEFAULT_CAPACITY = 100


class ChannelError(PhysicsRLError):
    """Base class for channel errors."""


class Empty(ChannelError):
    """No message is buffered right now (or a receive timed out)."""


class Disconnected(ChannelError):
    """The other side of the channel is gone and nothing is left to read."""


class _Channel:
    """Shared state behind a Sender/Receiver pair."""

    def __init__(self, capacity: Optional[int]):
        self.capacity = capacity
        self.buffer: Deque[Any] = deque()
        self.lock = threading.Lock()
        self.not_empty = threading.Condition(self.lock)
        self.not_full = threading.Condition(self.lock)
        self.senders = 0
        self.receiver_closed = False

    def send(self, message: Any) -> bool:
        with self.lock:
            while True:
                if self.receiver_closed:
                    return False
                if self.capacity is None or len(self.buffer) < self.capacity:
                    break
                self.not_full.wait()
            self.buffer.append(message)
            self.not_empty.notify()
            return True

    def _pop(self) -> Any:
        message = self.buffer.popleft()
        self.not_full.notify()
        return message

    def try_recv(self) -> Any:
        with self.lock:
            if self.receiver_closed:
                raise Disconnected("receiver is closed")
            if self.buffer:
                return self._pop()
            if self.senders == 0:
                raise Disconnected("all senders are closed")
            raise Empty()

    def recv(self, timeout: Optional[float]) -> Any:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self.lock:
            while True:
                if self.receiver_closed:
                    raise Disconnected("receiver is closed")
                if self.buffer:
                    return self._pop()
                if self.senders == 0:
                    raise Disconnected("all senders are closed")
                if deadline is None:
                    self.not_empty.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise Empty()
                    self.not_empty.wait(remaining)

    def pending(self) -> int:
        with self.lock:
            return len(self.buffer)

    def add_sender(self) -> None:
        with self.lock:
            self.senders += 1

    def close_sender(self) -> None:
        with self.lock:
            self.senders -= 1
            if self.senders == 0:
                self.not_empty.notify_all()

    def close_receiver(self) -> None:
        with self.lock:
            self.receiver_closed = True
            self.buffer.clear()
            # Wake producers blocked on a full buffer so their send fails.
            self.not_full.notify_all()
            self.not_empty.notify_all()


class Sender(Generic[T]):
    """Producing end of a channel."""

    def __init__(self, chan: _Channel):
        self._channel = chan
        chan.add_sender()
        self._finalizer = weakref.finalize(self, chan.close_sender)

    def send(self, message: T) -> bool:
        """Queue a message, blocking while a bounded channel is full.

        Returns:
            True if the message was queued, False if the receiver is gone.
        """
        if not self._finalizer.alive:
            raise ChannelError("send on a closed sender")
        return self._channel.send(message)

    def clone(self) -> "Sender[T]":
        """Another producer for the same channel."""
        if not self._finalizer.alive:
            raise ChannelError("cannot clone a closed sender")
        return Sender(self._channel)

    def close(self) -> None:
        """Release this producer. Idempotent."""
        self._finalizer()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def disconnected(self) -> bool:
        """Whether the receiving end has been closed."""
        return self._channel.receiver_closed

    def __enter__(self) -> "Sender[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class Receiver(Generic[T]):
    """Consuming end of a channel. Closing it (or dropping it) cancels producers."""

    def __init__(self, chan: _Channel):
        self._channel = chan
        self._finalizer = weakref.finalize(self, chan.close_receiver)

    def try_recv(self) -> T:
        """Pop one buffered message without blocking.

        Raises:
            Empty: nothing buffered, producers still alive.
            Disconnected: nothing buffered and no producer left, or the
                receiver was closed.
        """
        return self._channel.try_recv()

    def recv(self, timeout: Optional[float] = None) -> T:
        """Pop one message, waiting up to ``timeout`` seconds (forever if None).

        Raises:
            Empty: the timeout expired.
            Disconnected: no producer left and nothing buffered.
        """
        return self._channel.recv(timeout)

    def try_iter(self) -> Iterator[T]:
        """Yield the messages buffered right now, never blocking."""
        while True:
            try:
                yield self._channel.try_recv()
            except ChannelError:
                return

    def __iter__(self) -> Iterator[T]:
        """Yield messages until every sender is closed."""
        while True:
            try:
                yield self._channel.recv(None)
            except Disconnected:
                return

    @property
    def pending(self) -> int:
        """Number of messages currently buffered."""
        return self._channel.pending()

    def close(self) -> None:
        """Drop the receiving end. Pending messages are discarded. Idempotent."""
        self._finalizer()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def disconnected(self) -> bool:
        """Whether every sender has been closed."""
        return self._channel.senders == 0

    def __enter__(self) -> "Receiver[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def channel(capacity: Optional[int] = DEFAULT_CAPACITY) -> Tuple[Sender, Receiver]:
    """Create a connected (Sender, Receiver) pair.

    Args:
        capacity: Maximum number of buffered messages, None for unbounded.
            ``send`` blocks while a bounded channel is full.
    """
    if capacity is not None and capacity < 1:
        raise ConfigError(f"channel capacity must be at least 1, got {capacity}")
    chan = _Channel(capacity)
    return Sender(chan), Receiver(chan)
