"""Futures - values that will be available later"""

import logging
import threading

from .exceptions import FutureAlreadyResolved, FutureNotResolved

LOG = logging.getLogger(__name__)


class Future:
    """A write-once value cell, with callbacks run when the value arrives

    Example:

        f = Future()
        f.add_callback(print)
        f.done  # False
        f.set("hello world")  # prints "hello world"
        f.done  # True
        f.add_callback(print)  # prints "hello world" again, immediately
        f.set("goodbye world")  # raises FutureAlreadyResolved

    """

    def __init__(self):
        self.continuations = []
        self._resolved = False
        self._value = None
        self._lock = threading.RLock()

    @property
    def done(self) -> bool:
        """Whether set has been called"""
        return self._resolved

    @property
    def value(self):
        """The resolved value"""
        if not self._resolved:
            raise FutureNotResolved(
                "the future has no value yet",
                "Register a callback with add_callback to be given the value.",
            )
        return self._value

    def set(self, value):
        """Resolve the future, calling every waiting callback in order

        Raise FutureAlreadyResolved if the future is done already.
        """
        with self._lock:
            if self._resolved:
                raise FutureAlreadyResolved(
                    "future is already done", "A future can only be set once."
                )
            self._resolved = True
            self._value = value
            continuations = self.continuations
            self.continuations = []

        LOG.debug("Resolved %s. Continuations: %d", self, len(continuations))
        for callback in continuations:
            callback(value)

    def add_callback(self, callback):
        """Call callback with the value when the future is done

        If the future is done already, callback is called immediately.
        """
        with self._lock:
            if not self._resolved:
                self.continuations.append(callback)
                return
        callback(self._value)

    def __repr__(self):
        return f"<Future {id(self)} {self._resolved} ({self._value!r})>"
