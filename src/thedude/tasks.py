"""Tasks - deferred function calls"""

import copy
import inspect
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import List

from .args import ArgFuture, to_arg_type
from .exceptions import (
    TaskAlreadyCanceled,
    TaskAlreadyRan,
    TaskCanceled,
    UsageError,
)
from .futures import Future

LOG = logging.getLogger(__name__)


class Status(str, Enum):
    """Task statuses: procrastinating -> running -> done, or canceled"""

    # Not started yet. A task may be procrastinating even after run has been
    # called, while it waits for its futures.
    PROCRASTINATING = "procrastinating"
    RUNNING = "running"
    CANCELED = "canceled"
    DONE = "done"

    def __str__(self):
        return self.value


class CallStyle(str, Enum):
    """How a task function signals its completion

    - SYNC: the function is complete when it returns;
    - CALLBACK: the last positional argument is a completion callback, and the
      function is complete when that callback has been called;
    - AUTO: CALLBACK if the argument at the last declared positional parameter
      is callable, SYNC otherwise. Functions taking *args are always SYNC here.
    """

    AUTO = "auto"
    SYNC = "sync"
    CALLBACK = "callback"


@dataclass(frozen=True)
class TaskInfo:
    id: int
    status: Status
    notes: dict

    def serialise(self) -> dict:
        return dict(id=self.id, status=self.status.value, notes=clone_note(self.notes))


def _clone_dict(dct: dict) -> dict:
    return {k: clone_note(v) for k, v in dct.items()}


def _clone_items(items):
    return type(items)(clone_note(v) for v in items)


NOTE_CLONERS = {
    dict: _clone_dict,
    list: _clone_items,
    tuple: _clone_items,
    set: _clone_items,
    frozenset: _clone_items,
}

NOTE_ATOMS = (type(None), bool, int, float, complex, str, bytes)


def clone_note(value):
    """Deep copy a note value"""
    if type(value) in NOTE_ATOMS:
        return value
    try:
        return NOTE_CLONERS[type(value)](value)
    except KeyError:
        return copy.deepcopy(value)


def _ignore(error, result):
    pass


def callback_position(func, args) -> int:
    """Guess the position of the completion callback of func in args

    Return None when func looks synchronous.
    """
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return None
    count = 0
    for param in params:
        if param.kind == param.VAR_POSITIONAL:
            return None
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            count += 1
    index = count - 1
    if 0 <= index < len(args) and callable(args[index]):
        return index
    return None


class _Completion:
    """Stands in for the completion callback of a callback-style function

    The task is done once the function has both returned and called back.
    """

    def __init__(self, task, callback):
        self.task = task
        self.callback = callback
        self.result = None
        self.error = None
        self.has_returned = False
        self.called_back = False
        self.finished = False
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        error = None
        try:
            self.callback(*args, **kwargs)
        except Exception as exc:
            LOG.warning("Task %d completion callback failed: %s", self.task.id, exc)
            error = exc
        with self._lock:
            if self.called_back:
                LOG.warning("Task %d called back more than once", self.task.id)
                return
            self.called_back = True
            self.error = error
        self._maybe_finish()

    def returned(self, result):
        with self._lock:
            self.has_returned = True
            self.result = result
        self._maybe_finish()

    def failed(self, exc):
        with self._lock:
            if self.finished:
                return
            self.finished = True
        self.task._finish(exc, None)

    def _maybe_finish(self):
        with self._lock:
            if self.finished or not (self.has_returned and self.called_back):
                return
            self.finished = True
        self.task._finish(self.error, self.result)


class Task:
    """A single, deferred, execution of a function

    Any Future found in the arguments (also inside lists, tuples and dicts) is
    waited for, and replaced by its value, before calling the function.
    """

    def __init__(self, func, args=(), kwargs=None, *, task_id: int, call_style=CallStyle.AUTO):
        self.func = func
        self.id = task_id
        self.call_style = CallStyle(call_style)

        self._status = Status.PROCRASTINATING
        self._called = False
        self._notes = {}
        self._callback = None
        self._lock = threading.RLock()

        self._args = to_arg_type(tuple(args))
        self._kwargs = to_arg_type(dict(kwargs or {}))
        self._waiting = list(self._args.futures()) + list(self._kwargs.futures())
        # Futures already done resolve straight away
        for node in list(self._waiting):
            node.future.add_callback(partial(self._resolved, node))

    @property
    def status(self) -> Status:
        return self._status

    @property
    def done(self) -> bool:
        return self._status == Status.DONE

    @property
    def waiting_on(self) -> List[Future]:
        """Futures this task is still waiting for"""
        with self._lock:
            return [node.future for node in self._waiting]

    def run(self, callback=None):
        """Run the task

        callback, if given, is called with (error, result) when the execution
        completes. For callback-style functions this happens after the
        function's own callback is called. Running a task twice, or running a
        canceled task, is reported to callback with TaskAlreadyRan or
        TaskAlreadyCanceled.
        """
        if callback is None:
            callback = _ignore
        with self._lock:
            if self._called:
                error = TaskAlreadyRan(
                    "cannot run a task twice",
                    "Create a new task to call the function again.",
                )
            elif self._status == Status.CANCELED:
                error = TaskAlreadyCanceled("cannot run a canceled task")
            else:
                error = None
                self._called = True
                self._callback = callback

        if error:
            LOG.warning("Task %d: %s", self.id, error.msg)
            callback(error, None)
            return

        LOG.debug("Task %d asked to run (waiting on %d)", self.id, len(self._waiting))
        self._maybe_execute()

    def cancel(self) -> bool:
        """Try to cancel the task, returning whether it succeeded

        Only a procrastinating task can be canceled. Raise TaskAlreadyCanceled
        if the task was canceled already.
        """
        with self._lock:
            if self._status == Status.CANCELED:
                raise TaskAlreadyCanceled(
                    f"cannot cancel a task twice: {self.info().serialise()}"
                )
            if self._status != Status.PROCRASTINATING:
                return False
            self._status = Status.CANCELED
            callback = self._callback
            self._callback = None

        LOG.debug("Task %d canceled", self.id)
        if callback:
            # Someone ran the task and is still waiting for it
            callback(TaskCanceled("task canceled while waiting for its futures"), None)
        return True

    def note(self, notes: dict = None, **kwargs):
        """Add annotations (key/value pairs) to the task"""
        notes = dict(notes or {}, **kwargs)
        with self._lock:
            self._notes.update(clone_note(notes))

    def info(self) -> TaskInfo:
        with self._lock:
            return TaskInfo(id=self.id, status=self._status, notes=clone_note(self._notes))

    ##

    def _resolved(self, node: ArgFuture, value):
        with self._lock:
            node.resolve(value)
            self._waiting.remove(node)
        self._maybe_execute()

    def _maybe_execute(self):
        with self._lock:
            if not self._called or self._waiting:
                return
            if self._status != Status.PROCRASTINATING:
                return
            self._status = Status.RUNNING

        args = list(self._args.to_py())
        kwargs = self._kwargs.to_py()
        LOG.debug("Task %d running %s", self.id, getattr(self.func, "__name__", self.func))

        if self.call_style == CallStyle.SYNC:
            index = None
        elif self.call_style == CallStyle.CALLBACK:
            index = len(args) - 1
            if index < 0 or not callable(args[index]):
                self._finish(
                    UsageError(
                        "callback-style task has no completion callback",
                        "Pass the callback as the last positional argument.",
                    ),
                    None,
                )
                return
        else:
            index = callback_position(self.func, args)

        if index is None:
            self._call(args, kwargs)
        else:
            self._call_with_callback(args, kwargs, index)

    def _call(self, args, kwargs):
        try:
            result = self.func(*args, **kwargs)
        except Exception as exc:
            LOG.warning("Task %d failed: %s", self.id, exc)
            self._finish(exc, None)
            return
        self._finish(None, result)

    def _call_with_callback(self, args, kwargs, index):
        completion = _Completion(self, args[index])
        args[index] = completion
        try:
            result = self.func(*args, **kwargs)
        except Exception as exc:
            LOG.warning("Task %d failed: %s", self.id, exc)
            completion.failed(exc)
            return
        completion.returned(result)

    def _finish(self, error, result):
        with self._lock:
            self._status = Status.DONE
            callback = self._callback
            self._callback = None
        LOG.debug("Task %d done (error: %s)", self.id, error)
        callback(error, result)

    def __repr__(self):
        return f"<Task {self.id} {self._status.value}>"
