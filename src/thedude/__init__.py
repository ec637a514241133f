"""Defer the execution of functions

Collect calls as tasks to be executed later, and synchronize them with
futures, so that a task only runs when all of its arguments are available.
"""

from .dude import DEFAULT as _DEFAULT
from .dude import Dude, IdGenerator
from .exceptions import (
    ConfigError,
    DudeError,
    FutureAlreadyResolved,
    FutureNotResolved,
    TaskAlreadyCanceled,
    TaskAlreadyRan,
    TaskCanceled,
    UnexpectedError,
    UsageError,
)
from .futures import Future
from .tasks import CallStyle, Status, Task, TaskInfo
from .tasklist import TaskList, TaskResult

__version__ = "0.1.0"

PROCRASTINATING = Status.PROCRASTINATING
RUNNING = Status.RUNNING
CANCELED = Status.CANCELED
DONE = Status.DONE


def future() -> Future:
    """A value that will be available in the future"""
    return _DEFAULT.future()


def task(func, *args, **kwargs) -> Task:
    """A task representing a call of func with the given arguments

    Arguments can be futures, also nested in lists, tuples and dicts: the task
    waits for them before calling func. If the argument at the last parameter
    of func is callable, it is taken as a completion callback (see CallStyle).
    """
    return _DEFAULT.task(func, *args, **kwargs)


def lazy(func_or_obj, call_style=None, names=None):
    """The lazy counterpart of a function, mapping or object

    Calling a lazy function returns a task rather than executing it.
    """
    return _DEFAULT.lazy(func_or_obj, call_style=call_style, names=names)


def task_list(options=None) -> TaskList:
    """A new, empty, task list"""
    return _DEFAULT.task_list(options)
