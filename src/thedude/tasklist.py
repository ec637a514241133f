"""Task lists - tasks to be executed together"""

import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, List

from .config_classes import TaskListConfig
from .dude import DEFAULT, Dude
from .decorate import make_lazy
from .tasks import Status, Task

LOG = logging.getLogger(__name__)


@dataclass
class TaskResult:
    """Outcome of one task in a TaskList run"""

    task: Task
    error: Any
    result: Any


def _ignore_change(error, result, task):
    pass


def _ignore_done(results):
    pass


class TaskList:
    """A list of tasks to be executed together

    Tasks are added explicitly with add, or by calling functions made lazy with
    TaskList.lazy.
    """

    def __init__(self, options=None, *, dude: Dude = None):
        if options is None:
            options = TaskListConfig()
        elif isinstance(options, dict):
            options = TaskListConfig(**options)
        self.options = options
        self.dude = DEFAULT if dude is None else dude
        self._tasks = []
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self.options.name

    def add(self, task: Task):
        with self._lock:
            self._tasks.append(task)

    def lazy(self, func_or_obj, call_style=None, names=None):
        """Make func_or_obj lazy, adding the tasks it creates to this list"""
        if call_style is None:
            call_style = self.options.call_style

        def create(func, *args, **kwargs):
            task = self.dude.task_with_style(call_style, func, *args, **kwargs)
            self.add(task)
            return task

        return make_lazy(func_or_obj, create, names=names)

    def as_array(self) -> List[Task]:
        """A copy of the tasks in this list"""
        with self._lock:
            return list(self._tasks)

    def clear(self):
        """Remove all tasks from the list, leaving the tasks as they are"""
        with self._lock:
            self._tasks = []

    def __len__(self):
        return len(self._tasks)

    def __iter__(self):
        return iter(self.as_array())

    def run(self, on_each=None, on_all=None):
        """Run all tasks in this list

        on_each(error, result, task) is called every time a task completes, in
        completion order. on_all(results) is called once every task of this
        run completed, with a TaskResult for each of them. Canceled tasks are
        dropped from the list and not run.
        """
        if on_each is None:
            on_each = _ignore_change
        if on_all is None:
            on_all = _ignore_done

        with self._lock:
            tasks = self._tasks
            snapshot = list(tasks)

        to_run = []
        for task in snapshot:
            if task.status == Status.CANCELED:
                self._discard(tasks, task)
            else:
                to_run.append(task)

        LOG.info(
            "%s: running %d tasks (%d canceled)",
            self.name,
            len(to_run),
            len(snapshot) - len(to_run),
        )
        if not to_run:
            on_all([])
            return

        results = []
        remaining = len(to_run)

        def settled(task, error, result):
            nonlocal remaining
            with self._lock:
                results.append(TaskResult(task=task, error=error, result=result))
                self._discard(tasks, task)
                remaining -= 1
                finished = remaining == 0
            if error is not None:
                LOG.info("%s: task %d failed: %s", self.name, task.id, error)
            on_each(error, result, task)
            if finished:
                LOG.info("%s: all %d tasks completed", self.name, len(results))
                on_all(list(results))

        for task in to_run:
            task.run(partial(settled, task))

    def _discard(self, tasks: list, task: Task):
        with self._lock:
            if task in tasks:
                tasks.remove(task)

    def __repr__(self):
        return f"<TaskList {self.name} ({len(self._tasks)} tasks)>"
