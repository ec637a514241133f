"""The Dude - makes futures, tasks, lazy functions and task lists"""

import logging
import threading

from .futures import Future
from .decorate import make_lazy
from .tasks import CallStyle, Task

LOG = logging.getLogger(__name__)


class IdGenerator:
    """Always increasing task identifiers"""

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value


class Dude:
    """Factory for tasks sharing one identifier sequence"""

    def __init__(self, ids: IdGenerator = None, call_style=CallStyle.AUTO):
        self.ids = IdGenerator() if ids is None else ids
        self.call_style = CallStyle(call_style)

    def future(self) -> Future:
        return Future()

    def task(self, func, *args, **kwargs) -> Task:
        """Create a task calling func with the given arguments"""
        return self.task_with_style(self.call_style, func, *args, **kwargs)

    def task_with_style(self, call_style, func, *args, **kwargs) -> Task:
        task = Task(func, args, kwargs, task_id=self.ids(), call_style=call_style)
        LOG.debug("New task %d (%s)", task.id, task.call_style.value)
        return task

    def lazy(self, func_or_obj, call_style=None, names=None):
        """Make func_or_obj lazy (see make_lazy)"""
        if call_style is None:
            call_style = self.call_style
        return make_lazy(
            func_or_obj,
            lambda func, *args, **kwargs: self.task_with_style(
                call_style, func, *args, **kwargs
            ),
            names=names,
        )

    def task_list(self, options=None):
        from .tasklist import TaskList

        return TaskList(options, dude=self)


# Used by the module level functions in thedude, so that task identifiers are
# increasing across the whole process unless another Dude is used explicitly.
DEFAULT = Dude()
