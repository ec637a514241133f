"""Lazy functions and objects

A lazy function returns a task instead of executing its body. Futures can be
passed to it as placeholders for values only available later.
"""

from collections.abc import Mapping
from functools import wraps
from types import SimpleNamespace


def make_lazy(func_or_obj, create_task, names=None):
    """Return the lazy counterpart of a function, mapping or object

    create_task(func, *args, **kwargs) is used to make the task for a call.

    - A callable gives a callable returning tasks.
    - A mapping gives a dict where callable values are made lazy, and other
      values are kept as they are.
    - Any other object gives a namespace with its public attributes, where
      methods are made lazy. Use names to only include some attributes.
    """

    def decorate(func):
        @wraps(func)
        def _lazy(*args, **kwargs):
            return create_task(func, *args, **kwargs)

        return _lazy

    if isinstance(func_or_obj, Mapping):
        return {
            name: decorate(value) if callable(value) else value
            for name, value in func_or_obj.items()
        }

    if callable(func_or_obj):
        return decorate(func_or_obj)

    if names is None:
        names = [name for name in dir(func_or_obj) if not name.startswith("_")]

    attrs = {}
    for name in names:
        try:
            value = getattr(func_or_obj, name)
        except AttributeError:
            # e.g. a property that cannot be computed right now
            continue
        attrs[name] = decorate(value) if callable(value) else value
    return SimpleNamespace(**attrs)
