"""Task argument trees

Arguments given to a task are converted into a small closed set of node types,
so that futures can be found (and later replaced by their values) at any depth:

- ArgValue: any plain value, opaque to the scan;
- ArgFuture: a Future, possibly resolved already;
- ArgList: a list or tuple of nodes;
- ArgDict: a dict of nodes (only values can hold futures).

Only exact list, tuple and dict types are entered. Subclasses (named tuples,
OrderedDicts...) and other objects are plain values.
"""

from typing import Iterator, List

from .exceptions import UnexpectedError
from .futures import Future


class ArgType:
    """Base class"""

    def futures(self) -> Iterator["ArgFuture"]:
        """Every future node in this tree, depth first"""
        return iter(())

    def to_py(self):
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__}>"


class ArgValue(ArgType):
    """A value with nothing to wait for"""

    def __init__(self, value):
        self.value = value

    def to_py(self):
        return self.value

    def __repr__(self):
        return f"<ArgValue {self.value!r}>"


class ArgFuture(ArgType):
    """Position of a future in the tree"""

    def __init__(self, future: Future):
        self.future = future
        self.resolved = False
        self.value = None

    def resolve(self, value):
        self.resolved = True
        self.value = value

    def futures(self):
        yield self

    def to_py(self):
        if not self.resolved:
            raise UnexpectedError(f"{self.future} has not been resolved")
        return self.value

    def __repr__(self):
        return f"<ArgFuture {self.future!r}>"


class ArgList(ArgType):
    """A list or a tuple"""

    def __init__(self, items: List[ArgType], kind=list):
        self.items = items
        self.kind = kind

    def futures(self):
        for item in self.items:
            yield from item.futures()

    def to_py(self):
        return self.kind(item.to_py() for item in self.items)

    def __repr__(self):
        return f"<ArgList {self.kind.__name__} {self.items}>"


class ArgDict(ArgType):
    """A dict"""

    def __init__(self, items: dict):
        self.items = items

    def futures(self):
        for item in self.items.values():
            yield from item.futures()

    def to_py(self):
        return {key: item.to_py() for key, item in self.items.items()}

    def __repr__(self):
        return f"<ArgDict {self.items}>"


### Type Conversion


def py_list_to_arg(lst) -> ArgList:
    """Recursively convert a list or tuple to ArgList"""
    return ArgList([to_arg_type(x) for x in lst], kind=type(lst))


def py_dict_to_arg(dct: dict) -> ArgDict:
    """Recursively convert dict to ArgDict"""
    return ArgDict({k: to_arg_type(v) for k, v in dct.items()})


PY_TO_ARG = {
    list: py_list_to_arg,
    tuple: py_list_to_arg,
    dict: py_dict_to_arg,
}


def to_arg_type(py_val) -> ArgType:
    if isinstance(py_val, Future):
        return ArgFuture(py_val)
    try:
        return PY_TO_ARG[type(py_val)](py_val)
    except KeyError:
        return ArgValue(py_val)
