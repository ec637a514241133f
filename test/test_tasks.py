"""Test the task state machine"""
import pytest

import thedude
from thedude import CallStyle, Dude, IdGenerator, Status
from thedude.exceptions import (
    TaskAlreadyCanceled,
    TaskAlreadyRan,
    TaskCanceled,
    UsageError,
)
from thedude.futures import Future

from fakes import FakeLoop, Recorder


def outcomes():
    """A run callback recording (error, result) pairs"""
    got = []
    return got, lambda err, result: got.append((err, result))


def test_run():
    func = Recorder(result="ok")
    task = thedude.task(func, 1, 2)
    assert not func.called
    assert task.info().status == thedude.PROCRASTINATING
    got, callback = outcomes()
    task.run(callback)
    assert func.args == (1, 2)
    assert got == [(None, "ok")]
    assert task.info().status == thedude.DONE
    assert task.done


def test_run_without_callback():
    func = Recorder()
    task = thedude.task(func, x=1)
    task.run()
    assert func.kwargs == {"x": 1}
    assert task.status == Status.DONE


def test_run_with_future():
    func = Recorder()
    f = Future()
    task = thedude.task(func, "arg", f)
    task.run()
    assert not func.called
    assert task.status == Status.PROCRASTINATING
    assert task.waiting_on == [f]
    f.set(42)
    assert func.args == ("arg", 42)
    assert task.status == Status.DONE


def test_run_with_multiple_futures():
    func = Recorder()
    f1 = Future()
    f2 = Future()
    task = thedude.task(func, f1, f2)
    task.run()
    f1.set(0)
    assert not func.called
    f2.set(1)
    assert func.args == (0, 1)


def test_run_with_nested_futures():
    func = Recorder()
    f1 = Future()
    f2 = Future()
    task = thedude.task(func, {"params": [{"p1": f1}]}, [1, f2, 3], opt=(f1, "x"))
    task.run()
    f1.set("first-param")
    assert not func.called
    f2.set(2)
    assert func.args == ({"params": [{"p1": "first-param"}]}, [1, 2, 3])
    assert func.kwargs == {"opt": ("first-param", "x")}


def test_run_with_future_already_done():
    func = Recorder()
    f = Future()
    f.set("done!")
    task = thedude.task(func, f)
    assert task.waiting_on == []
    task.run()
    assert func.args == ("done!",)


def test_future_resolved_before_run():
    func = Recorder()
    f = Future()
    task = thedude.task(func, f)
    f.set(1)
    assert not func.called
    assert task.status == Status.PROCRASTINATING
    task.run()
    assert func.args == (1,)


def test_run_callback_style():
    loop = FakeLoop()
    task = None
    seen = []

    def cback():
        # Still running while the function's own callback runs
        seen.append(task.info().status)

    def func(callback):
        loop.call_later("cb", callback)
        return 42

    task = thedude.task(func, cback)
    got, callback = outcomes()
    task.run(callback)
    assert task.status == Status.RUNNING
    assert got == []

    loop.flush()
    assert seen == [Status.RUNNING]
    assert got == [(None, 42)]
    assert task.status == Status.DONE


def test_run_callback_style_receiving_args():
    loop = FakeLoop()
    seen = []

    def func(callback):
        loop.call_later("cb", callback, 42, 47)

    thedude.task(func, lambda a, b: seen.append((a, b))).run()
    loop.flush()
    assert seen == [(42, 47)]


def test_callback_called_before_returning():
    def func(x, callback):
        callback(x * 2)
        return "returned"

    seen = []
    got, callback = outcomes()
    thedude.task(func, 21, seen.append).run(callback)
    assert seen == [42]
    assert got == [(None, "returned")]


def test_callback_error():
    loop = FakeLoop()
    exc = ValueError("bad callback")

    def cback():
        raise exc

    def func(callback):
        loop.call_later("cb", callback)
        return "started"

    got, callback = outcomes()
    task = thedude.task(func, cback)
    task.run(callback)
    loop.flush()
    assert got == [(exc, "started")]
    assert task.status == Status.DONE


def test_function_error():
    exc = RuntimeError("boom")

    def func():
        raise exc

    got, callback = outcomes()
    task = thedude.task(func)
    task.run(callback)
    assert got == [(exc, None)]
    assert task.status == Status.DONE


def test_function_error_before_callback():
    exc = RuntimeError("boom")

    def func(callback):
        raise exc

    got, callback = outcomes()
    thedude.task(func, lambda: None).run(callback)
    assert got == [(exc, None)]


def test_sync_style_with_callable_argument():
    dude = Dude()

    def apply_later(fn):
        return fn

    got, callback = outcomes()
    dude.task_with_style(CallStyle.SYNC, apply_later, len).run(callback)
    assert got == [(None, len)]


def test_variadic_functions_are_sync():
    func = Recorder()
    got, callback = outcomes()
    thedude.task(func, 1, print).run(callback)
    assert func.args == (1, print)
    assert got == [(None, None)]


def test_callback_style_variadic():
    loop = FakeLoop()
    dude = Dude()

    def variadic(*args):
        loop.call_later("cb", args[-1], sum(args[:-1]))
        return "started"

    seen = []
    got, callback = outcomes()
    task = dude.task_with_style(CallStyle.CALLBACK, variadic, 1, 2, seen.append)
    task.run(callback)
    assert got == []
    loop.flush()
    assert seen == [3]
    assert got == [(None, "started")]


def test_callback_style_without_callback():
    dude = Dude(call_style="callback")
    got, callback = outcomes()
    dude.task(Recorder(), 1).run(callback)
    [(err, result)] = got
    assert isinstance(err, UsageError)
    assert result is None


def test_synchronize_tasks():
    loop = FakeLoop()
    fa, fb, fx = Future(), Future(), Future()
    result = {}

    def add(a, b):
        result["sum"] = a + b

    def multiply(x, y):
        fa.set(x * y)

    def number(f, num):
        def _number():
            loop.call_later("number", f.set, num)

        return _number

    task1 = thedude.task(add, fa, fb)
    thedude.task(multiply, fx, 10).run()
    thedude.task(number(fb, 2)).run()
    thedude.task(number(fx, 4)).run()
    got, callback = outcomes()
    task1.run(callback)
    assert got == []

    loop.flush()
    assert got == [(None, None)]
    assert result["sum"] == 42  # 4 * 10 + 2


def test_run_twice():
    func = Recorder()
    task = thedude.task(func, 1, 2)
    task.run()
    got, callback = outcomes()
    task.run(callback)
    [(err, result)] = got
    assert isinstance(err, TaskAlreadyRan)
    assert err.msg == "cannot run a task twice"
    assert result is None
    assert len(func.calls) == 1


def test_run_twice_while_waiting():
    func = Recorder()
    f = Future()
    task = thedude.task(func, f)
    task.run()
    got, callback = outcomes()
    task.run(callback)
    assert isinstance(got[0][0], TaskAlreadyRan)
    f.set(1)
    assert len(func.calls) == 1


def test_run_canceled_task():
    func = Recorder()
    task = thedude.task(func, 1, 2)
    task.cancel()
    got, callback = outcomes()
    task.run(callback)
    [(err, result)] = got
    assert isinstance(err, TaskAlreadyCanceled)
    assert err.msg == "cannot run a canceled task"
    assert result is None
    assert task.status == Status.CANCELED
    assert not func.called


def test_cancel():
    task = thedude.task(Recorder(), 1, 2)
    assert task.cancel() is True
    assert task.info().status == thedude.CANCELED


def test_cancel_while_waiting():
    func = Recorder()
    f = Future()
    task = thedude.task(func, "arg", f)
    got, callback = outcomes()
    task.run(callback)
    assert task.cancel() is True
    [(err, result)] = got
    assert isinstance(err, TaskCanceled)
    f.set(42)
    assert not func.called
    assert task.status == Status.CANCELED
    assert len(got) == 1


def test_cancel_before_future():
    func = Recorder()
    f = Future()
    task = thedude.task(func, f)
    task.cancel()
    f.set(1)
    assert not func.called


def test_cancel_failed():
    task = thedude.task(Recorder(), 1, 2)
    task.run()
    assert task.cancel() is False
    assert task.info().status == thedude.DONE


def test_cancel_while_running():
    seen = []
    task = None

    def func():
        seen.append(task.cancel())
        seen.append(task.status)

    task = thedude.task(func)
    task.run()
    assert seen == [False, Status.RUNNING]
    assert task.status == Status.DONE


def test_cancel_twice():
    task = thedude.task(Recorder(), 1, 2)
    task.cancel()
    with pytest.raises(TaskAlreadyCanceled):
        task.cancel()
    assert task.status == Status.CANCELED


def test_identifiers():
    task1 = thedude.task(Recorder())
    task2 = thedude.task(Recorder())
    assert task2.info().id == task1.info().id + 1


def test_identifiers_per_dude():
    dude = Dude(IdGenerator(start=10))
    ids = [dude.task(Recorder()).id for _ in range(3)]
    assert ids == [10, 11, 12]


def test_note():
    task = thedude.task(Recorder())
    assert task.info().notes == {}
    task.note({"name": "mytask", "description": "it does stuff"})
    assert task.info().notes == {"name": "mytask", "description": "it does stuff"}
    task.note({"args": [42, 47]}, description="another one")
    assert task.info().notes == {
        "name": "mytask",
        "description": "another one",
        "args": [42, 47],
    }


def test_notes_immutability():
    task = thedude.task(Recorder())
    notes = {"a": 1, "b": [2]}
    task.note(notes)
    notes["c"] = 3
    notes["b"].append(4)
    stored = task.info().notes
    assert stored == {"a": 1, "b": [2]}
    stored["c"] = 5
    stored["b"].append(6)
    assert task.info().notes == {"a": 1, "b": [2]}


def test_notes_roundtrip():
    task = thedude.task(Recorder())
    task.note({"a": 1})
    notes = task.info().notes
    notes["a"] = 2
    assert task.info().notes["a"] == 1


def test_notes_with_objects():
    class Thing:
        def __init__(self):
            self.items = [1]

    thing = Thing()
    task = thedude.task(Recorder())
    task.note(thing=thing)
    thing.items.append(2)
    assert task.info().notes["thing"].items == [1]


def test_info_serialise():
    dude = Dude(IdGenerator(start=7))
    task = dude.task(Recorder())
    task.note(name="x")
    assert task.info().serialise() == {
        "id": 7,
        "status": "procrastinating",
        "notes": {"name": "x"},
    }
