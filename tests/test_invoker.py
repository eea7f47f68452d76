import asyncio
from unittest.mock import MagicMock

import pytest

from shellcore.commands import CONTINUE, QUIT, Command, quit_with
from shellcore.exceptions import CommandError, ProtocolError
from shellcore.interface.errors import ErrorHandlerGroup, ExactCode, Fallback
from shellcore.interface.invoker import (
    DispatchContext,
    current_dispatch,
    invoke_command,
    spawn,
)
from shellcore.interface.loop import run_loop

from conftest import ScriptedReader, make_session


def _recording_session():
    """Session whose only handler group records every routed error."""
    routed = []

    def record(error, session):
        routed.append(error)

    group = ErrorHandlerGroup(Exception, fallback=Fallback(record))
    return make_session(error_handlers=[group]), routed


def test_comment_names_skip_registry_lookup():
    session = make_session()
    session.commands = MagicMock()

    for name in ("#", "#note", "   # spaced", "\t#tab"):
        assert asyncio.run(invoke_command(session, name, ["ignored"])) is CONTINUE

    session.commands.get.assert_not_called()


def test_unknown_command_writes_one_diagnostic_and_shows_help_on_stderr(session):
    help_spy = MagicMock(return_value=None)
    session.commands.register(Command(name="help", callback=help_spy), replace=True)

    result = asyncio.run(invoke_command(session, "frobnicate", ["x"]))

    assert result is CONTINUE
    stderr = session.stderr.getvalue()
    assert stderr.splitlines()[0] == "Invalid command: frobnicate"
    assert stderr.count("Invalid command") == 1
    help_spy.assert_called_once_with(session, ["--stderr"])
    assert session.stdout.getvalue() == ""


def test_unknown_command_lists_commands_on_stderr(session):
    asyncio.run(invoke_command(session, "nope", []))

    stderr = session.stderr.getvalue()
    assert "Invalid command: nope" in stderr
    assert "help" in stderr and "quit" in stderr
    assert session.stdout.getvalue() == ""


def test_sync_command_receives_session_and_args(session):
    callback = MagicMock(return_value=None)
    session.commands.register(Command(name="echo", callback=callback))

    assert asyncio.run(invoke_command(session, "echo", ["a", "b"])) is CONTINUE
    callback.assert_called_once_with(session, ["a", "b"])


def test_command_signal_is_returned(session):
    session.commands.register(Command(name="bye", callback=lambda s, a: quit_with(4)))
    assert asyncio.run(invoke_command(session, "bye", [])) == quit_with(4)


def test_text_results_are_written_to_stdout(session):
    session.commands.register(Command(name="greet", callback=lambda s, a: f"hello {a[0]}"))
    asyncio.run(invoke_command(session, "greet", ["ann"]))
    assert session.stdout.getvalue() == "hello ann\n"


def test_coroutine_commands_are_awaited(session):
    async def slow(session, args):
        await asyncio.sleep(0)
        return QUIT

    session.commands.register(Command(name="slow", callback=slow))
    assert asyncio.run(invoke_command(session, "slow", [])) is QUIT


def test_sync_error_is_routed_to_resolver():
    session, routed = _recording_session()
    error = CommandError("nope", code="EX")

    def failing(session, args):
        raise error

    session.commands.register(Command(name="fail", callback=failing))
    assert asyncio.run(invoke_command(session, "fail", [])) is CONTINUE
    assert routed == [error]


def test_error_raised_while_awaiting_is_routed():
    session, routed = _recording_session()

    async def failing(session, args):
        await asyncio.sleep(0)
        raise CommandError("late", code="ELATE")

    session.commands.register(Command(name="fail", callback=failing))
    asyncio.run(invoke_command(session, "fail", []))
    assert [e.code for e in routed] == ["ELATE"]


def test_error_from_spawned_continuation_after_return_is_routed():
    session, routed = _recording_session()
    finished = []

    async def later():
        await asyncio.sleep(0.01)
        raise CommandError("deferred", code="EDEFER")

    def starts_work(session, args):
        spawn(later())
        finished.append("returned")

    session.commands.register(Command(name="bg", callback=starts_work))
    assert asyncio.run(invoke_command(session, "bg", [])) is CONTINUE
    assert finished == ["returned"]
    assert [e.code for e in routed] == ["EDEFER"]


def test_invocation_waits_for_spawned_continuations(session):
    events = []

    async def later():
        await asyncio.sleep(0.01)
        events.append("continuation")

    async def nested_parent():
        await asyncio.sleep(0)
        spawn(later())

    def starts_work(session, args):
        spawn(nested_parent())
        events.append("primary")

    session.commands.register(Command(name="bg", callback=starts_work))
    asyncio.run(invoke_command(session, "bg", []))
    assert events == ["primary", "continuation"]


def test_only_first_error_is_routed_and_rest_is_cancelled():
    session, routed = _recording_session()
    cancelled = []

    async def fails_fast():
        await asyncio.sleep(0)
        raise CommandError("first", code="EFIRST")

    async def fails_slow():
        try:
            await asyncio.sleep(1)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise
        raise CommandError("second", code="ESECOND")

    def starts_work(session, args):
        spawn(fails_slow())
        spawn(fails_fast())

    session.commands.register(Command(name="bg", callback=starts_work))
    asyncio.run(invoke_command(session, "bg", []))
    assert [e.code for e in routed] == ["EFIRST"]
    assert cancelled == [True]


def test_cancelled_continuations_unwind_before_the_next_line():
    session, routed = _recording_session()
    events = []

    async def slow():
        try:
            await asyncio.sleep(1)
        finally:
            events.append("cleanup")

    async def fails_fast():
        await asyncio.sleep(0)
        raise CommandError("boom", code="EBOOM")

    def starts_work(session, args):
        spawn(slow())
        spawn(fails_fast())

    def after(session, args):
        events.append("after")

    session.commands.register(Command(name="bg", callback=starts_work))
    session.commands.register(Command(name="after", callback=after))
    reader = ScriptedReader(["bg", "after", "quit"])

    assert asyncio.run(run_loop(session, reader=reader)) is None
    assert events == ["cleanup", "after"]
    assert [e.code for e in routed] == ["EBOOM"]


def test_cancelled_continuations_are_done_when_invocation_returns():
    session, routed = _recording_session()
    tasks = []

    async def slow():
        await asyncio.sleep(1)

    async def fails_fast():
        await asyncio.sleep(0)
        raise CommandError("boom")

    def starts_work(session, args):
        tasks.append(spawn(slow()))
        spawn(fails_fast())

    async def scenario():
        await invoke_command(session, "bg", [])
        return tasks[0].cancelled()

    session.commands.register(Command(name="bg", callback=starts_work))
    assert asyncio.run(scenario()) is True


def test_handler_signal_becomes_invocation_result():
    group = ErrorHandlerGroup(CommandError, exact=[ExactCode("EFATAL", lambda e, s: QUIT)])
    session = make_session(error_handlers=[group])

    def failing(session, args):
        raise CommandError("stop", code="EFATAL")

    session.commands.register(Command(name="fail", callback=failing))
    assert asyncio.run(invoke_command(session, "fail", [])) is QUIT


def test_unhandled_error_propagates():
    session = make_session(error_handlers=[])

    def buggy(session, args):
        return 1 / 0

    session.commands.register(Command(name="buggy", callback=buggy))
    with pytest.raises(ZeroDivisionError):
        asyncio.run(invoke_command(session, "buggy", []))


def test_keyboard_interrupt_is_not_captured():
    session, routed = _recording_session()

    def interrupted(session, args):
        raise KeyboardInterrupt

    session.commands.register(Command(name="ki", callback=interrupted))
    with pytest.raises(KeyboardInterrupt):
        asyncio.run(invoke_command(session, "ki", []))
    assert routed == []


def test_dispatch_is_only_visible_during_the_command(session):
    seen = []
    session.commands.register(Command(name="peek", callback=lambda s, a: seen.append(current_dispatch())))

    async def scenario():
        before = current_dispatch()
        await invoke_command(session, "peek", [])
        return before, current_dispatch()

    before, after = asyncio.run(scenario())
    assert before is None and after is None
    assert isinstance(seen[0], DispatchContext)
    assert seen[0].command_name == "peek"


def test_spawn_outside_dispatch_is_a_protocol_error():
    async def work():
        return None

    async def scenario():
        with pytest.raises(ProtocolError):
            spawn(work())

    asyncio.run(scenario())


def test_second_report_is_ignored():
    dispatch = DispatchContext("demo")
    first, second = CommandError("one"), CommandError("two")

    assert dispatch.report(first) is True
    assert dispatch.report(second) is False
    assert dispatch.error is first


def test_report_after_close_is_ignored():
    dispatch = DispatchContext("demo")
    asyncio.run(dispatch.close())
    assert dispatch.report(CommandError("late")) is False
    assert dispatch.error is None
