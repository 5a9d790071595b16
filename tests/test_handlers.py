"""
Unit tests for handler wrappers.

The mediator lets a raising responder abort the publish. These wrappers are the
opt-in alternative: each turns a failure into a fallback response for that one
responder so the rest of the publish carries on.
"""

import logging

import pytest

import rsvp
from rsvp import handlers
from rsvp import identifiers


def _make_mediator() -> rsvp.RSVPMediator:
    return rsvp.RSVPMediator(id_factory=identifiers.counter_factory())


def _failing(payload: str) -> str:
    raise ValueError("Test exception")


def test_log_and_return_substitutes_default(caplog: pytest.LogCaptureFixture) -> None:
    """Test that a guarded failure is logged and replaced with the default."""
    caplog.set_level(logging.ERROR, logger="rsvp.handlers")
    mediator = _make_mediator()

    mediator.subscribe("status", lambda payload: "ok")
    mediator.subscribe("status", handlers.log_and_return(_failing, "unknown"))
    mediator.subscribe("status", lambda payload: "also ok")

    assert mediator.publish("status", "disk") == ["ok", "unknown", "also ok"]

    assert len(caplog.records) == 1
    message = caplog.records[0].getMessage()
    assert "_failing" in message
    assert "ValueError: Test exception" in message
    assert caplog.records[0].exc_info is not None


def test_silent_substitutes_default_without_logging(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test that the silent wrapper logs nothing."""
    caplog.set_level(logging.DEBUG, logger="rsvp.handlers")
    mediator = _make_mediator()

    mediator.subscribe("quiet", handlers.silent(_failing))
    mediator.subscribe("quiet", lambda payload: "fine")

    assert mediator.publish("quiet", "x") == [None, "fine"]
    assert caplog.records == []


def test_collecting_uses_module_list_by_default() -> None:
    """Test that collected failures land in handlers.exceptions_caught."""
    handlers.exceptions_caught.clear()
    mediator = _make_mediator()

    def failing_type(payload: str) -> str:
        raise TypeError("Second error")

    mediator.subscribe("batch", handlers.collecting(_failing, default="a"))
    mediator.subscribe("batch", handlers.collecting(failing_type, default="b"))

    assert mediator.publish("batch", "x") == ["a", "b"]

    assert len(handlers.exceptions_caught) == 2
    assert handlers.exceptions_caught[0]["handler"] == "_failing"
    assert "ValueError: Test exception" in handlers.exceptions_caught[0]["exception"]
    assert "TypeError: Second error" in handlers.exceptions_caught[1]["exception"]
    assert handlers.exceptions_caught[1]["exc_info"][0] is TypeError
    handlers.exceptions_caught.clear()


def test_collecting_into_caller_owned_sink() -> None:
    """Test that a provided sink is used instead of the module list."""
    handlers.exceptions_caught.clear()
    sink: list[dict] = []
    mediator = _make_mediator()

    mediator.subscribe("batch", handlers.collecting(_failing, sink=sink))
    mediator.publish("batch", "x")

    assert len(sink) == 1
    assert handlers.exceptions_caught == []


def test_wrapped_handler_passes_through_results() -> None:
    """Test that a wrapper is transparent when nothing goes wrong."""
    mediator = _make_mediator()

    def echo(payload: str) -> str:
        return payload

    guarded = handlers.log_and_return(echo)
    mediator.subscribe("echo", guarded)

    assert mediator.publish("echo", "hi") == ["hi"]
    assert guarded.__name__ == "echo"


def test_wrapped_handler_supports_no_payload() -> None:
    """Test that wrappers also work for channels published without payload."""
    mediator = _make_mediator()

    def ping() -> str:
        return "pong"

    def broken() -> str:
        raise RuntimeError("down")

    mediator.subscribe("ping", handlers.silent(ping))
    mediator.subscribe("ping", handlers.silent(broken, default="timeout"))

    assert mediator.publish("ping") == ["pong", "timeout"]


def test_wrappers_do_not_catch_base_exceptions() -> None:
    """Test that KeyboardInterrupt and friends still propagate."""
    mediator = _make_mediator()

    def interrupted(payload: str) -> str:
        raise KeyboardInterrupt()

    mediator.subscribe("stop", handlers.silent(interrupted))

    with pytest.raises(KeyboardInterrupt):
        mediator.publish("stop", "x")


def test_get_callable_name() -> None:
    """Test naming of functions, bound methods, lambdas and callable objects."""

    class Service:
        def handle(self, payload: str) -> None:
            pass

    class Callable_:
        def __call__(self) -> None:
            pass

        def __str__(self) -> str:
            return "callable-instance"

    def plain() -> None:
        pass

    assert handlers.get_callable_name(plain) == "plain"
    assert handlers.get_callable_name(Service().handle) == "Service.handle"
    assert handlers.get_callable_name(lambda: None) == "<lambda>"
    assert handlers.get_callable_name(Callable_()) == "callable-instance"
