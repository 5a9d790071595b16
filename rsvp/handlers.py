"""
Handler wrappers for isolating responder failures.

The mediator itself never catches anything: a responder that raises aborts the
publish and the exception reaches the publisher. Applications that would rather
have a misbehaving responder contribute a fallback value wrap the handler with
one of these before subscribing it:

    mediator.subscribe("status", handlers.log_and_return(check_disk, "unknown"))

Built-in policies log and substitute a default (log_and_return), substitute
silently (silent), or record the failure into a list for batch processing
(collecting).
"""

import functools
import logging
import sys
from typing import Any
from typing import Callable
from typing import Optional

from rsvp import responder


logger = logging.getLogger(__name__)


def get_callable_name(callable_: Callable) -> str:
    """
    Returns the name of the callable, using class name for items with __self__,
    __name__ for anything with __name__, or str(callback) if neither are found.
    """
    if hasattr(callable_, "__self__") and hasattr(callable_, "__name__"):
        return f"{callable_.__self__.__class__.__name__}.{callable_.__name__}"
    elif hasattr(callable_, "__name__"):
        return callable_.__name__
    else:
        return str(callable_)


def _guard(
    handler: responder.HANDLER,
    default: Any,
    on_exception: Callable[[responder.HANDLER, Exception], None],
) -> responder.HANDLER:
    @functools.wraps(handler)
    def guarded(*args: Any) -> Any:
        try:
            return handler(*args)
        except Exception as e:
            on_exception(handler, e)
            return default

    return guarded


# -----Policies----------------------------------------------------------------


def log_and_return(
    handler: responder.HANDLER, default: Any = None
) -> responder.HANDLER:
    """
    Wrap a handler so a raised exception is logged and default is returned as
    its response instead.
    """

    def log(handler_: responder.HANDLER, exception: Exception) -> None:
        logger.error(
            f"Exception in rsvp responder:\n"
            f"  Handler:   {get_callable_name(handler_)}\n"
            f"  Exception: {exception.__class__.__name__}: {exception}",
            exc_info=True,
        )

    return _guard(handler, default, log)


def silent(handler: responder.HANDLER, default: Any = None) -> responder.HANDLER:
    """Wrap a handler so any exception is ignored and default returned."""
    return _guard(handler, default, lambda _, __: None)


exceptions_caught = []


def collecting(
    handler: responder.HANDLER,
    default: Any = None,
    sink: Optional[list] = None,
) -> responder.HANDLER:
    """
    Wrap a handler so exceptions are appended to sink and default returned.

    sink defaults to rsvp.handlers.exceptions_caught, a module level list.
    Either manage that list manually or pass a list owned by the caller.
    """
    target = exceptions_caught if sink is None else sink

    def collect(handler_: responder.HANDLER, exception: Exception) -> None:
        target.append(
            {
                "handler": get_callable_name(handler_),
                "exception": f"{exception.__class__.__name__}: {exception}",
                "exc_info": sys.exc_info(),
            }
        )

    return _guard(handler, default, collect)
