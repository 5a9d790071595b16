"""
Identifier factories for responders.

Every responder receives an opaque identifier at registration time. The
mediator only ever compares identifiers for equality, so any zero-argument
callable returning a fresh hashable value can be injected.
"""

import itertools
import uuid
from typing import Callable
from typing import Hashable


ID_FACTORY = Callable[[], Hashable]
"""
Zero-argument callable producing a fresh responder identifier on each call.
Values must be unique for the lifetime of the mediator they are injected into.
"""


def uuid4_factory() -> str:
    """Default factory, a random uuid4 rendered as a string."""
    return str(uuid.uuid4())


def counter_factory(prefix: str = "", start: int = 1) -> ID_FACTORY:
    """
    Create a deterministic factory yielding '<prefix><n>' for n = start, ...

    Useful in tests and anywhere reproducible identifiers are preferable to
    random ones.

    Args:
        prefix (str): Text placed before each number.
        start (int): The first number handed out.
    Returns:
        ID_FACTORY: A new, independent counter.
    Example:
        >>> next_id = counter_factory("responder-")
        >>> next_id(), next_id()
        ('responder-1', 'responder-2')
    """
    counter = itertools.count(start)

    def next_id() -> str:
        return f"{prefix}{next(counter)}"

    return next_id
