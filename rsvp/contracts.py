"""
Typed channel keys.

A Channel names a channel and carries its payload and response types for
static type checkers. At runtime it is nothing more than its name: the
mediator performs no validation of payloads or responses against it.

    >>> GetUser = Channel[UserQuery, User]("users.get")
    >>> mediator.subscribe(GetUser, lookup_user)
    >>> users = mediator.publish(GetUser, UserQuery(id=7))
"""

from dataclasses import dataclass
from typing import Generic
from typing import TypeVar
from typing import Union

P = TypeVar("P")
"""Payload type published on the channel."""

R = TypeVar("R")
"""Response type each responder returns."""


@dataclass(frozen=True)
class Channel(Generic[P, R]):
    """A channel name bound to its payload and response types."""

    name: str

    def __str__(self) -> str:
        return self.name


CHANNEL = Union[str, Channel]
"""Anything the mediator accepts as a channel."""
