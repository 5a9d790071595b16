"""
Responder data structures and type definitions for the mediator.

Defines the Responder dataclass which pairs a handler with its identifier and
channel, and the ResponderRef handle given back to whoever subscribed. The
mediator holds handlers strongly: a responder stays registered until it is
explicitly disconnected, whether or not the caller keeps the handle around.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable
from typing import Hashable

if TYPE_CHECKING:
    from rsvp.mediator import RSVPMediator


HANDLER = Callable[..., Any]
"""
The end point a published payload is forwarded to. Takes the payload as its
only argument, or no argument at all for channels published without one, and
returns the response that is collected for the publisher.
"""


@dataclass(frozen=True, eq=False)
class Responder(object):
    """
    A registered handler and its identifier.

    Compared by identity, so two responders are never confused even if an
    identifier factory hands out the same value twice.
    """

    id: Hashable
    """Opaque identifier assigned by the mediator's identifier factory."""

    handler: HANDLER
    """What gets ran when the channel is published to."""

    channel: str
    """The channel name the responder answers on."""


class ResponderRef(object):
    """
    Handle for a single subscription.

    States are Active and Disconnected. A handle starts Active and moves to
    Disconnected on disconnect(), or when the owning mediator is cleared.
    Disconnected is terminal; subscribe again to get a new responder.
    """

    __slots__ = ("_responder", "_mediator")

    def __init__(self, responder: Responder, mediator: "RSVPMediator") -> None:
        self._responder = responder
        self._mediator = mediator

    def __repr__(self) -> str:
        state = "active" if self.active else "disconnected"
        return (
            f"<ResponderRef id={self.id!r} channel={self.channel!r} {state}>"
        )

    @property
    def id(self) -> Hashable:
        """The identifier assigned at subscribe time."""
        return self._responder.id

    @property
    def channel(self) -> str:
        return self._responder.channel

    @property
    def responder(self) -> Responder:
        return self._responder

    @property
    def active(self) -> bool:
        """True until the responder has been disconnected."""
        return self._mediator.is_connected(self._responder)

    def disconnect(self) -> None:
        """
        Stop answering on the channel.
        Safe to call any number of times; only the first call has an effect.
        """
        self._mediator.disconnect(self)
