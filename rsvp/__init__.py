"""
# RSVP

Channel-scoped request/response mediator. One publish on a channel fans out to
every responder registered on it and gathers their return values into a list.

    >>> mediator = rsvp.RSVPMediator()
    >>> ref = mediator.rsvp("greeting", lambda name: f"hello {name}")
    >>> mediator.rsvp("greeting", "world")
    ['hello world']
    >>> ref.disconnect()
    >>> mediator.rsvp("greeting", "world")
    []

For a complete breakdown of the mediator, read rsvp.mediator.
"""

from rsvp import channels
from rsvp import contracts
from rsvp import handlers
from rsvp import identifiers
from rsvp import responder
from rsvp.contracts import Channel
from rsvp.mediator import MISSING
from rsvp.mediator import InvalidChannelError
from rsvp.mediator import RSVPError
from rsvp.mediator import RSVPMediator
from rsvp.responder import Responder
from rsvp.responder import ResponderRef


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

__all__ = [
    "Channel",
    "InvalidChannelError",
    "MISSING",
    "RSVPError",
    "RSVPMediator",
    "Responder",
    "ResponderRef",
    "channels",
    "contracts",
    "handlers",
    "identifiers",
    "responder",
]
