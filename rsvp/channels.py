"""
Channel registry data structures for the mediator.

Defines the ChannelEntry TypedDict that represents one channel in a mediator's
internal registry. A channel exists in the registry while it has at least one
connected responder.
"""

from typing import TypedDict

from rsvp import responder


class ChannelEntry(TypedDict):
    """Entry for a channel in the registry."""

    responders: list[responder.Responder]
    """Connected responders, in registration order."""

    publish_count: int
    """
    How many publishes on the channel completed while it had responders.
    A publish aborted by a raising handler is not counted.
    """
