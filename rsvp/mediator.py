"""
# RSVP Mediator

A channel-scoped request/response mediator. Components register responders on
a named channel; other components publish a payload on that channel and get
back a list holding every connected responder's return value, in the order the
responders were registered.

A single overloaded entry point, rsvp(), subscribes when given a callable and
publishes otherwise. subscribe() and publish() are the explicit spellings of
the same two operations.

Dispatch is synchronous and runs in the caller's stack frame. The registry is
a plain dict without locking; callers sharing one mediator between threads
must serialize access to it themselves.
"""

import json
import logging
import os
from typing import Any
from typing import Callable
from typing import Hashable
from typing import Optional
from typing import TypeVar
from typing import Union
from typing import overload

from rsvp import channels
from rsvp import contracts
from rsvp import handlers
from rsvp import identifiers
from rsvp import responder


logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class _Missing(object):
    """Marker for a publish made without any payload."""

    def __repr__(self) -> str:
        return "<no payload>"


MISSING = _Missing()


# -----Exceptions--------------------------------------------------------------
class RSVPError(Exception):
    """Base class for errors raised by the mediator."""


class InvalidChannelError(RSVPError, TypeError):
    """Raised when something other than a str or Channel is used as a channel."""


# -----------------------------------------------------------------------------


class RSVPMediator(object):
    """
    Primary request/response coordinator.

    Use rsvp(channel, handler) or subscribe() to register a responder, which
    returns a ResponderRef whose disconnect() removes it again.
    Use rsvp(channel, payload) or publish() to ask every responder on the
    channel and collect their answers.
    Use the @respond(channel) decorator to register plain functions.

    Args:
        id_factory (Optional[ID_FACTORY]): Zero-argument callable handing out
            responder identifiers. Defaults to random uuid4 strings.
    """

    def __init__(self, id_factory: Optional[identifiers.ID_FACTORY] = None) -> None:
        self._id_factory: identifiers.ID_FACTORY = (
            id_factory if id_factory is not None else identifiers.uuid4_factory
        )
        self._registry: dict[str, channels.ChannelEntry] = {}

    def __repr__(self) -> str:
        return (
            f"<RSVPMediator channels={len(self._registry)} "
            f"responders={self._total_responders()}>"
        )

    # -----Overloaded Entry Point----------------------------------------------

    @overload
    def rsvp(
        self, channel: contracts.CHANNEL, arg: responder.HANDLER
    ) -> responder.ResponderRef: ...

    @overload
    def rsvp(self, channel: contracts.CHANNEL, arg: Any = ...) -> list[Any]: ...

    def rsvp(self, channel, arg=MISSING):
        """
        Subscribe or publish, depending on the shape of arg.

        Args:
            channel (CHANNEL): Channel name or typed Channel.
            arg (Any): A callable registers it as a responder. Anything else,
                None included, is published as the payload. Leave it out to
                publish with no payload; handlers are then called without
                arguments.
        Returns:
            ResponderRef when subscribing, list of responses when publishing.
        Raises:
            InvalidChannelError: If channel is not a str or Channel.
            Exception: Whatever a responder raises while publishing.
        """
        if callable(arg):
            return self.subscribe(channel, arg)

        return self.publish(channel, arg)

    # -----Responder Management------------------------------------------------

    @overload
    def subscribe(
        self,
        channel: contracts.Channel[contracts.P, contracts.R],
        handler: Callable[..., contracts.R],
    ) -> responder.ResponderRef: ...

    @overload
    def subscribe(
        self, channel: str, handler: responder.HANDLER
    ) -> responder.ResponderRef: ...

    def subscribe(self, channel, handler):
        """
        Register handler as a responder on channel.

        The handler is not called here. The new responder is appended after
        every responder already on the channel.

        Args:
            channel (CHANNEL): Channel name or typed Channel.
            handler (HANDLER): Called with the payload on every publish.
        Returns:
            ResponderRef: Handle exposing the id and disconnect().
        Raises:
            InvalidChannelError: If channel is not a str or Channel.
            TypeError: If handler is not callable.
        """
        name = self._resolve_channel(channel)
        if not callable(handler):
            raise TypeError(
                f"Responder for channel '{name}' must be callable, "
                f"got {type(handler).__name__}"
            )

        responder_ = responder.Responder(
            id=self._id_factory(), handler=handler, channel=name
        )

        entry = self._ensure_channel_exists(name)
        entry["responders"].append(responder_)

        logger.debug(
            f"Responder {responder_.id!r} "
            f"({handlers.get_callable_name(handler)}) connected to '{name}'"
        )
        return responder.ResponderRef(responder_, self)

    def respond(self, channel: contracts.CHANNEL) -> Callable[[F], F]:
        """
        Decorator to register a function or static method as a responder.

        The function is returned unchanged, with its ResponderRef stored on
        the rsvp_ref attribute so it can be disconnected later.

        To register a bound method, use mediator.subscribe(channel, self.method).
        Callables that can't take the attribute raise AttributeError and are
        left unregistered.

        Args:
            channel (CHANNEL): The channel to answer on.
        """

        def decorator(func: F) -> F:
            ref = self.subscribe(channel, func)
            try:
                func.rsvp_ref = ref
            except AttributeError:
                # Bound methods, builtins and __slots__ objects take no
                # attributes; leave nothing registered without a handle.
                ref.disconnect()
                raise

            return func

        return decorator

    def disconnect(
        self, ref: Union[responder.ResponderRef, responder.Responder]
    ) -> bool:
        """
        Remove a single responder from its channel.

        Args:
            ref (ResponderRef | Responder): The responder to remove.
        Returns:
            bool: True if it was connected and is now removed, False if it had
                already been disconnected.
        """
        target = ref.responder if isinstance(ref, responder.ResponderRef) else ref
        entry = self._registry.get(target.channel)
        if entry is None:
            return False

        remaining = [r for r in entry["responders"] if r is not target]
        if len(remaining) == len(entry["responders"]):
            return False

        entry["responders"] = remaining
        self._cleanup_channel_if_empty(target.channel)

        logger.debug(f"Responder {target.id!r} disconnected from '{target.channel}'")
        return True

    def is_connected(self, responder_: responder.Responder) -> bool:
        """Check whether a responder is still registered."""
        entry = self._registry.get(responder_.channel)
        if entry is None:
            return False

        return any(r is responder_ for r in entry["responders"])

    def clear(self) -> None:
        """Disconnect every responder on every channel."""
        count = self._total_responders()
        self._registry.clear()
        logger.debug(f"Cleared {count} responder(s)")

    # -----Dispatch------------------------------------------------------------

    @overload
    def publish(
        self,
        channel: contracts.Channel[contracts.P, contracts.R],
        payload: contracts.P = ...,
    ) -> list[contracts.R]: ...

    @overload
    def publish(self, channel: str, payload: Any = ...) -> list[Any]: ...

    def publish(self, channel, payload=MISSING):
        """
        Ask every responder on channel and collect their responses.

        Responders are invoked synchronously in registration order. The set of
        responders is fixed when the call starts: responders added or removed
        by a handler during this publish only affect later publishes.

        Args:
            channel (CHANNEL): Channel name or typed Channel.
            payload (Any): Passed to each handler. Leave it out to call
                handlers with no arguments.
        Returns:
            list: One response per responder, in registration order. Empty if
                nobody is listening on the channel.
        Raises:
            InvalidChannelError: If channel is not a str or Channel.
            Exception: The first exception a handler raises. Remaining
                responders are skipped and no partial results are returned.
        """
        name = self._resolve_channel(channel)
        entry = self._registry.get(name)
        if entry is None:
            return []

        snapshot = list(entry["responders"])
        if payload is MISSING:
            results = [r.handler() for r in snapshot]
        else:
            results = [r.handler(payload) for r in snapshot]

        entry["publish_count"] += 1
        return results

    # -----Helpers-------------------------------------------------------------

    @staticmethod
    def _resolve_channel(channel: contracts.CHANNEL) -> str:
        """Return the channel name for a str or typed Channel."""
        if isinstance(channel, contracts.Channel):
            channel = channel.name

        if not isinstance(channel, str):
            raise InvalidChannelError(
                f"Channel must be a str or Channel, got {type(channel).__name__}"
            )

        return channel

    def _ensure_channel_exists(self, channel: str) -> channels.ChannelEntry:
        """Return the registry entry for channel, creating it if needed."""
        if channel not in self._registry:
            self._registry[channel] = {"responders": [], "publish_count": 0}

        return self._registry[channel]

    def _cleanup_channel_if_empty(self, channel: str) -> None:
        """Remove channel from registry if it has no responders."""
        entry = self._registry.get(channel)
        if entry is not None and not entry["responders"]:
            del self._registry[channel]

    def _total_responders(self) -> int:
        return sum(len(entry["responders"]) for entry in self._registry.values())

    # -----Introspection API---------------------------------------------------

    def get_channels(self) -> list[str]:
        """Get all channels that currently have responders."""
        return sorted(self._registry.keys())

    def channel_exists(self, channel: contracts.CHANNEL) -> bool:
        """Check if a channel currently has any responders."""
        return self._resolve_channel(channel) in self._registry

    def get_responder_count(self, channel: contracts.CHANNEL) -> int:
        """
        Get the number of responders on a channel.

        Args:
            channel (CHANNEL): Channel to count responders for.
        Returns:
            int: Number of connected responders, 0 for unknown channels.
        """
        entry = self._registry.get(self._resolve_channel(channel))
        return len(entry["responders"]) if entry is not None else 0

    def get_responders(self, channel: contracts.CHANNEL) -> list[responder.Responder]:
        """
        Get all responders on a channel, in registration order.

        Args:
            channel (CHANNEL): Channel to get responders for.
        Returns:
            list[responder.Responder]: A copy; changing it does not affect the
                registry.
        """
        entry = self._registry.get(self._resolve_channel(channel))
        return list(entry["responders"]) if entry is not None else []

    def get_responder_ids(self, channel: contracts.CHANNEL) -> list[Hashable]:
        """Get the identifiers of all responders on a channel, in order."""
        return [r.id for r in self.get_responders(channel)]

    def get_channel_info(
        self, channel: contracts.CHANNEL
    ) -> Optional[dict[str, object]]:
        """
        Get detailed information about a channel.

        Args:
            channel (CHANNEL): Channel to get info for.
        Returns:
            Optional[dict[str, object]]: Dictionary with channel details, or None
                if the channel has no responders.
        Example:
            {
                'channel': 'users.get',
                'responder_count': 2,
                'responder_ids': ['1', '2'],
                'handlers': ['primary_lookup', 'cache_lookup'],
                'publish_count': 5,
            }
        """
        name = self._resolve_channel(channel)
        if name not in self._registry:
            return None

        entry = self._registry[name]
        return {
            "channel": name,
            "responder_count": len(entry["responders"]),
            "responder_ids": [r.id for r in entry["responders"]],
            "handlers": [
                handlers.get_callable_name(r.handler) for r in entry["responders"]
            ],
            "publish_count": entry["publish_count"],
        }

    def get_statistics(self) -> dict[str, object]:
        """
        Get overall mediator statistics.

        Returns:
            dict[str, object]: Dictionary with mediator-wide statistics.
        Example:
            {
                "total_channels": 3,
                "total_responders": 7,
                "total_publishes": 12,
                "average_responders_per_channel": 2.33,
            }
        """
        channel_count = len(self._registry)
        total_responders = self._total_responders()

        return {
            "total_channels": channel_count,
            "total_responders": total_responders,
            "total_publishes": sum(
                entry["publish_count"] for entry in self._registry.values()
            ),
            "average_responders_per_channel": (
                total_responders / channel_count if channel_count > 0 else 0
            ),
        }

    @staticmethod
    def _get_handler_info(handler: responder.HANDLER) -> str:
        """
        Returns a module qualified name for a handler, for export.

        Unlike handlers.get_callable_name, which gives the short name used in
        log lines and channel info, exported names keep the module and
        qualname so handlers defined in different places stay distinguishable.
        """
        if hasattr(handler, "__self__") and hasattr(handler, "__name__"):
            return f"{handler.__self__.__class__.__name__}.{handler.__name__}"

        elif hasattr(handler, "__qualname__"):
            # Regular function, static method, or class method
            module = getattr(handler, "__module__", "<unknown>")
            return f"{module}.{handler.__qualname__}"

        # Fallback for unusual callables
        return str(handler)

    def to_dict(self) -> dict:
        """Convert the mediator structure to a dictionary."""
        data = {}
        for name in sorted(self._registry.keys()):
            data[name] = [
                f"{self._get_handler_info(r.handler)} [id={r.id}]"
                for r in self._registry[name]["responders"]
            ]

        return data

    def to_string(self) -> str:
        """Returns a string representation of the mediator."""
        return json.dumps(self.to_dict(), indent=4)

    def export(self, filepath: Union[str, os.PathLike]) -> None:
        """Export mediator structure to filepath."""
        with open(filepath, "w") as outfile:
            json.dump(self.to_dict(), outfile, indent=4)
