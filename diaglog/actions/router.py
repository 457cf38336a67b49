"""Routing of share/save requests to diagnostics channels.

This is the only way user-facing glue (notification buttons, the CLI) reaches
the logging core. A request names an action and, optionally, a stream; an
absent or unknown stream falls back to the default stream instead of failing.
"""

import logging
from enum import Enum
from typing import Mapping, Optional, Union

from diaglog.channels.registry import ChannelRegistry
from diaglog.channels.streams import DEFAULT_STREAM, DiagnosticsStream
from diaglog.export.result import ExportResult

logger = logging.getLogger(__name__)

EXTRA_STREAM = "diaglog.extra.STREAM"


class Action(str, Enum):
    """Actions a user can request on a stream's logs."""

    SHARE = "diaglog.action.SHARE"
    SAVE = "diaglog.action.SAVE"

    @classmethod
    def parse(cls, value: Union["Action", str, None]) -> Optional["Action"]:
        """Accept a member, its wire name or its short name ("share")."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value:
            return None
        for action in cls:
            if value == action.value or value.upper() == action.name:
                return action
        return None


class ActionRouter:
    """Stateless dispatcher from (action, stream) to a channel operation."""

    def __init__(
        self,
        registry: ChannelRegistry,
        default_stream: DiagnosticsStream = DEFAULT_STREAM,
    ):
        self.registry = registry
        self.default_stream = default_stream

    def resolve_stream(
        self, stream: Union[DiagnosticsStream, str, None]
    ) -> DiagnosticsStream:
        """Get the stream a request addresses, or the default stream."""
        if isinstance(stream, DiagnosticsStream):
            return stream
        resolved = self.registry.from_name(stream)
        if resolved is None:
            if stream:
                logger.debug(f"Unknown stream {stream!r}, using {self.default_stream.name}")
            return self.default_stream
        return resolved

    def dispatch(
        self,
        action: Union[Action, str, None],
        stream: Union[DiagnosticsStream, str, None] = None,
    ) -> Optional[ExportResult]:
        """Run an action on a stream's channel.

        Args:
            action: Action member, wire name or short name
            stream: Stream member or name; absent/unknown means the default

        Returns:
            ExportResult of the share/save, None if the action is unknown
        """
        parsed = Action.parse(action)
        if parsed is None:
            logger.warning(f"Ignoring unknown diagnostics action {action!r}")
            return None

        target = self.resolve_stream(stream)
        channel = self.registry.channel(target)
        logger.debug(f"Dispatching {parsed.name} to {target.name}")

        if parsed is Action.SHARE:
            return channel.share()
        return channel.save()

    def dispatch_intent(self, intent: Mapping[str, str]) -> Optional[ExportResult]:
        """Dispatch a delivered request of the form {"action": ..., EXTRA_STREAM: ...}."""
        return self.dispatch(intent.get("action"), intent.get(EXTRA_STREAM))
