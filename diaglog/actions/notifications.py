"""Error notifications that offer the diagnostics log actions."""

import logging

from diaglog.actions.router import Action
from diaglog.channels.registry import ChannelRegistry
from diaglog.channels.streams import DiagnosticsStream
from diaglog.notices import Notification, NotificationAction, NotificationSink

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 120
BODY_LENGTH = 500


class DiagnosticsNotifier:
    """Posts error notifications with share/save buttons for the logs.

    The text is masked with the Whisper channel's mask before it leaves the
    core, since error text often carries request details.
    """

    def __init__(self, registry: ChannelRegistry, sink: NotificationSink):
        self.registry = registry
        self.sink = sink

    def build(self, title: str, text: str) -> Notification:
        whisper = self.registry.channel(DiagnosticsStream.WHISPER)
        theme = self.registry.channel(DiagnosticsStream.THEME)
        masked = whisper.mask_for_display(text)

        return Notification(
            title=title,
            summary=masked[:SUMMARY_LENGTH],
            body=masked[:BODY_LENGTH],
            actions=[
                NotificationAction(
                    label=whisper.strings.share_action,
                    action=Action.SHARE.value,
                    stream=DiagnosticsStream.WHISPER.name,
                ),
                NotificationAction(
                    label=whisper.strings.save_action,
                    action=Action.SAVE.value,
                    stream=DiagnosticsStream.WHISPER.name,
                ),
                NotificationAction(
                    label=theme.strings.share_action,
                    action=Action.SHARE.value,
                    stream=DiagnosticsStream.THEME.name,
                ),
            ],
        )

    def show_error(self, title: str, text: str) -> Notification:
        """Post an error notification and return what was posted."""
        notification = self.build(title, text)
        try:
            self.sink.post(notification)
        except Exception as e:
            logger.warning(f"Could not post notification {title!r}: {e}")
        return notification
