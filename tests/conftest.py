"""Shared fixtures for diaglog tests."""

from datetime import datetime
from typing import List, Tuple

import pytest

from diaglog.channels.registry import ChannelRegistry
from diaglog.config import DiagnosticsSettings
from diaglog.export.result import ExportHandle
from diaglog.notices import Notification

FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53, 589000)


class FixedClock:
    """Clock that returns a settable time."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RecordingNotifier:
    def __init__(self):
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


class RecordingShareSheet:
    def __init__(self):
        self.shared: List[Tuple[ExportHandle, str, str]] = []

    def share(self, handle: ExportHandle, mime_type: str, title: str) -> None:
        self.shared.append((handle, mime_type, title))


class RecordingSink:
    def __init__(self):
        self.posted: List[Notification] = []

    def post(self, notification: Notification) -> None:
        self.posted.append(notification)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def share_sheet():
    return RecordingShareSheet()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def settings(tmp_path):
    return DiagnosticsSettings.for_base_dir(tmp_path)


@pytest.fixture
def managed_settings(tmp_path):
    return DiagnosticsSettings.for_base_dir(tmp_path, managed_storage=True)


@pytest.fixture
def registry(settings, notifier, share_sheet, clock):
    return ChannelRegistry(settings, notifier, share_sheet, clock=clock)


@pytest.fixture
def managed_registry(managed_settings, notifier, share_sheet, clock):
    return ChannelRegistry(managed_settings, notifier, share_sheet, clock=clock)
