"""Diagnostics log channels, their masking and their registry."""

from .masking import SecretMasker, MaskFn, identity, mask_secrets
from .records import LogRecord, format_timestamp
from .streams import DiagnosticsStream, DEFAULT_STREAM
from .channel import LogChannel, MirrorWrite, DEFAULT_CAPACITY

__all__ = [
    "SecretMasker",
    "MaskFn",
    "identity",
    "mask_secrets",
    "LogRecord",
    "format_timestamp",
    "DiagnosticsStream",
    "DEFAULT_STREAM",
    "LogChannel",
    "MirrorWrite",
    "DEFAULT_CAPACITY",
]
