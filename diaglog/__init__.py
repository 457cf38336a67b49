"""Bounded, masked diagnostics log channels with platform-aware export."""

__version__ = "0.1.0"
