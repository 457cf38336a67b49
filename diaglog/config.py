"""Configuration for diagnostics channels and export.

Settings are read once, when the registry builds a channel; there is no live
reconfiguration.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from diaglog.channels.channel import DEFAULT_CAPACITY
from diaglog.channels.streams import DiagnosticsStream


class ChannelOverride(BaseModel):
    """Per-stream settings that replace the stream's defaults."""

    capacity: Optional[int] = Field(None, ge=1, description="Records kept in memory")
    masked: Optional[bool] = Field(None, description="Redact secret-shaped tokens")


class DiagnosticsSettings(BaseModel):
    """Settings for every diagnostics channel of a process."""

    cache_dir: Path = Field(..., description="Directory of the mirror files")
    public_dir: Optional[Path] = Field(
        None, description="App-scoped public directory for legacy exports"
    )
    managed_storage_root: Optional[Path] = Field(
        None, description="Root of the managed storage index"
    )
    managed_storage: bool = Field(
        False, description="Platform offers managed shared storage"
    )
    app_name: str = "diaglog"
    provider_authority: str = "diaglog.fileprovider"
    capacity: int = Field(DEFAULT_CAPACITY, ge=1)
    remove_orphans: bool = Field(
        True, description="Delete a managed entry whose write failed"
    )
    channels: Dict[str, ChannelOverride] = Field(default_factory=dict)

    @field_validator("app_name")
    @classmethod
    def validate_app_name(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("app_name must be a non-empty name without '/'")
        return v

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, v: Dict[str, ChannelOverride]) -> Dict[str, ChannelOverride]:
        unknown = [name for name in v if DiagnosticsStream.from_name(name) is None]
        if unknown:
            raise ValueError(f"Unknown diagnostics streams: {', '.join(unknown)}")
        return v

    @model_validator(mode="after")
    def validate_managed_root(self) -> "DiagnosticsSettings":
        if self.managed_storage and self.managed_storage_root is None:
            raise ValueError("managed_storage requires managed_storage_root")
        return self

    @property
    def relative_path(self) -> str:
        """Shared subdirectory used for managed storage exports."""
        return f"Download/{self.app_name}"

    def override_for(self, stream: DiagnosticsStream) -> ChannelOverride:
        return self.channels.get(stream.name, ChannelOverride())

    @classmethod
    def for_base_dir(cls, base_dir: Path, **kwargs) -> "DiagnosticsSettings":
        """Build settings with every directory laid out under one base.

            <base>/cache            mirror files
            <base>/files/Download   legacy exports
            <base>/shared           managed storage index
        """
        base_dir = Path(base_dir)
        kwargs.setdefault("cache_dir", base_dir / "cache")
        kwargs.setdefault("public_dir", base_dir / "files" / "Download")
        kwargs.setdefault("managed_storage_root", base_dir / "shared")
        return cls(**kwargs)
