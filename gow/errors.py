"""Error types for gow."""

from __future__ import annotations


class CLIError(Exception):
    """Raised for user-facing CLI errors."""


class ConfigError(CLIError):
    """Invalid or unreadable configuration."""


class PlatformError(CLIError):
    """The running platform could not be mapped to a release target."""


class DownloadError(CLIError):
    """Network or transport failure while fetching an archive."""


class ArchiveNotFoundError(DownloadError):
    """No release archive exists for the version/platform pair."""


class SizeMismatchError(CLIError):
    """The downloaded archive does not match the advertised size."""


class ChecksumFetchError(CLIError):
    """The companion SHA-256 resource could not be retrieved."""


class ChecksumMismatchError(CLIError):
    """The local archive digest differs from the published one."""


class UnpackError(CLIError):
    """The archive could not be extracted."""


class UnsupportedArchiveError(UnpackError):
    """The archive extension is not one gow knows how to unpack."""


class NotInstalledError(CLIError):
    """Dispatch was requested for a version that is not installed."""
