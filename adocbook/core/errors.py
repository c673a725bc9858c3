"""Exceptions raised by the adocbook pipeline."""

from typing import Optional


class AdocBookError(Exception):
    """
    Base exception for pipeline failures.

    Attributes:
        message: Error description
        url: Remote URL involved, if any
        path: Local path involved, if any
    """

    def __init__(self, message: str, url: Optional[str] = None, path: Optional[str] = None):
        self.message = message
        self.url = url
        self.path = path

        parts = [message]
        if url:
            parts.append(f"(URL: {url})")
        if path:
            parts.append(f"(Path: {path})")

        super().__init__(" ".join(parts))


class RemoteFetchError(AdocBookError):
    """Raised when a listing or file download fails."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, url=url)


class FilesystemError(AdocBookError):
    """Raised when the scratch directory cannot be created, written or removed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, path=path)


class RenderError(AdocBookError):
    """Raised when HTML conversion or PDF capture fails."""

    pass


class ConfigError(AdocBookError, ValueError):
    """Raised when a build configuration value is invalid."""

    pass
