"""Domain exceptions raised by the performance service."""

from __future__ import annotations


class SichrError(Exception):
    """Base class for errors rendered as `{success: false, error}`."""


class UnknownActionError(SichrError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown optimization action: {action}")
        self.action = action


class ImageUrlError(SichrError, ValueError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid image URL: {url!r}")
        self.url = url


class UnsupportedMethodError(SichrError):
    def __init__(self, action: str, method: str) -> None:
        super().__init__(f"Action {action} does not accept {method} requests")
        self.action = action
        self.method = method


def error_message(exc: BaseException) -> str:
    """Human-readable message; PostgREST errors carry it on `.message`."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__
