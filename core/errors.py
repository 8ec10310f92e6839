"""
Error taxonomy for a button-press invocation.

Not-found errors carry the key that failed to match. Remote failures from
the repository surface as RepositoryError; delivery failures as
channels.base.ChannelError. None of them are retried.
"""
from __future__ import annotations

from typing import Optional


class PressNotifierError(Exception):
    """Base exception for all invocation failures."""


class NotFoundError(PressNotifierError):
    def __init__(self, message: str, key: str = ""):
        self.key = key
        super().__init__(message)


class ConfigurationNotFoundError(NotFoundError):
    def __init__(self, device_id: str):
        self.device_id = device_id
        super().__init__(
            f'Could not find "configuration" entry with serial number {device_id}',
            key=device_id,
        )


class NoEligibleMessageError(NotFoundError):
    def __init__(self, press_count: int):
        self.press_count = press_count
        super().__init__(
            f"No eligible message for press count {press_count}",
            key=str(press_count),
        )


class RepositoryError(PressNotifierError):
    """A content repository call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
