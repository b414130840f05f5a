from __future__ import annotations


class SrtcliError(Exception):
    """Base class for errors reported to the user with usage text."""


class UsageError(SrtcliError):
    """Missing or invalid command-line input."""


class InvalidFormat(SrtcliError):
    """Subtitle file does not follow the SubRip block grammar."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
