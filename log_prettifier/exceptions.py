from __future__ import annotations


class PrettifierError(Exception):
    """Base class for errors raised by log_prettifier."""


class ParseFailure(PrettifierError):
    """A JSON or XML parser rejected the input."""

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind} parse failed: {message}")
        self.kind = kind


class HostFailure(PrettifierError):
    """The isolated extraction context could not run (no page, injection denied)."""


class HandoffStoreError(PrettifierError):
    """The handoff store could not be written."""
