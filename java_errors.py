"""
java_errors.py
==============
Exception hierarchy for Java discovery.

  JavaLocatorError
    ├── JavaNotFoundError     – nothing at the searched location
    ├── ProbeFailedError      – found something, but it would not run / parse
    ├── InvalidEncodingError  – output or a path is not valid UTF-8
    ├── GlobPatternError      – malformed wildcard pattern
    └── DiscoveryError        – bulk discovery bookkeeping failed
"""

from __future__ import annotations


class JavaLocatorError(Exception):
    """Base error for every locator operation."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description

    def __str__(self) -> str:
        return f"JavaLocatorError: {self.description}"

    # ── Factory helpers ────────────────────────

    @classmethod
    def java_not_found(cls) -> "JavaNotFoundError":
        return JavaNotFoundError("Java is not installed or not in the system PATH")

    @classmethod
    def file_not_found(cls, file_name: str, java_home: str) -> "JavaNotFoundError":
        return JavaNotFoundError(
            f"Could not find '{file_name}' in any subdirectory of {java_home}"
        )

    @classmethod
    def command_failed(cls, command: str, error: str) -> "ProbeFailedError":
        return ProbeFailedError(f"Failed to execute command '{command}': {error}")

    @classmethod
    def invalid_installation(cls, path: str, reason: str) -> "ProbeFailedError":
        return ProbeFailedError(f"Invalid Java installation at '{path}': {reason}")

    @classmethod
    def invalid_utf8_path(cls, path: str) -> "InvalidEncodingError":
        return InvalidEncodingError(f"Path contains invalid UTF-8: {path}")


class JavaNotFoundError(JavaLocatorError):
    """Override or search yielded nothing."""


class ProbeFailedError(JavaLocatorError):
    """A Java executable could not be run or produced no usable version."""


class InvalidEncodingError(JavaLocatorError):
    """Captured output or a filesystem path is not valid text."""


class GlobPatternError(JavaLocatorError):
    """A wildcard pattern could not be compiled."""


class DiscoveryError(JavaLocatorError):
    """Discovery failed for a reason other than a single broken candidate."""
