"""
Custom exception hierarchy for shipver.

This module defines structured exception types used across shipver.
All exceptions inherit from :class:`ShipverError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class ShipverError(Exception):
    """Base exception for all shipver errors.

    All shipver-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ParseError(ShipverError):
    """Raised when a version string or commit identifier is malformed.

    Args:
        message: Error description.
        value: The offending input.
    """

    __slots__ = ("value",)

    def __init__(
        self,
        message: str,
        *,
        value: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "value", value)

        super().__init__(message, details)

        self.value = value


class ConfigurationError(ShipverError):
    """Raised for invalid configuration files or rejected option values.

    Args:
        message: Error description.
        config_path: Path to the configuration file involved.
        option: Name of the offending option.
        value: The rejected value.
    """

    __slots__ = ("config_path", "option", "value")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
        value: Optional[Any] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)
        _add_if(details, "value", value)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
        self.value = value


class ManifestError(ShipverError):
    """Raised when a project manifest cannot be located, read or updated.

    Args:
        message: Error description.
        file_path: Path to the manifest.
        project_type: Project type (``maven`` or ``node``).
    """

    __slots__ = ("file_path", "project_type")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        project_type: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "project_type", project_type)

        super().__init__(message, details)

        self.file_path = file_path
        self.project_type = project_type


class GitError(ShipverError):
    """Raised when a git command fails.

    Args:
        message: Error description.
        command: The git command line that was executed.
        returncode: Process exit status.
        stderr: Captured standard error, truncated for safety.
    """

    __slots__ = ("command", "returncode", "stderr")

    def __init__(
        self,
        message: str,
        *,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "command", command)
        _add_if(details, "returncode", returncode)

        if stderr:
            details["stderr"] = _truncate(stderr.strip())

        super().__init__(message, details)

        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class FileOperationError(ShipverError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/append).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
