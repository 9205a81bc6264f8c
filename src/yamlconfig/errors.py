"""Error hierarchy for the yamlconfig package."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "YamlConfigError",
    "KeyNotFoundError",
    "NotAMappingError",
    "SectionNotAvailableError",
    "TypeMismatchError",
    "DurationParseError",
    "NoReferenceError",
    "PathResolutionError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "LoaderError",
    "UnmarshalError",
    "FatalConfigError",
    "ErrorCodes",
]


class YamlConfigError(Exception):
    """Base error for all yamlconfig errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class KeyNotFoundError(YamlConfigError):
    """Raised when a key path does not resolve to a value."""

    def __init__(self, key: str, context: str | None = None, **kwargs: Any) -> None:
        message = f"key {key!r} not found"
        if context:
            message = f"{context}: {message}"
        super().__init__(
            code="KEY_NOT_FOUND",
            message=message,
            details={"key": key},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The full key path that failed to resolve."""
        return self.details["key"]


class NotAMappingError(YamlConfigError):
    """Raised when a node that must be a mapping is something else."""

    def __init__(self, actual: str, **kwargs: Any) -> None:
        super().__init__(
            code="NOT_A_MAPPING",
            message=f"data is no map, got {actual}",
            details={"actual": actual},
            **kwargs,
        )


class SectionNotAvailableError(YamlConfigError):
    """Raised when a section key resolves to a null value."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="SECTION_NOT_AVAILABLE",
            message=f"data for key {key!r} is not available",
            details={"key": key},
            **kwargs,
        )


class TypeMismatchError(YamlConfigError):
    """Raised when a stored value does not have the requested type."""

    def __init__(self, key: str, expected: str, actual: str, **kwargs: Any) -> None:
        super().__init__(
            code="TYPE_MISMATCH",
            message=f"value for key {key!r} is {actual}, expected {expected}",
            details={"key": key, "expected": expected, "actual": actual},
            **kwargs,
        )

    @property
    def key(self) -> str:
        return self.details["key"]


class DurationParseError(YamlConfigError):
    """Raised when a string is not a valid duration."""

    def __init__(self, text: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="DURATION_PARSE_ERROR",
            message=f"invalid duration {text!r}: {reason}",
            details={"text": text, "reason": reason},
            **kwargs,
        )


class NoReferenceError(YamlConfigError):
    """Raised when no config file reference was given."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(code="NO_REFERENCE", message="config file path not specified", **kwargs)


class PathResolutionError(YamlConfigError):
    """Raised when the config file location cannot be determined or created."""

    def __init__(self, message: str, path: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            code="PATH_RESOLUTION_ERROR",
            message=message,
            details={"path": path},
            **kwargs,
        )

    @property
    def path(self) -> str | None:
        """The path that was being resolved or created, if known."""
        return self.details["path"]


class ConfigNotFoundError(YamlConfigError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigParseError(YamlConfigError):
    """Raised when a configuration document has invalid syntax."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_PARSE_ERROR", message=message, **kwargs)


class LoaderError(YamlConfigError):
    """Raised when the loader fails; annotated with the failing operation."""

    def __init__(self, operation: str, cause: Exception, **kwargs: Any) -> None:
        super().__init__(
            code="LOADER_ERROR",
            message=f"{operation}: {cause}",
            details={"operation": operation},
            cause=cause,
            **kwargs,
        )

    @property
    def operation(self) -> str:
        return self.details["operation"]


class UnmarshalError(YamlConfigError):
    """Raised when a section cannot be decoded into a target type."""

    def __init__(self, stage: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="UNMARSHAL_ERROR",
            message=f"{stage}: {reason}",
            details={"stage": stage, "reason": reason},
            **kwargs,
        )


class FatalConfigError(YamlConfigError):
    """Raised by the strict getters when the configuration cannot be used.

    This is not meant to be handled: it signals a mismatch between the
    configuration document and the program reading it, and the host
    application should abort startup.
    """

    def __init__(self, key: str, cause: Exception, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_FATAL",
            message=f"key {key} not available: {cause}",
            details={"key": key},
            cause=cause,
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The key whose lookup or coercion failed."""
        return self.details["key"]


class ErrorCodes:
    """All yamlconfig error codes as constants.

    Example:
        if error.code == ErrorCodes.KEY_NOT_FOUND:
            use_fallback()
    """

    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    NOT_A_MAPPING = "NOT_A_MAPPING"
    SECTION_NOT_AVAILABLE = "SECTION_NOT_AVAILABLE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    DURATION_PARSE_ERROR = "DURATION_PARSE_ERROR"
    NO_REFERENCE = "NO_REFERENCE"
    PATH_RESOLUTION_ERROR = "PATH_RESOLUTION_ERROR"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"
    LOADER_ERROR = "LOADER_ERROR"
    UNMARSHAL_ERROR = "UNMARSHAL_ERROR"
    CONFIG_FATAL = "CONFIG_FATAL"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
