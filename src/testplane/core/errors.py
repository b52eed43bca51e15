"""TestPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config (tool config, phpunit.xml, composer.json)
- 3xxx: Discovery (test files, patterns)
- 7xxx: Inference
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Discovery (3xxx)
    DIRECTORY_NOT_FOUND = 3001
    PATTERN_MATCH_ERROR = 3002

    # Inference (7xxx)
    INFERENCE_FAILED = 7001


@dataclass(frozen=True, slots=True)
class TestPlaneError(Exception):
    """Base error with structured context."""

    __test__ = False

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TestPlaneError):
    """Configuration-related errors."""

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ConfigParseError(ConfigError):
    """A configuration file could not be parsed (XML, JSON or YAML)."""

    @classmethod
    def for_file(cls, path: str, reason: str) -> "ConfigParseError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class DiscoveryError(TestPlaneError):
    """Test file discovery errors."""


class DirectoryNotFoundError(DiscoveryError):
    """The directory to search for test files does not exist."""

    @classmethod
    def for_path(cls, path: str) -> "DirectoryNotFoundError":
        return cls(
            code=ErrorCode.DIRECTORY_NOT_FOUND,
            message=f"Test directory not found: {path}",
            details={"path": path},
        )


class PatternMatchError(DiscoveryError):
    """A file-matching pattern could not be applied."""

    @classmethod
    def for_pattern(cls, path: str, pattern: str, reason: str) -> "PatternMatchError":
        return cls(
            code=ErrorCode.PATTERN_MATCH_ERROR,
            message=f"Error matching {path} with {pattern}: {reason}",
            details={"path": path, "pattern": pattern, "reason": reason},
        )


@dataclass(frozen=True, slots=True)
class InferenceError(TestPlaneError):
    """One or more configuration files failed during a batch.

    ``failures`` pairs each failing configuration file with its exception.
    ``partial_results`` holds the projects inferred from the files that
    succeeded, keyed by project root.
    """

    failures: tuple[tuple[str, BaseException], ...] = ()
    partial_results: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def aggregate(
        cls,
        failures: list[tuple[str, BaseException]],
        partial_results: dict[str, Any],
    ) -> "InferenceError":
        files = [path for path, _ in failures]
        summary = "; ".join(f"{path}: {error}" for path, error in failures)
        return cls(
            code=ErrorCode.INFERENCE_FAILED,
            message=f"Target inference failed for {len(failures)} file(s): {summary}",
            details={"files": files},
            failures=tuple(failures),
            partial_results=partial_results,
        )

