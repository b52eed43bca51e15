"""Core module exports."""

from testplane.core.errors import (
    ConfigError,
    ConfigParseError,
    DirectoryNotFoundError,
    DiscoveryError,
    ErrorCode,
    InferenceError,
    PatternMatchError,
    TestPlaneError,
)
from testplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ConfigParseError",
    "DirectoryNotFoundError",
    "DiscoveryError",
    "ErrorCode",
    "InferenceError",
    "PatternMatchError",
    "TestPlaneError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
