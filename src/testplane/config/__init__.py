"""Config module exports."""

from testplane.config.loader import get_workspace_data_directory, load_config
from testplane.config.models import (
    InferenceConfig,
    LoggingConfig,
    NormalizedOptions,
    PhpUnitPluginOptions,
    TestPlaneConfig,
)

__all__ = [
    "load_config",
    "get_workspace_data_directory",
    "TestPlaneConfig",
    "InferenceConfig",
    "LoggingConfig",
    "NormalizedOptions",
    "PhpUnitPluginOptions",
]
