"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TESTPLANE__SECTION__KEY)
3. Repo YAML (<workspace>/.testplane/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    TESTPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    TESTPLANE__LOGGING__LEVEL=DEBUG
    TESTPLANE__PHPUNIT__CI_TARGET_NAME=phpunit-ci
    TESTPLANE__INFERENCE__PARALLELISM=8
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_TARGET_NAME = "test"
DEFAULT_CI_TARGET_NAME = "test-ci"
DEFAULT_CONFIG_GLOB = "**/phpunit.xml"


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TESTPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every memoization hit and miss.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class PhpUnitPluginOptions(BaseModel):
    """User-supplied PHPUnit plugin options.

    Accepts both snake_case and the host engine's camelCase keys.

    Env vars:
        TESTPLANE__PHPUNIT__TARGET_NAME: Name of the run-all-tests target
        TESTPLANE__PHPUNIT__CI_TARGET_NAME: Name of the per-file CI aggregator
    """

    model_config = ConfigDict(populate_by_name=True)

    target_name: str = Field(default=DEFAULT_TARGET_NAME, alias="targetName")
    ci_target_name: str | None = Field(
        default=DEFAULT_CI_TARGET_NAME,
        alias="ciTargetName",
        description="Set to null or an empty string to disable per-file CI targets.",
    )


class NormalizedOptions(BaseModel):
    """Resolved plugin options, computed once per inference batch."""

    model_config = ConfigDict(frozen=True)

    target_name: str = DEFAULT_TARGET_NAME
    ci_target_name: str | None = DEFAULT_CI_TARGET_NAME


class InferenceConfig(BaseModel):
    """Inference batch configuration.

    Env vars:
        TESTPLANE__INFERENCE__WORKSPACE_DATA_DIRECTORY: Where memoized targets are stored
        TESTPLANE__INFERENCE__PARALLELISM: Config files processed concurrently
        TESTPLANE__INFERENCE__CONFIG_GLOB: Pattern locating phpunit configuration files
    """

    workspace_data_directory: str | None = Field(
        default=None,
        description="Defaults to <workspace>/.testplane/workspace-data.",
    )
    parallelism: int = Field(
        default=4,
        description="Maximum configuration files processed concurrently.",
    )
    config_glob: str = Field(default=DEFAULT_CONFIG_GLOB)

    @field_validator("parallelism")
    @classmethod
    def validate_parallelism(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Parallelism must be >= 1, got {v}")
        return v


class TestPlaneConfig(BaseModel):
    """Root configuration model.

    All settings can be configured via:
    1. Environment variables: TESTPLANE__SECTION__KEY
    2. YAML config file (<workspace>/.testplane/config.yaml)
    3. Direct kwargs to load_config()
    """

    __test__ = False

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    phpunit: PhpUnitPluginOptions = Field(default_factory=PhpUnitPluginOptions)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
