"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (TESTPLANE__SECTION__KEY)
3. Repo config (<workspace>/.testplane/config.yaml)
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from testplane.config.models import (
    InferenceConfig,
    LoggingConfig,
    PhpUnitPluginOptions,
    TestPlaneConfig,
)
from testplane.core.errors import ConfigError, ConfigParseError

CONFIG_DIR_NAME = ".testplane"
CONFIG_FILE_NAME = "config.yaml"
WORKSPACE_DATA_DIR_NAME = "workspace-data"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError.for_file(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigParseError.for_file(str(path), "top-level value must be a mapping")
    return data


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class TestPlaneSettings(BaseSettings):
        """Root config. Env vars: TESTPLANE__LOGGING__LEVEL, TESTPLANE__PHPUNIT__TARGET_NAME, etc."""

        __test__ = False

        model_config = SettingsConfigDict(
            env_prefix="TESTPLANE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        phpunit: PhpUnitPluginOptions = PhpUnitPluginOptions()
        inference: InferenceConfig = InferenceConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return TestPlaneSettings


def load_config(workspace_root: Path | None = None, **kwargs: Any) -> TestPlaneConfig:
    """Load config: defaults < repo config < env vars < kwargs.

    Args:
        workspace_root: Workspace to load config from.
                        Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigParseError: On invalid YAML syntax.
        ConfigError: On validation errors.
    """
    workspace_root = workspace_root or Path.cwd()
    yaml_config = _load_yaml(workspace_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return TestPlaneConfig.model_validate(settings.model_dump(by_alias=True))


def get_workspace_data_directory(workspace_root: Path, config: TestPlaneConfig) -> Path:
    """Directory holding persisted memoization stores for a workspace."""
    if config.inference.workspace_data_directory:
        data_dir = Path(config.inference.workspace_data_directory).expanduser()
        return data_dir if data_dir.is_absolute() else workspace_root / data_dir
    return workspace_root / CONFIG_DIR_NAME / WORKSPACE_DATA_DIR_NAME
