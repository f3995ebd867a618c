"""Configuration management for cwtail using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cwtail.core.exceptions import ConfigurationError
from cwtail.core.logging import LogLevel
from cwtail.core.output import OutputFormat


class AWSConfig(BaseModel):
    """AWS configuration."""

    profile: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    endpoint_url: str | None = None

    def get_profile(self) -> str | None:
        """Get AWS profile from config or environment."""
        return (
            os.environ.get("CWTAIL_AWS_PROFILE")
            or os.environ.get("AWS_PROFILE")
            or self.profile
        )

    def get_region(self) -> str | None:
        """Get AWS region from config or environment."""
        return (
            os.environ.get("CWTAIL_AWS_REGION")
            or os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
            or self.region
        )


class TailConfig(BaseSettings):
    """Retrieval defaults.

    Values can also come from CWTAIL_TAIL_* environment variables, e.g.
    CWTAIL_TAIL_POLL_INTERVAL_MS=2000. Explicit values win over the
    environment.
    """

    model_config = SettingsConfigDict(env_prefix="CWTAIL_TAIL_", extra="ignore")

    num_records: int = Field(default=30, gt=0)
    follow: bool = False
    poll_interval_ms: int = Field(default=5000, gt=0)
    fan_out: int = Field(default=10, gt=0, le=50)  # describe_log_streams caps limit at 50
    show_streams: bool = False
    show_time: bool = False
    eol: bool = False


class ProfileConfig(BaseModel):
    """Profile configuration grouping all settings."""

    aws: AWSConfig = Field(default_factory=AWSConfig)
    tail: TailConfig = Field(default_factory=TailConfig)

    @field_validator("tail", mode="before")
    @classmethod
    def load_tail_settings(cls, v: Any) -> Any:
        # Go through the settings constructor so the environment still applies
        if isinstance(v, dict):
            return TailConfig(**v)
        return v


class GlobalConfig(BaseModel):
    """Global settings."""

    output_format: OutputFormat = OutputFormat.TABLE
    color: str = "auto"  # auto, always, never
    verbosity: LogLevel = LogLevel.WARNING

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if v not in ("auto", "always", "never"):
            raise ValueError("color must be 'auto', 'always', or 'never'")
        return v


class CwTailConfig(BaseModel):
    """Main configuration model."""

    model_config = {"populate_by_name": True}

    version: str = "1"
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    profiles: dict[str, ProfileConfig] = Field(default_factory=lambda: {"default": ProfileConfig()})

    def get_profile(self, name: str | None = None) -> ProfileConfig:
        """Get a profile by name, defaulting to 'default'."""
        profile_name = name or "default"
        if profile_name not in self.profiles:
            if profile_name == "default":
                return ProfileConfig()
            raise ConfigurationError(f"Profile '{profile_name}' not found")
        return self.profiles[profile_name]


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    CONFIG_FILENAMES = ["cwtail.yaml", "cwtail.yml", ".cwtail.yaml", ".cwtail.yml"]

    def __init__(self):
        self._config: CwTailConfig | None = None

    def load(self, config_file: str | Path | None = None) -> CwTailConfig:
        """Load configuration from files.

        Priority (highest to lowest):
        1. Explicitly specified config file
        2. Project config (./cwtail.yaml)
        3. User config (~/.cwtail/config.yaml)

        Args:
            config_file: Optional explicit config file path

        Returns:
            Merged configuration
        """
        configs: list[dict[str, Any]] = []

        user_config_path = Path.home() / ".cwtail" / "config.yaml"
        if user_config_path.exists():
            configs.append(self._load_yaml_file(user_config_path))

        project_config = self._find_project_config()
        if project_config:
            configs.append(self._load_yaml_file(project_config))

        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_file}")
            configs.append(self._load_yaml_file(config_path))

        merged = self._merge_configs(configs)

        try:
            self._config = CwTailConfig(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
        return self._config

    def _find_project_config(self) -> Path | None:
        """Find project config file in current or parent directories."""
        current = Path.cwd()

        while current != current.parent:
            for filename in self.CONFIG_FILENAMES:
                config_path = current / filename
                if config_path.exists():
                    return config_path
            current = current.parent

        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}")
        if not isinstance(content, dict):
            raise ConfigurationError(f"Invalid config in {path}: expected a mapping")
        return content

    def _merge_configs(self, configs: list[dict[str, Any]]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for config in configs:
            result = self._deep_merge(result, config)
        return result

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


_config_loader = ConfigLoader()


def load_config(config_file: str | Path | None = None) -> CwTailConfig:
    """Load cwtail configuration.

    Args:
        config_file: Optional explicit config file path

    Returns:
        Loaded configuration
    """
    return _config_loader.load(config_file)


def get_default_config() -> CwTailConfig:
    """Get default configuration without loading from files."""
    return CwTailConfig()
