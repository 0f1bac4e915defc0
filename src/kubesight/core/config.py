# src/kubesight/core/config.py

import logging
import os
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ..models.capacity import PressureThresholds
from .exceptions import ConfigurationError

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

logger = logging.getLogger(__name__)

OutputFormat = Literal["text", "json", "yaml"]


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # CLI-facing values are properties so they are resolved at access time;
    # tests and wrappers can change env vars after import.
    @property
    def KUBECONFIG(self) -> Optional[str]:
        return os.getenv("KUBECONFIG") or None

    @property
    def KUBE_CONTEXT(self) -> Optional[str]:
        return os.getenv("KUBESIGHT_CONTEXT") or None

    @property
    def SETTINGS_PATH(self) -> Path:
        explicit = os.getenv("KUBESIGHT_SETTINGS_PATH")
        if explicit:
            return Path(explicit).expanduser()
        return Path.home() / ".kubesight" / "settings.yaml"

    @property
    def REQUEST_TIMEOUT(self) -> int:
        return int(os.getenv("KUBESIGHT_REQUEST_TIMEOUT", "20"))

    def validate_instance(self):
        if self.LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR or CRITICAL.")
        try:
            timeout = self.REQUEST_TIMEOUT
        except ValueError as e:
            raise ValueError("KUBESIGHT_REQUEST_TIMEOUT must be an integer number of seconds.") from e
        if timeout <= 0:
            raise ValueError("KUBESIGHT_REQUEST_TIMEOUT must be positive.")


class Settings(BaseModel):
    """User settings persisted in the settings file. Command-line flags take precedence."""

    output: OutputFormat = "text"
    namespace: str = ""
    context: str = ""
    top: int = Field(20, ge=0, description="Rows shown in ranked tables; 0 shows all.")
    color: bool = True
    pressure_thresholds: PressureThresholds = Field(default_factory=PressureThresholds)

    def merge(
        self,
        output: Optional[str] = None,
        namespace: Optional[str] = None,
        context: Optional[str] = None,
        top: Optional[int] = None,
    ) -> "Settings":
        """Returns a copy with every explicitly given value replacing the file value."""
        overrides = {
            key: value
            for key, value in (("output", output), ("namespace", namespace), ("context", context), ("top", top))
            if value is not None
        }
        merged = self.model_dump()
        merged.update(overrides)
        try:
            return Settings.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid option: {e}") from e


def validate_thresholds(low: float, medium: float, high: float, saturated: float) -> PressureThresholds:
    """
    Builds PressureThresholds, turning validation failures into ConfigurationError.

    Raises:
        ConfigurationError: if a value is outside [0, 100] or the four are not strictly increasing.
    """
    try:
        return PressureThresholds(low=low, medium=medium, high=high, saturated=saturated)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pressure thresholds: {_first_error(e)}") from e


SETTABLE_KEYS = (
    "output",
    "namespace",
    "context",
    "top",
    "color",
    "pressure_thresholds.low",
    "pressure_thresholds.medium",
    "pressure_thresholds.high",
    "pressure_thresholds.saturated",
)


def update_setting(settings: Settings, key: str, value: str) -> Settings:
    """
    Returns a copy of `settings` with one dotted key set from its string form.

    The value is coerced by the Settings schema ("30" for top, "false" for
    color), so whatever the file would reject is rejected here too.

    Raises:
        ConfigurationError: for an unknown key or a value the schema rejects.
    """
    if key not in SETTABLE_KEYS:
        raise ConfigurationError(f"Unknown config key: {key} (valid keys: {', '.join(SETTABLE_KEYS)})")

    data = settings.model_dump()
    *parents, leaf = key.split(".")
    target = data
    for parent in parents:
        target = target[parent]
    target[leaf] = value

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid value for '{key}': {_first_error(e)}") from e


def _first_error(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return str(e)
    return errors[0].get("msg", str(e))


def load_settings(path: Union[str, Path, None] = None) -> Settings:
    """
    Loads settings from YAML, falling back to defaults when the file does not exist.

    Raises:
        ConfigurationError: if the file cannot be read or parsed, or holds invalid values.
    """
    settings_path = Path(path) if path else config.SETTINGS_PATH
    if not settings_path.exists():
        logger.debug("No settings file at %s; using defaults.", settings_path)
        return Settings()

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Reading config file {settings_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {settings_path} must contain a mapping.")

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {settings_path}: {_first_error(e)}") from e

    logger.debug("Loaded settings from %s.", settings_path)
    return settings


def save_settings(settings: Settings, path: Union[str, Path, None] = None) -> Path:
    """Writes settings as YAML, creating the parent directory. Returns the written path."""
    settings_path = Path(path) if path else config.SETTINGS_PATH
    # Re-validate: a model built with model_construct() skips validation.
    try:
        validated = Settings.model_validate(settings.model_dump())
    except ValidationError as e:
        raise ConfigurationError(f"Refusing to save invalid settings: {_first_error(e)}") from e

    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(settings_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(validated.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigurationError(f"Writing config file {settings_path}: {e}") from e

    logger.info("Saved settings to %s.", settings_path)
    return settings_path


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
