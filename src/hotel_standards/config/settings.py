"""Engine configuration schema and loader.

Configuration is optional.  When present it is a YAML file named by an
explicit path or by the ``HOTEL_STANDARDS_CONFIG`` environment variable:

    default_accommodation_type: hotels_and_similar
    default_facility_type: hotels_and_similar
    annotation_rules:
      - code: A8
        accommodation_type: aparthotels
        effect: exempt

Omitting ``annotation_rules`` keeps the built-in override table; an
empty list disables annotation overrides entirely.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from hotel_standards.rules.annotations import (
    DEFAULT_ANNOTATION_RULES,
    AnnotationRule,
    AnnotationRuleTable,
)
from hotel_standards.schemas.common import DEFAULT_TYPE_KEY

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HOTEL_STANDARDS_CONFIG"


class ConfigError(Exception):
    """Raised when an engine config file exists but cannot be used."""


class EngineConfig(BaseModel):
    """Engine-wide settings.

    Attributes:
        annotation_rules: Override table applied on top of baseline mandatory flags.
        default_accommodation_type: Type used when an assessment names none.
        default_facility_type: Compliance facility type used when none is named.
    """

    annotation_rules: List[AnnotationRule] = Field(
        default_factory=lambda: list(DEFAULT_ANNOTATION_RULES),
        description="Annotation code overrides per accommodation type",
    )
    default_accommodation_type: str = Field(
        default=DEFAULT_TYPE_KEY,
        description="Fallback accommodation type key",
        min_length=1,
    )
    default_facility_type: str = Field(
        default=DEFAULT_TYPE_KEY,
        description="Fallback compliance facility type key",
        min_length=1,
    )

    def build_rule_table(self) -> AnnotationRuleTable:
        """Create the annotation rule table described by this config."""
        return AnnotationRuleTable(self.annotation_rules)


def _resolve_config_path(config_path: Optional[Union[str, Path]]) -> Optional[Path]:
    if config_path is not None:
        return Path(config_path)
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    return None


def load_engine_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Load engine configuration from YAML.

    Args:
        config_path: Optional explicit path to the YAML file.
            If not provided, uses ``$HOTEL_STANDARDS_CONFIG``.

    Returns:
        EngineConfig from the file, or defaults when no file is configured
        or the configured file does not exist.

    Raises:
        ConfigError: If the file exists but is not valid YAML or fails validation.
    """
    path = _resolve_config_path(config_path)
    if path is None:
        logger.debug("No engine config configured, using defaults")
        return EngineConfig()
    if not path.exists():
        logger.debug(f"No engine config found at {path}, using defaults")
        return EngineConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in engine config {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read engine config {path}: {e}")

    if data is None:
        logger.warning(f"Empty engine config at {path}, using defaults")
        return EngineConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Engine config {path} must be a mapping, got {type(data).__name__}")

    try:
        config = EngineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid engine config {path}: {e}")

    logger.debug(f"Loaded engine config from {path} ({len(config.annotation_rules)} annotation rules)")
    return config


# Cached engine config (loaded once per session)
_cached_config: Optional[EngineConfig] = None


def get_engine_config(force_reload: bool = False) -> EngineConfig:
    """Get the current engine configuration (cached).

    Args:
        force_reload: If True, reload from disk even if cached.
    """
    global _cached_config

    if force_reload or _cached_config is None:
        _cached_config = load_engine_config()

    return _cached_config


def reset_engine_config_cache() -> None:
    """Reset the engine config cache."""
    global _cached_config
    _cached_config = None
