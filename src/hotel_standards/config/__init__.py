"""Engine configuration management."""

from hotel_standards.config.settings import (
    CONFIG_ENV_VAR,
    ConfigError,
    EngineConfig,
    get_engine_config,
    load_engine_config,
    reset_engine_config_cache,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "EngineConfig",
    "get_engine_config",
    "load_engine_config",
    "reset_engine_config_cache",
]
