"""Centralized initialization for hotel_standards entry points.

Loads a ``.env`` file (so that ``HOTEL_STANDARDS_CONFIG`` can be set
there) and then the engine config.  Entry points call
``ensure_initialized()``; repeated calls return the cached state.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from hotel_standards.config.settings import (
    EngineConfig,
    get_engine_config,
    reset_engine_config_cache,
)

logger = logging.getLogger(__name__)


@dataclass
class StartupState:
    """Result of initialization."""

    project_root: Path
    env_loaded: bool
    config: EngineConfig


# Module-level state
_state: Optional[StartupState] = None


def _find_project_root(start_path: Optional[Path] = None) -> Path:
    """Walk up from ``start_path`` (default: cwd) to the nearest pyproject.toml or .env."""
    current = (start_path or Path.cwd()).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists() or (parent / ".env").exists():
            return parent
    return current


def _load_env(project_root: Path) -> bool:
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
        logger.debug(f"Loaded .env from {env_path}")
        return True
    logger.debug(f".env not found at {env_path}")
    return False


def ensure_initialized(start_path: Optional[Path] = None) -> StartupState:
    """Ensure .env and engine config are loaded (idempotent)."""
    global _state

    if _state is not None:
        return _state

    project_root = _find_project_root(start_path)
    env_loaded = _load_env(project_root)
    _state = StartupState(
        project_root=project_root,
        env_loaded=env_loaded,
        config=get_engine_config(force_reload=True),
    )
    return _state


def reset_startup_state() -> None:
    """Forget cached startup state and engine config."""
    global _state
    _state = None
    reset_engine_config_cache()
