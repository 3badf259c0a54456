"""Shared CLI utilities: logging, config resolution, dataset loading."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from hotel_standards.cli._console import console, print_err
from hotel_standards.config.settings import ConfigError, EngineConfig, load_engine_config
from hotel_standards.loader import (
    load_assessment_record,
    load_classification_dataset,
    load_compliance_dataset,
)
from hotel_standards.normalization.errors import DatasetError
from hotel_standards.startup import ensure_initialized

logger = logging.getLogger(__name__)


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler on stderr."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def init_command(ctx: typer.Context) -> EngineConfig:
    """Common command prologue. Returns the engine config in effect."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    try:
        state = ensure_initialized()
        config_path: Optional[Path] = ctx.obj.get("config")
        if config_path is not None:
            return load_engine_config(config_path)
        return state.config
    except ConfigError as e:
        print_err(str(e))
        raise SystemExit(1)


def fail(msg: str) -> None:
    print_err(msg)
    raise SystemExit(1)


def load_compliance_or_exit(path: Path):
    try:
        return load_compliance_dataset(path)
    except DatasetError as e:
        fail(str(e))


def load_classification_or_exit(path: Path):
    try:
        return load_classification_dataset(path)
    except DatasetError as e:
        fail(str(e))


def load_assessment_or_exit(path: Path, config: EngineConfig, record_id: Optional[str] = None):
    try:
        return load_assessment_record(
            path,
            record_id=record_id,
            default_accommodation_type=config.default_accommodation_type,
            default_facility_type=config.default_facility_type,
        )
    except DatasetError as e:
        fail(str(e))
