"""
Pytest fixtures and configuration for hotel_standards tests.
Provides dataset files on disk and isolates cached configuration.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent / "unit"))

from classification_test_helpers import (  # noqa: E402
    exported_classification_raw,
    native_classification_raw,
    native_compliance_raw,
    saved_assessment_raw,
)
from hotel_standards.config.settings import CONFIG_ENV_VAR, reset_engine_config_cache  # noqa: E402
from hotel_standards.startup import reset_startup_state  # noqa: E402


def _write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Start every test without cached config or a config env var."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_startup_state()
    reset_engine_config_cache()
    yield
    reset_startup_state()
    reset_engine_config_cache()


@pytest.fixture
def compliance_file(tmp_path):
    """Native-shape compliance dataset on disk."""
    return _write_json(tmp_path / "compliance.json", native_compliance_raw())


@pytest.fixture
def classification_file(tmp_path):
    """Native-shape classification dataset on disk."""
    return _write_json(tmp_path / "classification.json", native_classification_raw())


@pytest.fixture
def exported_classification_file(tmp_path):
    """Exported-shape classification dataset on disk."""
    return _write_json(tmp_path / "classification_export.json", exported_classification_raw())


@pytest.fixture
def assessment_file(tmp_path):
    """Single saved assessment record on disk."""
    return _write_json(tmp_path / "assessment.json", saved_assessment_raw())


@pytest.fixture
def assessments_list_file(tmp_path):
    """Saved assessments store (newest first) on disk."""
    records = [
        saved_assessment_raw(id="assessment_new", star=4),
        saved_assessment_raw(id="assessment_old", star=2),
    ]
    return _write_json(tmp_path / "assessments.json", records)
