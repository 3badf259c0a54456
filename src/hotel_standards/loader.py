"""Read dataset and assessment JSON files from disk."""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from hotel_standards.assessment import AssessmentRecord
from hotel_standards.normalization.classification import normalize_classification_data
from hotel_standards.normalization.compliance import normalize_compliance_data
from hotel_standards.normalization.errors import DatasetError
from hotel_standards.schemas.classification import ClassificationDataset
from hotel_standards.schemas.common import DEFAULT_TYPE_KEY
from hotel_standards.schemas.compliance import ComplianceDataset

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DatasetLoadError(DatasetError):
    """Raised when a file is missing or is not valid JSON."""


def load_json_document(path: PathLike) -> Any:
    """Read and parse a UTF-8 JSON file.

    Raises:
        DatasetLoadError: If the file cannot be read or parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DatasetLoadError(f"File not found: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Invalid JSON in {file_path}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise DatasetLoadError(f"Failed to read {file_path}: {e}")


def load_compliance_dataset(path: PathLike) -> ComplianceDataset:
    """Load and normalize a compliance dataset file."""
    dataset = normalize_compliance_data(load_json_document(path))
    logger.info(f"Loaded compliance dataset {dataset.standard} from {path}")
    return dataset


def load_classification_dataset(path: PathLike) -> ClassificationDataset:
    """Load and normalize a classification dataset file."""
    dataset = normalize_classification_data(load_json_document(path))
    logger.info(f"Loaded classification dataset {dataset.standard} from {path}")
    return dataset


def load_assessment_record(
    path: PathLike,
    record_id: Optional[str] = None,
    default_accommodation_type: str = DEFAULT_TYPE_KEY,
    default_facility_type: str = DEFAULT_TYPE_KEY,
) -> AssessmentRecord:
    """Load one saved assessment.

    The file holds either a single record object or a list of records
    (newest first).  With a list, ``record_id`` selects the record; without
    it the first record is used.

    Raises:
        DatasetLoadError: If the file is unreadable, empty or has no matching record.
    """
    raw = load_json_document(path)
    if isinstance(raw, list):
        records = [item for item in raw if isinstance(item, dict)]
        if record_id is not None:
            records = [item for item in records if item.get("id") == record_id]
        if not records:
            target = f"'{record_id}'" if record_id is not None else "any record"
            raise DatasetLoadError(f"No assessment {target} in {path}")
        raw = records[0]
    if not isinstance(raw, dict):
        raise DatasetLoadError(f"Assessment file {path} must hold an object or a list of objects")

    return AssessmentRecord.from_raw(
        raw,
        default_accommodation_type=default_accommodation_type,
        default_facility_type=default_facility_type,
    )
