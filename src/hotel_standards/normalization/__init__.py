"""Dataset normalization: raw JSON documents -> canonical datasets.

Architecture:
    raw JSON -> detect shape -> intermediate record -> canonical dataset
                                                          |
                                                          v
                                          rules / scoring / evaluation
"""

from hotel_standards.normalization.classification import (
    detect_classification_shape,
    normalize_classification_data,
    parse_classification_document,
)
from hotel_standards.normalization.compliance import (
    detect_compliance_shape,
    normalize_compliance_data,
    parse_compliance_document,
)
from hotel_standards.normalization.errors import (
    DatasetError,
    InvalidDatasetError,
    UnsupportedFormatError,
)
from hotel_standards.normalization.fields import (
    normalize_quantity_map,
    normalize_quantity_value,
    normalize_reference_codes,
    normalize_scoring_rule,
)
from hotel_standards.normalization.shapes import DatasetShape, NormalizationOutcome

__all__ = [
    "DatasetError",
    "DatasetShape",
    "InvalidDatasetError",
    "NormalizationOutcome",
    "UnsupportedFormatError",
    "detect_classification_shape",
    "detect_compliance_shape",
    "normalize_classification_data",
    "normalize_compliance_data",
    "normalize_quantity_map",
    "normalize_quantity_value",
    "normalize_reference_codes",
    "normalize_scoring_rule",
    "parse_classification_document",
    "parse_compliance_document",
]
