"""Hotel standards evaluation engine.

Normalizes compliance (O'z DSt 3220) and star classification (MST 125)
datasets, resolves which criteria are mandatory per star and property
type, and evaluates assessor answers against both standards.
"""

__version__ = "0.1.0"

from hotel_standards.assessment import (
    AssessmentRecord,
    AssessmentState,
    build_assessment_summary,
)
from hotel_standards.evaluation import (
    ClassificationEvaluator,
    evaluate_3220,
    evaluate_3296,
    evaluate_compliance,
    get_eligible_star,
)
from hotel_standards.loader import (
    DatasetLoadError,
    load_classification_dataset,
    load_compliance_dataset,
)
from hotel_standards.normalization import (
    DatasetError,
    InvalidDatasetError,
    UnsupportedFormatError,
    normalize_classification_data,
    normalize_compliance_data,
)
from hotel_standards.rules import AnnotationRuleTable, CriterionRuleResolver

__all__ = [
    "AnnotationRuleTable",
    "AssessmentRecord",
    "AssessmentState",
    "ClassificationEvaluator",
    "CriterionRuleResolver",
    "DatasetError",
    "DatasetLoadError",
    "InvalidDatasetError",
    "UnsupportedFormatError",
    "build_assessment_summary",
    "evaluate_3220",
    "evaluate_3296",
    "evaluate_compliance",
    "get_eligible_star",
    "load_classification_dataset",
    "load_compliance_dataset",
    "normalize_classification_data",
    "normalize_compliance_data",
]
