"""Canonical pydantic models for datasets and evaluation results."""

from hotel_standards.schemas.classification import (
    AccommodationType,
    Annotation,
    ClassificationDataset,
    ClassificationSection,
    Criterion,
    ScoringRule,
    StarLevel,
)
from hotel_standards.schemas.common import STAR_KEYS, LocalizedText
from hotel_standards.schemas.compliance import (
    ComplianceDataset,
    ComplianceRequirement,
    ComplianceSection,
)
from hotel_standards.schemas.evaluation import (
    AnswerStatus,
    AssessmentProgress,
    AssessmentSummary,
    ClassificationResult,
    ComplianceResult,
    FailureReason,
    MandatoryChecklistEntry,
    PointsBreakdown,
    StarCriteriaBuckets,
    StarGap,
)

__all__ = [
    "AccommodationType",
    "Annotation",
    "AnswerStatus",
    "AssessmentProgress",
    "AssessmentSummary",
    "ClassificationDataset",
    "ClassificationResult",
    "ClassificationSection",
    "ComplianceDataset",
    "ComplianceRequirement",
    "ComplianceResult",
    "ComplianceSection",
    "Criterion",
    "FailureReason",
    "LocalizedText",
    "MandatoryChecklistEntry",
    "PointsBreakdown",
    "STAR_KEYS",
    "ScoringRule",
    "StarCriteriaBuckets",
    "StarGap",
    "StarLevel",
]
