"""Pydantic models for evaluation results.

These are the records consumed downstream by status panels and
generated reports: compliance verdicts, classification verdicts, point
breakdowns, per-star gap rows and assessment progress counters.
"""

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, Field

from hotel_standards.schemas.classification import Criterion
from hotel_standards.schemas.common import Points
from hotel_standards.schemas.compliance import ComplianceRequirement

# ── Enums ────────────────────────────────────────────────────────────


class AnswerStatus(str, Enum):
    """Assessor answer for a requirement or criterion."""

    YES = "yes"
    NO = "no"
    NA = "na"


class FailureReason(str, Enum):
    """Why a classification was not achieved."""

    MANDATORY_FAILURE = "mandatory_failure"
    INSUFFICIENT_POINTS = "insufficient_points"
    INVALID_STAR = "invalid_star"


# ── Resolver output ──────────────────────────────────────────────────


class StarCriteriaBuckets(BaseModel):
    """Assessable criteria for one star and accommodation type, sorted by id."""

    mandatory: List[Criterion] = Field(default_factory=list)
    optional: List[Criterion] = Field(default_factory=list)
    all: List[Criterion] = Field(default_factory=list)
    ids: FrozenSet[str] = Field(default_factory=frozenset)


# ── Verdicts ─────────────────────────────────────────────────────────


class ComplianceResult(BaseModel):
    """Binary verdict over the baseline standard."""

    compliant: bool = Field(description="True when every mandatory requirement is met")
    failed_requirements: List[ComplianceRequirement] = Field(
        default_factory=list,
        description="Mandatory requirements answered neither 'yes' nor 'na'",
    )
    facility_type: str = Field(default="", description="Facility type the verdict applies to")

    @property
    def failed_ids(self) -> List[str]:
        return [req.id for req in self.failed_requirements]


class ClassificationResult(BaseModel):
    """Verdict for one requested star and accommodation type."""

    achieved: bool = Field(description="True when the requested star is achieved")
    star: int = Field(default=0, description="Achieved star, 0 when not achieved")
    requested_star: int = Field(default=0, description="Star that was evaluated")
    accommodation_type: str = Field(default="")
    points: Points = Field(default=0, description="Points earned over the star's criteria")
    required: Optional[Points] = Field(
        default=None, description="Minimum points required for the star"
    )
    reason: Optional[FailureReason] = Field(default=None)
    failed_mandatory: List[str] = Field(
        default_factory=list, description="Ids of unsatisfied mandatory criteria"
    )


# ── Supplementary reports ────────────────────────────────────────────


class PointsBreakdown(BaseModel):
    """Points split between mandatory and optional criteria."""

    mandatory_points_achieved: Points = 0
    optional_points_achieved: Points = 0
    mandatory_points_required: Points = 0
    optional_points_required: Points = 0


class StarGap(BaseModel):
    """Distance from one star level."""

    star: int
    min_points: Points = 0
    total_points: Points = 0
    max_points: Points = 0
    points_shortfall: Points = 0
    failed_mandatory: List[str] = Field(default_factory=list)
    achievable: bool = False


class AssessmentProgress(BaseModel):
    """Counters for an in-progress classification assessment."""

    total_points: Points = 0
    fulfilled: int = Field(default=0, description="Criteria answered 'yes'")
    missing: int = Field(default=0, description="Criteria answered 'no'")
    assessed: int = Field(default=0, description="Criteria with any answer")
    total_criteria: int = Field(default=0, description="Assessable criteria in the dataset")
    max_points: Points = 0
    mandatory_fulfilled: int = 0
    mandatory_total: int = 0
    completion_percent: float = 0.0


class MandatoryChecklistEntry(BaseModel):
    """One row of the mandatory checklist for a star."""

    criterion: Criterion
    satisfied: bool


class AssessmentSummary(BaseModel):
    """Combined verdicts for export alongside a saved assessment."""

    compliance: ComplianceResult
    classification: ClassificationResult
    eligible_star: int = Field(default=0, ge=0, le=5)
    breakdown: PointsBreakdown = Field(default_factory=PointsBreakdown)
