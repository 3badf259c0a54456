"""Assessment answer state and saved assessment records.

``AssessmentState`` is the caller-owned, mutable side of an assessment:
the selected star and types plus the three answer maps.  Engine
functions only ever read it.  ``AssessmentRecord`` is the saved form,
using the camelCase keys of the stored JSON.
"""

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hotel_standards.evaluation.classification import ClassificationEvaluator
from hotel_standards.evaluation.compliance import evaluate_compliance
from hotel_standards.normalization.fields import (
    normalize_quantity_map,
    normalize_quantity_value,
    to_number,
)
from hotel_standards.rules.annotations import AnnotationRuleTable
from hotel_standards.schemas.classification import ClassificationDataset
from hotel_standards.schemas.common import DEFAULT_TYPE_KEY, Points
from hotel_standards.schemas.compliance import ComplianceDataset
from hotel_standards.schemas.evaluation import AnswerStatus, AssessmentSummary

logger = logging.getLogger(__name__)

DEFAULT_STAR = 3


def _parse_answer_map(raw: Any, label: str) -> Dict[str, AnswerStatus]:
    """Keep answers that are valid statuses; drop the rest with a warning."""
    answers: Dict[str, AnswerStatus] = {}
    if not isinstance(raw, Mapping):
        return answers
    for key, value in raw.items():
        if value is None or value == "":
            continue
        try:
            answers[str(key)] = AnswerStatus(value)
        except ValueError:
            logger.warning(f"Ignoring invalid {label} answer {value!r} for '{key}'")
    return answers


def _non_blank(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


class AssessmentState(BaseModel):
    """Current selections and answers for one assessment."""

    model_config = ConfigDict(validate_assignment=True)

    star: int = Field(default=DEFAULT_STAR, ge=1, le=5, description="Selected star")
    accommodation_type: str = Field(default=DEFAULT_TYPE_KEY)
    compliance_facility_type: str = Field(default=DEFAULT_TYPE_KEY)
    compliance_answers: Dict[str, AnswerStatus] = Field(default_factory=dict)
    classification_answers: Dict[str, AnswerStatus] = Field(default_factory=dict)
    classification_quantities: Dict[str, int] = Field(
        default_factory=dict, description="Positive unit counts only"
    )

    def set_compliance_answer(self, requirement_id: str, status: Optional[Any]) -> None:
        """Record an answer; ``None`` clears it.

        Raises:
            ValueError: If ``status`` is not yes/no/na.
        """
        key = str(requirement_id)
        if status is None:
            self.compliance_answers.pop(key, None)
            return
        self.compliance_answers[key] = AnswerStatus(status)

    def set_classification_answer(self, criterion_id: str, status: Optional[Any]) -> None:
        """Record an answer; ``None`` clears it.

        Raises:
            ValueError: If ``status`` is not yes/no/na.
        """
        key = str(criterion_id)
        if status is None:
            self.classification_answers.pop(key, None)
            return
        self.classification_answers[key] = AnswerStatus(status)

    def set_classification_quantity(self, criterion_id: str, raw_value: Any) -> int:
        """Store a positive floored quantity, or remove the entry. Returns the stored value."""
        key = str(criterion_id)
        quantity = normalize_quantity_value(raw_value)
        if quantity > 0:
            self.classification_quantities[key] = quantity
        else:
            self.classification_quantities.pop(key, None)
        return quantity

    def get_classification_quantity(self, criterion_id: str) -> int:
        return normalize_quantity_value(self.classification_quantities.get(str(criterion_id)))

    def clear(self) -> None:
        self.compliance_answers.clear()
        self.classification_answers.clear()
        self.classification_quantities.clear()


class RecordSummary(BaseModel):
    """Headline numbers stored with a saved record."""

    model_config = ConfigDict(populate_by_name=True)

    points: Points = 0
    achieved: bool = False
    achieved_star: int = Field(default=0, alias="achievedStar")


def _parse_summary(raw: Any) -> Optional[RecordSummary]:
    """Stored headline, or None when absent or malformed."""
    if not isinstance(raw, Mapping):
        return None
    try:
        return RecordSummary.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed assessment summary: {e.error_count()} errors")
        return None


class AssessmentRecord(BaseModel):
    """A saved assessment, as persisted by the application."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default="")
    hotel_name: str = Field(default="Hotel", alias="hotelName")
    star: int = Field(default=DEFAULT_STAR)
    accommodation_type: str = Field(default=DEFAULT_TYPE_KEY, alias="accommodationType")
    compliance_facility_type: str = Field(default=DEFAULT_TYPE_KEY, alias="complianceFacilityType")
    assessment_data: Dict[str, Any] = Field(default_factory=dict, alias="assessmentData")
    compliance_answers: Dict[str, AnswerStatus] = Field(default_factory=dict, alias="complianceAnswers")
    classification_answers: Dict[str, AnswerStatus] = Field(
        default_factory=dict, alias="classificationAnswers"
    )
    classification_quantities: Dict[str, int] = Field(
        default_factory=dict, alias="classificationQuantities"
    )
    summary: Optional[RecordSummary] = Field(default=None)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    created_by: Optional[str] = Field(default=None, alias="createdBy")

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Any],
        default_star: int = DEFAULT_STAR,
        default_accommodation_type: str = DEFAULT_TYPE_KEY,
        default_facility_type: str = DEFAULT_TYPE_KEY,
    ) -> "AssessmentRecord":
        """Build a record from stored JSON, tolerating missing or malformed fields.

        A star outside 1..5 or a blank type falls back to the given defaults.
        Quantities are normalized; invalid answers are dropped.
        """
        star_number = to_number(raw.get("star"))
        star = int(star_number) if star_number and 1 <= star_number <= 5 else default_star
        data = raw.get("assessmentData")
        data = dict(data) if isinstance(data, Mapping) else {}
        hotel_name = _non_blank(raw.get("hotelName")) or _non_blank(data.get("hotelName"))
        return cls(
            id=str(raw.get("id") or ""),
            hotel_name=hotel_name or "Hotel",
            star=star,
            accommodation_type=_non_blank(raw.get("accommodationType")) or default_accommodation_type,
            compliance_facility_type=_non_blank(raw.get("complianceFacilityType"))
            or default_facility_type,
            assessment_data=data,
            compliance_answers=_parse_answer_map(raw.get("complianceAnswers"), "compliance"),
            classification_answers=_parse_answer_map(
                raw.get("classificationAnswers"), "classification"
            ),
            classification_quantities=normalize_quantity_map(raw.get("classificationQuantities")),
            summary=_parse_summary(raw.get("summary")),
            created_at=_non_blank(raw.get("createdAt")),
            created_by=_non_blank(raw.get("createdBy")),
        )

    def to_state(self) -> AssessmentState:
        return AssessmentState(
            star=self.star,
            accommodation_type=self.accommodation_type,
            compliance_facility_type=self.compliance_facility_type,
            compliance_answers=dict(self.compliance_answers),
            classification_answers=dict(self.classification_answers),
            classification_quantities=dict(self.classification_quantities),
        )

    def to_raw(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def create_record_id(prefix: str = "assessment") -> str:
    """``<prefix>_<base36 ms timestamp>_<random>``."""
    millis = int(time.time() * 1000)
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    encoded = ""
    while millis:
        millis, rem = divmod(millis, 36)
        encoded = digits[rem] + encoded
    return f"{prefix}_{encoded or '0'}_{secrets.token_hex(3)}"


def create_assessment_record(
    state: AssessmentState,
    classification: ClassificationDataset,
    hotel_name: str = "Hotel",
    created_by: str = "system",
    assessment_data: Optional[Mapping[str, Any]] = None,
    rules: Optional[AnnotationRuleTable] = None,
) -> AssessmentRecord:
    """Snapshot ``state`` into a record with its classification headline."""
    result = ClassificationEvaluator(classification, rules).evaluate(
        state.star,
        state.accommodation_type,
        state.classification_answers,
        state.classification_quantities,
    )
    return AssessmentRecord(
        id=create_record_id(),
        hotel_name=hotel_name or "Hotel",
        star=state.star,
        accommodation_type=state.accommodation_type,
        compliance_facility_type=state.compliance_facility_type,
        assessment_data=dict(assessment_data or {}),
        compliance_answers=dict(state.compliance_answers),
        classification_answers=dict(state.classification_answers),
        classification_quantities=dict(state.classification_quantities),
        summary=RecordSummary(
            points=result.points,
            achieved=result.achieved,
            achieved_star=result.star if result.achieved else 0,
        ),
        created_at=datetime.now(timezone.utc).isoformat(),
        created_by=created_by,
    )


def build_assessment_summary(
    compliance: ComplianceDataset,
    classification: ClassificationDataset,
    state: AssessmentState,
    rules: Optional[AnnotationRuleTable] = None,
) -> AssessmentSummary:
    """Run both evaluators over ``state`` and collect the verdicts."""
    evaluator = ClassificationEvaluator(classification, rules)
    answers = state.classification_answers
    quantities = state.classification_quantities
    return AssessmentSummary(
        compliance=evaluate_compliance(
            compliance, state.compliance_facility_type, state.compliance_answers
        ),
        classification=evaluator.evaluate(state.star, state.accommodation_type, answers, quantities),
        eligible_star=evaluator.get_eligible_star(state.accommodation_type, answers, quantities),
        breakdown=evaluator.get_points_breakdown(
            state.star, state.accommodation_type, answers, quantities
        ),
    )
