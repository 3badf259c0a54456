"""Binary compliance verdict over the baseline standard (O'z DSt 3220)."""

import logging
from typing import Any, List, Mapping, Optional

from hotel_standards.rules.resolver import (
    is_compliance_requirement_mandatory,
    resolve_facility_type,
)
from hotel_standards.schemas.compliance import ComplianceDataset, ComplianceRequirement
from hotel_standards.schemas.evaluation import AnswerStatus, ComplianceResult

logger = logging.getLogger(__name__)

_PASSING_ANSWERS = frozenset({AnswerStatus.YES.value, AnswerStatus.NA.value})


def _passes(answer: Any) -> bool:
    if isinstance(answer, AnswerStatus):
        answer = answer.value
    return answer in _PASSING_ANSWERS


def evaluate_compliance(
    dataset: ComplianceDataset,
    facility_type: Optional[str],
    compliance_answers: Optional[Mapping[str, Any]] = None,
) -> ComplianceResult:
    """Check every requirement mandatory for ``facility_type``.

    A mandatory requirement passes only when answered 'yes' or 'na';
    'no' and unanswered both fail.  Requirements optional for the facility
    type are ignored.  An undeclared facility type falls back to the
    dataset default.
    """
    answers = compliance_answers or {}
    type_key = resolve_facility_type(dataset, facility_type)

    failed: List[ComplianceRequirement] = []
    checked = 0
    for requirement in dataset.iter_requirements():
        if not is_compliance_requirement_mandatory(requirement, type_key):
            continue
        checked += 1
        if not _passes(answers.get(requirement.id)):
            failed.append(requirement)

    logger.debug(
        f"Compliance for '{type_key}': {checked} mandatory requirements, {len(failed)} failed"
    )
    return ComplianceResult(
        compliant=not failed,
        failed_requirements=failed,
        facility_type=type_key,
    )


evaluate_3220 = evaluate_compliance
