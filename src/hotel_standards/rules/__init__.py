"""Mandatory/optional resolution for requirements and criteria."""

from hotel_standards.rules.annotations import (
    DEFAULT_ANNOTATION_RULES,
    AnnotationRule,
    AnnotationRuleTable,
    RuleEffect,
)
from hotel_standards.rules.resolver import (
    CriterionRuleResolver,
    build_compliance_mandatory_map,
    compare_criterion_ids,
    criterion_sort_key,
    is_compliance_requirement_mandatory,
    is_criterion_mandatory_for_accommodation_type,
    resolve_facility_type,
    sort_criteria,
    strict_star_key,
)

__all__ = [
    "DEFAULT_ANNOTATION_RULES",
    "AnnotationRule",
    "AnnotationRuleTable",
    "CriterionRuleResolver",
    "RuleEffect",
    "build_compliance_mandatory_map",
    "compare_criterion_ids",
    "criterion_sort_key",
    "is_compliance_requirement_mandatory",
    "is_criterion_mandatory_for_accommodation_type",
    "resolve_facility_type",
    "sort_criteria",
    "strict_star_key",
]
