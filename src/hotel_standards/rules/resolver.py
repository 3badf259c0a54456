"""Criterion rule resolver.

Decides, for an explicit (star, accommodation type) or facility type,
which requirements and criteria are mandatory.  Selection state is never
read implicitly: every method takes the star and type it works on.
"""

import logging
import math
import re
from functools import cmp_to_key
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from hotel_standards.rules.annotations import AnnotationRuleTable
from hotel_standards.schemas.classification import (
    AccommodationType,
    ClassificationDataset,
    Criterion,
    StarLevel,
)
from hotel_standards.schemas.common import STAR_KEYS, Points
from hotel_standards.schemas.compliance import (
    MANDATORY_MARKER,
    ComplianceDataset,
    ComplianceRequirement,
)
from hotel_standards.schemas.evaluation import StarCriteriaBuckets

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


# ── Ordering ─────────────────────────────────────────────────────────


def _id_component(part: str) -> float:
    if not part.strip():
        return 0
    if "_" in part:
        return -1
    try:
        value = float(part)
    except ValueError:
        return -1
    return value if math.isfinite(value) else -1


def _natural_key(value: str) -> List[Union[int, str]]:
    return [int(chunk) if chunk.isdigit() else chunk.lower() for chunk in _DIGITS.split(value)]


def compare_criterion_ids(a: Any, b: Any) -> int:
    """Compare dot-segmented ids numerically ('2.10' after '2.9').

    Missing or non-numeric components count as -1, so '2' sorts before
    '2.1'; an empty component counts as 0.  Ties fall back to a natural
    string comparison.
    """
    left, right = str(a), str(b)
    left_parts = left.split(".")
    right_parts = right.split(".")
    for i in range(max(len(left_parts), len(right_parts))):
        lv = _id_component(left_parts[i]) if i < len(left_parts) else -1
        rv = _id_component(right_parts[i]) if i < len(right_parts) else -1
        if lv != rv:
            return -1 if lv < rv else 1

    left_key, right_key = _natural_key(left), _natural_key(right)
    if left_key != right_key:
        return -1 if left_key < right_key else 1
    return (left > right) - (left < right)


criterion_sort_key = cmp_to_key(compare_criterion_ids)


def sort_criteria(criteria: List[Criterion]) -> List[Criterion]:
    return sorted(criteria, key=lambda criterion: criterion_sort_key(criterion.id))


def strict_star_key(star: Any) -> Optional[str]:
    """'1'..'5' for an integral star in range, else None.

    Numeric strings such as '3.0' or ' 4 ' are accepted.
    """
    if isinstance(star, bool):
        return None
    if isinstance(star, int):
        key = str(star)
    elif isinstance(star, float) and star.is_integer():
        key = str(int(star))
    elif isinstance(star, str):
        if "_" in star:
            return None
        try:
            value = float(star)
        except ValueError:
            return None
        if not value.is_integer():
            return None
        key = str(int(value))
    else:
        return None
    return key if key in STAR_KEYS else None


# ── Compliance ───────────────────────────────────────────────────────


def is_compliance_requirement_mandatory(
    requirement: ComplianceRequirement, facility_type: str
) -> bool:
    """Mandatory iff the applicability marker for ``facility_type`` is '+'.

    Requirements without an applicability map use their static flag.
    """
    if requirement.applicability is not None:
        return requirement.applicability.get(facility_type) == MANDATORY_MARKER
    return requirement.mandatory


def resolve_facility_type(dataset: ComplianceDataset, facility_type: Optional[str]) -> str:
    """Return ``facility_type`` if the dataset declares it, else the default."""
    if facility_type and facility_type in dataset.facility_types:
        return facility_type
    if dataset.default_facility_type in dataset.facility_types:
        return dataset.default_facility_type
    return next(iter(dataset.facility_types), dataset.default_facility_type)


def is_criterion_mandatory_for_accommodation_type(
    criterion: Criterion,
    star: Any,
    accommodation_type: str,
    rules: Optional[AnnotationRuleTable] = None,
) -> bool:
    """Baseline ``criterion.mandatory[star]`` with annotation overrides applied."""
    star_key = strict_star_key(star)
    if star_key is None:
        return False
    table = rules if rules is not None else AnnotationRuleTable.default()
    return table.apply(
        criterion.is_mandatory_at(star_key),
        criterion.reference_codes,
        accommodation_type,
    )


# ── Classification ───────────────────────────────────────────────────


class CriterionRuleResolver:
    """Mandatory/optional resolution over one classification dataset."""

    def __init__(
        self,
        dataset: ClassificationDataset,
        rules: Optional[AnnotationRuleTable] = None,
    ):
        """Initialize the resolver.

        Args:
            dataset: Normalized classification dataset.
            rules: Annotation override table. Uses the default table if not provided.
        """
        self.dataset = dataset
        self.rules = rules if rules is not None else AnnotationRuleTable.default()
        self._criteria = sort_criteria(list(dataset.iter_criteria(assessable_only=True)))
        self._by_id: Dict[str, Criterion] = {}
        for criterion in dataset.iter_criteria():
            self._by_id.setdefault(criterion.id, criterion)

    @property
    def assessable_criteria(self) -> List[Criterion]:
        """All assessable criteria, sorted by id."""
        return list(self._criteria)

    def get_criterion_by_id(self, criterion_id: Any) -> Optional[Criterion]:
        return self._by_id.get(str(criterion_id))

    def get_star_level(self, star: Any) -> Optional[StarLevel]:
        star_key = strict_star_key(star)
        if star_key is None:
            return None
        return self.dataset.get_star_level(star_key)

    def resolve_accommodation_type(self, accommodation_type: Optional[str]) -> str:
        """Return ``accommodation_type`` if declared, else the dataset default."""
        types = self.dataset.accommodation_types
        if accommodation_type and accommodation_type in types:
            return accommodation_type
        if accommodation_type:
            logger.debug(
                f"Unknown accommodation type '{accommodation_type}', "
                f"using '{self.dataset.default_accommodation_type}'"
            )
        if self.dataset.default_accommodation_type in types:
            return self.dataset.default_accommodation_type
        return next(iter(types), self.dataset.default_accommodation_type)

    def get_accommodation_type(self, accommodation_type: Optional[str]) -> Optional[AccommodationType]:
        return self.dataset.accommodation_types.get(
            self.resolve_accommodation_type(accommodation_type)
        )

    def is_mandatory_for_accommodation_type(
        self, criterion: Criterion, star: Any, accommodation_type: str
    ) -> bool:
        return is_criterion_mandatory_for_accommodation_type(
            criterion, star, accommodation_type, self.rules
        )

    def get_star_criteria_buckets(
        self, star: Any, accommodation_type: Optional[str] = None
    ) -> StarCriteriaBuckets:
        """Partition assessable criteria into mandatory/optional for a star.

        An invalid star yields empty buckets.
        """
        star_key = strict_star_key(star)
        if star_key is None:
            return StarCriteriaBuckets()
        type_key = self.resolve_accommodation_type(accommodation_type)

        mandatory: List[Criterion] = []
        optional: List[Criterion] = []
        for criterion in self._criteria:
            if self.is_mandatory_for_accommodation_type(criterion, star_key, type_key):
                mandatory.append(criterion)
            else:
                optional.append(criterion)
        return StarCriteriaBuckets(
            mandatory=mandatory,
            optional=optional,
            all=list(self._criteria),
            ids=frozenset(criterion.id for criterion in self._criteria),
        )

    def get_mandatory_ids_for_level(
        self, star: Any, accommodation_type: Optional[str] = None
    ) -> List[str]:
        return [c.id for c in self.get_star_criteria_buckets(star, accommodation_type).mandatory]

    def get_min_points_for_star(
        self, star: Any, accommodation_type: Optional[str] = None
    ) -> Points:
        """Type threshold for ``star`` if declared, else the level default, else 0."""
        star_key = strict_star_key(star)
        if star_key is None:
            return 0
        acc_type = self.get_accommodation_type(accommodation_type)
        if acc_type is not None:
            value = acc_type.min_scores.get(int(star_key))
            if value is not None and math.isfinite(value):
                return value
        level = self.dataset.get_star_level(star_key)
        if level is not None:
            return level.min_total_points
        return 0

    def build_mandatory_star_map(self, accommodation_type: Optional[str] = None) -> Dict[str, Set[int]]:
        """Criterion id -> stars at which it is mandatory for the type."""
        type_key = self.resolve_accommodation_type(accommodation_type)
        star_map: Dict[str, Set[int]] = {}
        for star_key in STAR_KEYS:
            for criterion in self._criteria:
                if self.is_mandatory_for_accommodation_type(criterion, star_key, type_key):
                    star_map.setdefault(criterion.id, set()).add(int(star_key))
        return star_map

    def count_mandatory_per_star(self, accommodation_type: Optional[str] = None) -> List[Tuple[int, int]]:
        return [
            (int(star_key), len(self.get_mandatory_ids_for_level(star_key, accommodation_type)))
            for star_key in STAR_KEYS
        ]


def build_compliance_mandatory_map(
    dataset: ComplianceDataset, facility_type: str
) -> Mapping[str, bool]:
    """Requirement id -> mandatory flag under ``facility_type``."""
    return {
        requirement.id: is_compliance_requirement_mandatory(requirement, facility_type)
        for requirement in dataset.iter_requirements()
    }
