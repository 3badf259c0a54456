"""Declarative annotation override table.

Regulatory footnotes narrow or widen a criterion's baseline
applicability for specific accommodation types.  Each rule says: when a
criterion carries ``code`` and the selected accommodation type is
``accommodation_type``, apply ``effect``.

Rules are applied in two passes:
1. Exemptions  -> mandatory becomes False
2. Inclusions  -> mandatory becomes True

so a criterion carrying both an exemption and an inclusion code for the
same type ends up mandatory (inclusion wins).
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class RuleEffect(str, Enum):
    """What a matching annotation does to the baseline mandatory flag."""

    EXEMPT = "exempt"
    INCLUDE = "include"


class AnnotationRule(BaseModel):
    """One row of the override table."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, description="Annotation code, e.g. 'A8'")
    accommodation_type: str = Field(..., min_length=1, description="Accommodation type key")
    effect: RuleEffect = Field(..., description="exempt or include")
    description: Optional[str] = Field(default=None, description="Human-readable note")

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


DEFAULT_ANNOTATION_RULES: List[AnnotationRule] = [
    AnnotationRule(
        code="A8",
        accommodation_type="aparthotels",
        effect=RuleEffect.EXEMPT,
        description="Not mandatory for aparthotels",
    ),
    AnnotationRule(
        code="A11",
        accommodation_type="specialized",
        effect=RuleEffect.EXEMPT,
        description="Not mandatory for specialized accommodation",
    ),
    AnnotationRule(
        code="A9",
        accommodation_type="aparthotels",
        effect=RuleEffect.INCLUDE,
        description="Mandatory for aparthotels",
    ),
    AnnotationRule(
        code="A12",
        accommodation_type="specialized",
        effect=RuleEffect.INCLUDE,
        description="Mandatory for specialized accommodation",
    ),
]


class AnnotationRuleTable:
    """Evaluates annotation rules against a criterion's reference codes."""

    def __init__(self, rules: Optional[Iterable[AnnotationRule]] = None):
        """Initialize the table.

        Args:
            rules: Override rules. Uses ``DEFAULT_ANNOTATION_RULES`` if not provided.
        """
        self.rules: List[AnnotationRule] = list(
            DEFAULT_ANNOTATION_RULES if rules is None else rules
        )
        self._by_type: Dict[str, Dict[RuleEffect, List[str]]] = {}
        for rule in self.rules:
            by_effect = self._by_type.setdefault(rule.accommodation_type, {})
            by_effect.setdefault(rule.effect, []).append(rule.code)

    @classmethod
    def default(cls) -> "AnnotationRuleTable":
        return cls(DEFAULT_ANNOTATION_RULES)

    @classmethod
    def from_dicts(cls, rows: Iterable[Dict[str, Any]]) -> "AnnotationRuleTable":
        """Create a table from plain dictionaries (e.g. loaded from YAML)."""
        return cls(AnnotationRule.model_validate(row) for row in rows)

    def codes_for(self, accommodation_type: str, effect: RuleEffect) -> List[str]:
        return list(self._by_type.get(accommodation_type, {}).get(effect, []))

    def apply(
        self,
        baseline: bool,
        reference_codes: Sequence[str],
        accommodation_type: str,
    ) -> bool:
        """Apply exemptions then inclusions to a baseline mandatory flag."""
        type_key = str(accommodation_type or "").strip()
        by_effect = self._by_type.get(type_key)
        if not by_effect or not reference_codes:
            return baseline

        mandatory = baseline
        for code in by_effect.get(RuleEffect.EXEMPT, []):
            if code in reference_codes:
                mandatory = False
        for code in by_effect.get(RuleEffect.INCLUDE, []):
            if code in reference_codes:
                mandatory = True
        return mandatory

    def __len__(self) -> int:
        return len(self.rules)
