"""Pydantic models for the points-based star classification standard.

The canonical classification dataset holds criteria grouped into
sections, five star levels with default point thresholds, and one or
more accommodation types that can override those thresholds.  Each
criterion carries a mandatory map and an optional map keyed by star
(``"1"`` .. ``"5"``) plus the annotation codes (``A8``, ``A12`` ...) that
modify its applicability per accommodation type.
"""

from typing import Any, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hotel_standards.schemas.common import (
    DEFAULT_TYPE_KEY,
    STAR_KEYS,
    LocalizedText,
    Points,
    empty_star_map,
)

DEFAULT_CLASSIFICATION_STANDARD = "MST 125"


class ScoringRule(BaseModel):
    """Per-unit scoring: quantity x points_per_unit, capped at max_points."""

    model_config = ConfigDict(frozen=True)

    type: Literal["per_unit"] = Field(default="per_unit", description="Rule discriminant")
    points_per_unit: Points = Field(..., gt=0, description="Points awarded per unit")
    max_points: Points = Field(..., ge=0, description="Cap on awarded points")
    unit: LocalizedText = Field(default_factory=LocalizedText, description="Unit label")

    def to_raw(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "points_per_unit": self.points_per_unit,
            "max_points": self.max_points,
            "unit_uz": self.unit.uz,
            "unit_ru": self.unit.ru,
            "unit_en": self.unit.en,
        }


class Criterion(BaseModel):
    """A single classification criterion (or a non-assessable group header)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Dot-segmented identifier, e.g. '2.3'")
    title: LocalizedText = Field(default_factory=LocalizedText)
    points: Points = Field(default=0, description="Static points for a 'yes' answer")
    max_points: Points = Field(default=0, ge=0, description="Resolved maximum points")
    scoring_rule: Optional[ScoringRule] = Field(default=None)
    mandatory: Dict[str, bool] = Field(default_factory=empty_star_map)
    optional: Dict[str, bool] = Field(default_factory=lambda: empty_star_map(True))
    reference: str = Field(default="", description="Raw reference text as authored")
    reference_codes: List[str] = Field(
        default_factory=list, description="Normalized annotation codes (A<n>)"
    )
    assessable: bool = Field(default=True, description="False for pure group headers")
    is_group_header: bool = Field(default=False)
    section_id: str = Field(default="", description="Owning section id")

    @model_validator(mode="before")
    @classmethod
    def default_max_points(cls, data: Any) -> Any:
        """Resolve a missing max_points from the scoring rule, then static points."""
        if not isinstance(data, dict) or data.get("max_points") is not None:
            return data
        rule = data.get("scoring_rule")
        if isinstance(rule, ScoringRule):
            max_points = rule.max_points
        elif isinstance(rule, dict) and rule.get("max_points") is not None:
            max_points = rule["max_points"]
        else:
            points = data.get("points") or 0
            max_points = points if points > 0 else 0
        return {**data, "max_points": max_points}

    def is_mandatory_at(self, star_key: str) -> bool:
        return self.mandatory.get(star_key) is True

    def has_reference_code(self, code: str) -> bool:
        return code in self.reference_codes

    @property
    def is_per_unit(self) -> bool:
        return self.scoring_rule is not None and self.scoring_rule.type == "per_unit"

    def to_raw(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {
            "id": self.id,
            "title": self.title.model_dump(),
            "points": self.points,
            "max_points": self.max_points,
            "mandatory": {key: self.mandatory.get(key, False) for key in STAR_KEYS},
            "optional": {key: self.optional.get(key, False) for key in STAR_KEYS},
            "reference": self.reference,
            "assessable": self.assessable,
            "isGroupHeader": self.is_group_header,
        }
        if self.scoring_rule is not None:
            raw["scoring_rule"] = self.scoring_rule.to_raw()
        return raw


class ClassificationSection(BaseModel):
    """Ordered group of criteria."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="")
    name: LocalizedText = Field(default_factory=LocalizedText)
    reference: str = Field(default="", description="Section-level reference text")
    criteria: List[Criterion] = Field(default_factory=list)

    def to_raw(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name.model_dump(),
            "reference": self.reference,
            "criteria": [criterion.to_raw() for criterion in self.criteria],
        }


class StarLevel(BaseModel):
    """One of the five classification tiers."""

    model_config = ConfigDict(frozen=True)

    star: int = Field(..., ge=1, le=5)
    label: str = Field(default="")
    min_total_points: Points = Field(default=0, description="Default point threshold")
    mandatory_ids: List[str] = Field(
        default_factory=list,
        description="Assessable criteria mandatory at this star (recomputed on load)",
    )

    def to_raw(self) -> Dict[str, Any]:
        return {
            "star": self.star,
            "label": self.label,
            "minTotalPoints": self.min_total_points,
            "mandatoryIds": list(self.mandatory_ids),
        }


class AccommodationType(BaseModel):
    """Property category with its own per-star point thresholds."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(...)
    name: LocalizedText = Field(default_factory=LocalizedText)
    min_scores: Dict[int, Points] = Field(
        default_factory=dict, description="Star -> required points for this type"
    )

    def to_raw(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name.model_dump(),
            "minScores": {str(star): points for star, points in self.min_scores.items()},
        }


class Annotation(BaseModel):
    """Regulatory footnote referenced by criteria."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(...)
    text: LocalizedText = Field(default_factory=LocalizedText)

    def to_raw(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "text_uz": self.text.uz,
            "text_ru": self.text.ru,
            "text_en": self.text.en,
        }


class ClassificationDataset(BaseModel):
    """Canonical classification dataset (read-only after normalization)."""

    model_config = ConfigDict(frozen=True)

    standard: str = Field(default=DEFAULT_CLASSIFICATION_STANDARD)
    sections: List[ClassificationSection] = Field(default_factory=list)
    star_levels: List[StarLevel] = Field(default_factory=list)
    accommodation_types: Dict[str, AccommodationType] = Field(default_factory=dict)
    default_accommodation_type: str = Field(default=DEFAULT_TYPE_KEY)
    max_points: Optional[Points] = Field(
        default=None, description="Declared dataset-wide maximum, if any"
    )
    annotations: List[Annotation] = Field(default_factory=list)

    def iter_criteria(self, assessable_only: bool = False) -> Iterator[Criterion]:
        for section in self.sections:
            for criterion in section.criteria:
                if assessable_only and not criterion.assessable:
                    continue
                yield criterion

    def get_star_level(self, star: Any) -> Optional[StarLevel]:
        for level in self.star_levels:
            if str(level.star) == str(star):
                return level
        return None

    def get_annotation_text(self, code: str, lang: str = "en") -> str:
        """Return the localized text of annotation ``code`` (case-insensitive)."""
        target = str(code or "").upper()
        if not target:
            return ""
        for annotation in self.annotations:
            if annotation.code.upper() == target:
                return annotation.text.get(lang)
        return ""

    def to_raw(self) -> Dict[str, Any]:
        """Dump in the app-native shape accepted by the normalizer."""
        raw: Dict[str, Any] = {
            "standard": self.standard,
            "sections": [section.to_raw() for section in self.sections],
            "starLevels": [level.to_raw() for level in self.star_levels],
            "accommodationTypes": {
                key: acc_type.to_raw() for key, acc_type in self.accommodation_types.items()
            },
            "defaultAccommodationType": self.default_accommodation_type,
            "annotations": [annotation.to_raw() for annotation in self.annotations],
        }
        if self.max_points is not None:
            raw["maxPoints"] = self.max_points
        return raw
