"""Pydantic models for the baseline compliance standard (O'z DSt 3220).

A compliance dataset is a flat checklist grouped into sections.  Each
requirement is either statically mandatory or carries an applicability
map keyed by facility type, where the ``'+'`` marker means the
requirement is mandatory for that type.
"""

from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from hotel_standards.schemas.common import DEFAULT_TYPE_KEY, LocalizedText

MANDATORY_MARKER = "+"

DEFAULT_COMPLIANCE_STANDARD = "O'z DSt 3220:2023"


class ComplianceRequirement(BaseModel):
    """A single requirement of the baseline standard."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Requirement identifier, unique within the dataset")
    title: LocalizedText = Field(default_factory=LocalizedText, description="Localized title")
    mandatory: bool = Field(
        default=True,
        description="Static mandatory flag (used when no applicability map exists)",
    )
    applicability: Optional[Dict[str, str]] = Field(
        default=None,
        description="Facility type key -> marker; '+' means mandatory for that type",
    )
    notes: str = Field(default="", description="Free-text notes")
    section_id: str = Field(default="", description="Owning section id")

    def to_raw(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {
            "id": self.id,
            "title": self.title.model_dump(),
            "mandatory": self.mandatory,
            "notes": self.notes,
        }
        if self.applicability is not None:
            raw["applicability"] = dict(self.applicability)
        return raw


class ComplianceSection(BaseModel):
    """Ordered group of requirements."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Section identifier")
    name: LocalizedText = Field(default_factory=LocalizedText, description="Localized name")
    requirements: List[ComplianceRequirement] = Field(default_factory=list)

    def to_raw(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name.model_dump(),
            "requirements": [req.to_raw() for req in self.requirements],
        }


class ComplianceDataset(BaseModel):
    """Canonical compliance dataset (read-only after normalization)."""

    model_config = ConfigDict(frozen=True)

    standard: str = Field(default=DEFAULT_COMPLIANCE_STANDARD)
    title: LocalizedText = Field(default_factory=LocalizedText)
    sections: List[ComplianceSection] = Field(default_factory=list)
    facility_types: Dict[str, LocalizedText] = Field(
        default_factory=dict, description="Facility type key -> localized name"
    )
    default_facility_type: str = Field(default=DEFAULT_TYPE_KEY)
    applicability_legend: Optional[Dict[str, Any]] = Field(
        default=None, description="Legend of applicability markers, carried through as-is"
    )

    def iter_requirements(self) -> Iterator[ComplianceRequirement]:
        for section in self.sections:
            yield from section.requirements

    def get_requirement(self, requirement_id: str) -> Optional[ComplianceRequirement]:
        target = str(requirement_id)
        for requirement in self.iter_requirements():
            if requirement.id == target:
                return requirement
        return None

    def to_raw(self) -> Dict[str, Any]:
        """Dump in the app-native shape accepted by the normalizer."""
        raw: Dict[str, Any] = {
            "standard": self.standard,
            "title_uz": self.title.uz,
            "title_ru": self.title.ru,
            "title_en": self.title.en,
            "sections": [section.to_raw() for section in self.sections],
            "facilityTypes": {
                key: name.model_dump() for key, name in self.facility_types.items()
            },
            "defaultFacilityType": self.default_facility_type,
        }
        if self.applicability_legend is not None:
            raw["applicabilityLegend"] = dict(self.applicability_legend)
        return raw
