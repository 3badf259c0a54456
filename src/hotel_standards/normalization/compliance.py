"""Normalizer for baseline compliance datasets (O'z DSt 3220).

Two input shapes are supported:

* native   - ``sections[].requirements[]`` as authored for the application,
  optionally with ``facilityTypes`` / ``defaultFacilityType``.
* exported - ``facility_types`` plus ``sections[].items[]`` where every
  item carries an ``applicability`` map of facility type -> marker.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from hotel_standards.normalization.errors import (
    InvalidDatasetError,
    UnsupportedFormatError,
)
from hotel_standards.normalization.fields import (
    as_list,
    as_mapping,
    localized_fields,
    localized_text,
    pick_localized,
    to_text,
)
from hotel_standards.normalization.shapes import DatasetShape, NormalizationOutcome
from hotel_standards.schemas.common import DEFAULT_TYPE_KEY, DEFAULT_TYPE_NAME, LocalizedText
from hotel_standards.schemas.compliance import (
    DEFAULT_COMPLIANCE_STANDARD,
    MANDATORY_MARKER,
    ComplianceDataset,
    ComplianceRequirement,
    ComplianceSection,
)

logger = logging.getLogger(__name__)

REQUIREMENT_ITEM_TYPE = "requirement"


# ── Shape detection ──────────────────────────────────────────────────


def detect_compliance_shape(raw: Mapping[str, Any]) -> DatasetShape:
    """Decide which layout a compliance document uses.

    A ``requirements`` list on any section marks the native shape, even
    an empty one, and so does a root ``facilityTypes`` key.
    """
    sections = raw.get("sections")
    if not isinstance(sections, list):
        return DatasetShape.UNKNOWN
    if "facilityTypes" in raw:
        return DatasetShape.NATIVE
    has_requirements = any(
        isinstance(section, Mapping) and isinstance(section.get("requirements"), list)
        for section in sections
    )
    return DatasetShape.NATIVE if has_requirements else DatasetShape.EXPORTED


# ── Intermediate records ─────────────────────────────────────────────


@dataclass
class NativeComplianceDocument:
    """App-native compliance document, parsed but not yet canonical."""

    sections: List[Mapping[str, Any]]
    facility_types: Mapping[str, Any]
    default_facility_type: Optional[str]
    standard: str
    title: LocalizedText
    applicability_legend: Optional[Dict[str, Any]]

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NativeComplianceDocument":
        legend = raw.get("applicabilityLegend", raw.get("applicability_legend"))
        return cls(
            sections=[s for s in as_list(raw.get("sections")) if isinstance(s, Mapping)],
            facility_types=as_mapping(raw.get("facilityTypes")),
            default_facility_type=to_text(raw.get("defaultFacilityType")) or None,
            standard=to_text(raw.get("standard")) or DEFAULT_COMPLIANCE_STANDARD,
            title=localized_fields(raw, "title"),
            applicability_legend=dict(legend) if isinstance(legend, Mapping) else None,
        )


@dataclass
class ExportedComplianceDocument:
    """Machine-exported compliance document with per-item applicability."""

    sections: List[Mapping[str, Any]]
    facility_types: Mapping[str, Any] = field(default_factory=dict)
    standard: str = DEFAULT_COMPLIANCE_STANDARD
    title: LocalizedText = field(default_factory=LocalizedText)
    applicability_legend: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ExportedComplianceDocument":
        legend = raw.get("applicability_legend")
        return cls(
            sections=[s for s in as_list(raw.get("sections")) if isinstance(s, Mapping)],
            facility_types=as_mapping(raw.get("facility_types")),
            standard=to_text(raw.get("standard")) or DEFAULT_COMPLIANCE_STANDARD,
            title=localized_fields(raw, "title"),
            applicability_legend=dict(legend) if isinstance(legend, Mapping) else None,
        )


# ── Shared helpers ───────────────────────────────────────────────────


def _build_facility_types(raw_types: Mapping[str, Any]) -> Dict[str, LocalizedText]:
    """Localized facility type names, falling back to the raw key."""
    facility_types: Dict[str, LocalizedText] = {}
    for key, value in raw_types.items():
        facility_types[str(key)] = localized_text(value, fallback=str(key))
    if not facility_types:
        logger.debug(f"No facility types declared; using '{DEFAULT_TYPE_KEY}'")
        facility_types[DEFAULT_TYPE_KEY] = DEFAULT_TYPE_NAME
    return facility_types


def _pick_default_type(facility_types: Mapping[str, Any], declared: Optional[str] = None) -> str:
    if declared and declared in facility_types:
        return declared
    if DEFAULT_TYPE_KEY in facility_types:
        return DEFAULT_TYPE_KEY
    return next(iter(facility_types), DEFAULT_TYPE_KEY)


def _normalize_applicability(raw: Any) -> Optional[Dict[str, str]]:
    if not isinstance(raw, Mapping):
        return None
    return {str(key): to_text(marker) for key, marker in raw.items()}


def _derive_mandatory(applicability: Optional[Dict[str, str]], default_type: str) -> bool:
    if applicability is not None:
        return applicability.get(default_type) == MANDATORY_MARKER
    return True


def _build_requirement(
    item: Mapping[str, Any],
    section_id: str,
    default_type: str,
    static_mandatory: Any = None,
) -> ComplianceRequirement:
    applicability = _normalize_applicability(item.get("applicability"))
    if isinstance(static_mandatory, bool):
        mandatory = static_mandatory
    else:
        mandatory = _derive_mandatory(applicability, default_type)
    return ComplianceRequirement(
        id=to_text(item.get("id")),
        title=pick_localized(item, "title", "criterion", "name"),
        mandatory=mandatory,
        applicability=applicability,
        notes=to_text(item.get("notes")),
        section_id=section_id,
    )


# ── Converters ───────────────────────────────────────────────────────


def _convert_native(doc: NativeComplianceDocument) -> NormalizationOutcome[ComplianceDataset]:
    facility_types = _build_facility_types(doc.facility_types)
    default_type = _pick_default_type(facility_types, doc.default_facility_type)

    sections: List[ComplianceSection] = []
    for raw_section in doc.sections:
        section_id = to_text(raw_section.get("id", raw_section.get("section_id")))
        requirements = [
            _build_requirement(
                item,
                section_id,
                default_type,
                static_mandatory=item.get("mandatory"),
            )
            for item in as_list(raw_section.get("requirements"))
            if isinstance(item, Mapping)
        ]
        sections.append(
            ComplianceSection(
                id=section_id,
                name=pick_localized(raw_section, "name", "name"),
                requirements=requirements,
            )
        )

    return NormalizationOutcome.success(
        DatasetShape.NATIVE,
        ComplianceDataset(
            standard=doc.standard,
            title=doc.title,
            sections=sections,
            facility_types=facility_types,
            default_facility_type=default_type,
            applicability_legend=doc.applicability_legend,
        ),
    )


def _convert_exported(doc: ExportedComplianceDocument) -> NormalizationOutcome[ComplianceDataset]:
    facility_types = _build_facility_types(doc.facility_types)
    default_type = _pick_default_type(facility_types)

    sections: List[ComplianceSection] = []
    dropped = 0
    for raw_section in doc.sections:
        section_id = to_text(raw_section.get("section_id", raw_section.get("id")))
        requirements: List[ComplianceRequirement] = []
        for item in as_list(raw_section.get("items")):
            if not isinstance(item, Mapping):
                continue
            if (item.get("type") or REQUIREMENT_ITEM_TYPE) != REQUIREMENT_ITEM_TYPE:
                dropped += 1
                continue
            requirements.append(_build_requirement(item, section_id, default_type))
        sections.append(
            ComplianceSection(
                id=section_id,
                name=localized_fields(raw_section, "name"),
                requirements=requirements,
            )
        )

    if dropped:
        logger.debug(f"Dropped {dropped} non-requirement compliance items")

    return NormalizationOutcome.success(
        DatasetShape.EXPORTED,
        ComplianceDataset(
            standard=doc.standard,
            title=doc.title,
            sections=sections,
            facility_types=facility_types,
            default_facility_type=default_type,
            applicability_legend=doc.applicability_legend,
        ),
    )


# ── Public API ───────────────────────────────────────────────────────


def parse_compliance_document(raw: Any) -> NormalizationOutcome[ComplianceDataset]:
    """Detect the shape of ``raw`` and convert it, returning an outcome value."""
    if not isinstance(raw, Mapping):
        return NormalizationOutcome.failure(
            InvalidDatasetError("Invalid compliance dataset: root must be a JSON object")
        )

    shape = detect_compliance_shape(raw)
    logger.debug(f"Detected {shape.value} compliance dataset")

    if shape == DatasetShape.NATIVE:
        return _convert_native(NativeComplianceDocument.from_dict(raw))
    if shape == DatasetShape.EXPORTED:
        return _convert_exported(ExportedComplianceDocument.from_dict(raw))
    return NormalizationOutcome.failure(
        UnsupportedFormatError("Unsupported compliance dataset format: 'sections' list is missing")
    )


def normalize_compliance_data(raw: Any) -> ComplianceDataset:
    """Normalize a raw compliance document into the canonical dataset.

    Raises:
        InvalidDatasetError: If ``raw`` is not a JSON object.
        UnsupportedFormatError: If neither supported shape matches.
    """
    dataset = parse_compliance_document(raw).unwrap()
    logger.debug(
        f"Normalized compliance dataset: {len(dataset.sections)} sections, "
        f"{sum(len(s.requirements) for s in dataset.sections)} requirements"
    )
    return dataset
