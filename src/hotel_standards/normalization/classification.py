"""Normalizer for star classification datasets (MST 125).

Two input shapes are supported:

* native   - ``sections[].criteria[]`` plus ``starLevels[]`` whose
  ``mandatoryIds`` seed the per-criterion mandatory maps.  Accommodation
  types are optional and synthesized from the star levels when absent.
* exported - ``categories[].items[]`` plus ``minimum_scores`` keyed by
  accommodation type.  Mandatory maps come only from each item's own
  ``mandatory`` object; star levels are synthesized 1..5.

Star levels' ``mandatory_ids`` are always recomputed from the merged
criteria; the input's own lists are never trusted after merging.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

from hotel_standards.normalization.errors import (
    InvalidDatasetError,
    UnsupportedFormatError,
)
from hotel_standards.normalization.fields import (
    as_list,
    as_mapping,
    build_optional_flags,
    localized_fields,
    localized_text,
    merge_reference_codes,
    normalize_reference_codes,
    normalize_scoring_rule,
    normalize_star_flags,
    normalize_star_key,
    pick_localized,
    resolve_max_points,
    to_number,
    to_text,
    union_star_flags,
)
from hotel_standards.normalization.shapes import DatasetShape, NormalizationOutcome
from hotel_standards.schemas.classification import (
    DEFAULT_CLASSIFICATION_STANDARD,
    AccommodationType,
    Annotation,
    ClassificationDataset,
    ClassificationSection,
    Criterion,
    StarLevel,
)
from hotel_standards.schemas.common import (
    DEFAULT_TYPE_KEY,
    DEFAULT_TYPE_NAME,
    STAR_KEYS,
    Points,
    empty_star_map,
)

logger = logging.getLogger(__name__)

STAR_RANGE = tuple(int(key) for key in STAR_KEYS)


def star_label(star: int) -> str:
    return "★" * star


def _level_star_key(raw_star: Any) -> Optional[str]:
    """Star key for a level's numeric ``star`` field (3, 3.0 or "3")."""
    number = to_number(raw_star)
    if number is None or number != int(number):
        return None
    return normalize_star_key(int(number))


# ── Shape detection ──────────────────────────────────────────────────


def detect_classification_shape(raw: Mapping[str, Any]) -> DatasetShape:
    """Decide which layout a classification document uses."""
    if isinstance(raw.get("sections"), list) and isinstance(raw.get("starLevels"), list):
        return DatasetShape.NATIVE
    if isinstance(raw.get("categories"), list):
        return DatasetShape.EXPORTED
    return DatasetShape.UNKNOWN


# ── Intermediate records ─────────────────────────────────────────────


@dataclass
class NativeClassificationDocument:
    """App-native classification document, parsed but not yet canonical."""

    sections: List[Mapping[str, Any]]
    star_levels: List[Mapping[str, Any]]
    accommodation_types: Mapping[str, Any]
    default_accommodation_type: Optional[str]
    max_points: Optional[Points]
    annotations: List[Mapping[str, Any]]
    standard: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NativeClassificationDocument":
        return cls(
            sections=[s for s in as_list(raw.get("sections")) if isinstance(s, Mapping)],
            star_levels=[l for l in as_list(raw.get("starLevels")) if isinstance(l, Mapping)],
            accommodation_types=as_mapping(raw.get("accommodationTypes")),
            default_accommodation_type=to_text(raw.get("defaultAccommodationType")) or None,
            max_points=to_number(raw.get("maxPoints", raw.get("max_points"))),
            annotations=[a for a in as_list(raw.get("annotations")) if isinstance(a, Mapping)],
            standard=to_text(raw.get("standard")) or DEFAULT_CLASSIFICATION_STANDARD,
        )


@dataclass
class ExportedClassificationDocument:
    """Machine-exported classification document with per-type minimum scores."""

    categories: List[Mapping[str, Any]]
    minimum_scores: Mapping[str, Any] = field(default_factory=dict)
    max_points: Optional[Points] = None
    annotations: List[Mapping[str, Any]] = field(default_factory=list)
    standard: str = DEFAULT_CLASSIFICATION_STANDARD

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ExportedClassificationDocument":
        return cls(
            categories=[c for c in as_list(raw.get("categories")) if isinstance(c, Mapping)],
            minimum_scores=as_mapping(raw.get("minimum_scores")),
            max_points=to_number(raw.get("max_points")),
            annotations=[a for a in as_list(raw.get("annotations")) if isinstance(a, Mapping)],
            standard=to_text(raw.get("standard")) or DEFAULT_CLASSIFICATION_STANDARD,
        )


# ── Shared helpers ───────────────────────────────────────────────────


class _CriterionIdRegistry:
    """Tracks criterion ids so that duplicates are dropped, first one wins."""

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    def claim(self, criterion_id: str) -> bool:
        if criterion_id in self._seen:
            logger.warning(f"Duplicate criterion id '{criterion_id}' ignored")
            return False
        self._seen.add(criterion_id)
        return True


def _build_criterion(
    item: Mapping[str, Any],
    *,
    section_id: str,
    section_codes: List[str],
    mandatory: Dict[str, bool],
    optional: Dict[str, bool],
    is_group_header: bool,
    assessable: bool,
) -> Criterion:
    criterion_id = to_text(item.get("id"))
    points = to_number(item.get("points")) or 0
    raw_max_points = item.get("max_points", item.get("maxPoints"))
    scoring_rule = normalize_scoring_rule(
        item.get("scoring_rule") or item.get("scoringRule"),
        fallback_max_points=raw_max_points,
    )
    raw_reference = item.get("reference") or item.get("references") or ""
    if isinstance(raw_reference, list):
        raw_reference = ", ".join(to_text(part) for part in raw_reference)
    reference_codes = merge_reference_codes(
        section_codes, normalize_reference_codes(raw_reference)
    )
    return Criterion(
        id=criterion_id,
        title=pick_localized(item, "title", "criterion", "name"),
        points=points,
        max_points=resolve_max_points(raw_max_points, scoring_rule, points),
        scoring_rule=scoring_rule,
        mandatory=mandatory,
        optional=optional,
        reference=to_text(raw_reference),
        reference_codes=reference_codes,
        assessable=assessable,
        is_group_header=is_group_header,
        section_id=section_id,
    )


def _collect_mandatory_ids(sections: List[ClassificationSection], star_key: str) -> List[str]:
    ids: List[str] = []
    for section in sections:
        for criterion in section.criteria:
            if criterion.assessable and criterion.is_mandatory_at(star_key) and criterion.id not in ids:
                ids.append(criterion.id)
    return ids


def _parse_min_scores(raw_scores: Mapping[str, Any]) -> Dict[int, Points]:
    min_scores: Dict[int, Points] = {}
    for raw_key, raw_value in raw_scores.items():
        star_key = normalize_star_key(raw_key)
        value = to_number(raw_value)
        if star_key is None or value is None:
            continue
        min_scores[int(star_key)] = value
    return min_scores


def _parse_annotations(raw_annotations: List[Mapping[str, Any]]) -> List[Annotation]:
    annotations: List[Annotation] = []
    for raw in raw_annotations:
        code = to_text(raw.get("code"))
        if not code:
            continue
        text = raw.get("text")
        annotations.append(
            Annotation(
                code=code,
                text=localized_text(text) if isinstance(text, Mapping) else localized_fields(raw, "text"),
            )
        )
    return annotations


def _pick_default_type(types: Mapping[str, Any], declared: Optional[str] = None) -> str:
    if declared and declared in types:
        return declared
    if DEFAULT_TYPE_KEY in types:
        return DEFAULT_TYPE_KEY
    return next(iter(types), DEFAULT_TYPE_KEY)


# ── Converters ───────────────────────────────────────────────────────


def _seed_mandatory_from_levels(star_levels: List[Mapping[str, Any]]) -> Dict[str, Dict[str, bool]]:
    """Map criterion id -> star map, from every level's ``mandatoryIds``."""
    seeded: Dict[str, Dict[str, bool]] = {}
    for level in star_levels:
        star_key = _level_star_key(level.get("star"))
        if star_key is None:
            continue
        for raw_id in as_list(level.get("mandatoryIds")):
            seeded.setdefault(to_text(raw_id), empty_star_map())[star_key] = True
    return seeded


def _convert_native(doc: NativeClassificationDocument) -> NormalizationOutcome[ClassificationDataset]:
    seeded = _seed_mandatory_from_levels(doc.star_levels)
    registry = _CriterionIdRegistry()

    sections: List[ClassificationSection] = []
    for raw_section in doc.sections:
        section_id = to_text(raw_section.get("id"))
        raw_section_reference = raw_section.get("reference") or raw_section.get("references") or ""
        section_codes = normalize_reference_codes(raw_section_reference)
        criteria: List[Criterion] = []
        for item in as_list(raw_section.get("criteria")):
            if not isinstance(item, Mapping):
                continue
            criterion_id = to_text(item.get("id"))
            if not registry.claim(criterion_id):
                continue
            mandatory = union_star_flags(
                seeded.get(criterion_id, empty_star_map()),
                normalize_star_flags(item.get("mandatory")),
            )
            optional = build_optional_flags(mandatory, normalize_star_flags(item.get("optional")))
            is_group_header = bool(item.get("isGroupHeader") or item.get("is_group_header"))
            raw_assessable = item.get("assessable")
            criteria.append(
                _build_criterion(
                    item,
                    section_id=section_id,
                    section_codes=section_codes,
                    mandatory=mandatory,
                    optional=optional,
                    is_group_header=is_group_header,
                    assessable=raw_assessable if isinstance(raw_assessable, bool) else not is_group_header,
                )
            )
        sections.append(
            ClassificationSection(
                id=section_id,
                name=pick_localized(raw_section, "name", "name"),
                reference=to_text(raw_section_reference),
                criteria=criteria,
            )
        )

    star_levels: List[StarLevel] = []
    for raw_level in doc.star_levels:
        star_key = _level_star_key(raw_level.get("star"))
        if star_key is None:
            logger.warning(f"Ignoring star level with invalid star {raw_level.get('star')!r}")
            continue
        star = int(star_key)
        if any(level.star == star for level in star_levels):
            logger.warning(f"Ignoring duplicate star level {star}")
            continue
        star_levels.append(
            StarLevel(
                star=star,
                label=to_text(raw_level.get("label")) or star_label(star),
                min_total_points=to_number(raw_level.get("minTotalPoints")) or 0,
                mandatory_ids=_collect_mandatory_ids(sections, star_key),
            )
        )

    accommodation_types: Dict[str, AccommodationType] = {}
    for raw_key, raw_type in doc.accommodation_types.items():
        if not isinstance(raw_type, Mapping):
            continue
        key = to_text(raw_type.get("key")) or str(raw_key)
        accommodation_types[str(raw_key)] = AccommodationType(
            key=key,
            name=localized_text(raw_type.get("name"), fallback=key)
            if raw_type.get("name")
            else localized_fields(raw_type, "name", fallback=key),
            min_scores=_parse_min_scores(as_mapping(raw_type.get("minScores", raw_type.get("min_scores")))),
        )

    if accommodation_types:
        default_type = _pick_default_type(accommodation_types, doc.default_accommodation_type)
    else:
        accommodation_types = {
            DEFAULT_TYPE_KEY: AccommodationType(
                key=DEFAULT_TYPE_KEY,
                name=DEFAULT_TYPE_NAME,
                min_scores={level.star: level.min_total_points for level in star_levels},
            )
        }
        default_type = DEFAULT_TYPE_KEY

    return NormalizationOutcome.success(
        DatasetShape.NATIVE,
        ClassificationDataset(
            standard=doc.standard,
            sections=sections,
            star_levels=star_levels,
            accommodation_types=accommodation_types,
            default_accommodation_type=default_type,
            max_points=doc.max_points,
            annotations=_parse_annotations(doc.annotations),
        ),
    )


def _convert_exported(doc: ExportedClassificationDocument) -> NormalizationOutcome[ClassificationDataset]:
    accommodation_types: Dict[str, AccommodationType] = {}
    for raw_key, config in doc.minimum_scores.items():
        if not isinstance(config, Mapping):
            continue
        key = str(raw_key)
        accommodation_types[key] = AccommodationType(
            key=key,
            name=localized_fields(config, "name", fallback=key),
            min_scores={
                star: to_number(config.get(f"{star}_star")) or 0 for star in STAR_RANGE
            },
        )
    if not accommodation_types:
        logger.warning("No minimum_scores declared; all star thresholds default to 0")
        accommodation_types[DEFAULT_TYPE_KEY] = AccommodationType(
            key=DEFAULT_TYPE_KEY,
            name=DEFAULT_TYPE_NAME,
            min_scores={star: 0 for star in STAR_RANGE},
        )
    default_type = _pick_default_type(accommodation_types)
    default_min_scores = accommodation_types[default_type].min_scores

    registry = _CriterionIdRegistry()
    sections: List[ClassificationSection] = []
    for category in doc.categories:
        section_id = to_text(category.get("id"))
        raw_section_reference = category.get("reference") or ""
        section_codes = normalize_reference_codes(raw_section_reference)
        criteria: List[Criterion] = []
        for item in as_list(category.get("items")):
            if not isinstance(item, Mapping):
                continue
            if not registry.claim(to_text(item.get("id"))):
                continue
            mandatory = normalize_star_flags(item.get("mandatory"))
            is_group_header = bool(item.get("is_group_header"))
            criteria.append(
                _build_criterion(
                    item,
                    section_id=section_id,
                    section_codes=section_codes,
                    mandatory=mandatory,
                    optional=build_optional_flags(mandatory),
                    is_group_header=is_group_header,
                    assessable=not is_group_header,
                )
            )
        sections.append(
            ClassificationSection(
                id=section_id,
                name=localized_fields(category, "name"),
                reference=to_text(raw_section_reference),
                criteria=criteria,
            )
        )

    star_levels = [
        StarLevel(
            star=star,
            label=star_label(star),
            min_total_points=default_min_scores.get(star) or 0,
            mandatory_ids=_collect_mandatory_ids(sections, str(star)),
        )
        for star in STAR_RANGE
    ]

    total_points = sum(
        criterion.max_points or criterion.points or 0
        for section in sections
        for criterion in section.criteria
        if criterion.assessable
    )

    return NormalizationOutcome.success(
        DatasetShape.EXPORTED,
        ClassificationDataset(
            standard=doc.standard,
            sections=sections,
            star_levels=star_levels,
            accommodation_types=accommodation_types,
            default_accommodation_type=default_type,
            max_points=doc.max_points or total_points,
            annotations=_parse_annotations(doc.annotations),
        ),
    )


# ── Public API ───────────────────────────────────────────────────────


def parse_classification_document(raw: Any) -> NormalizationOutcome[ClassificationDataset]:
    """Detect the shape of ``raw`` and convert it, returning an outcome value."""
    if not isinstance(raw, Mapping):
        return NormalizationOutcome.failure(
            InvalidDatasetError("Invalid classification dataset: root must be a JSON object")
        )

    shape = detect_classification_shape(raw)
    logger.debug(f"Detected {shape.value} classification dataset")

    if shape == DatasetShape.NATIVE:
        return _convert_native(NativeClassificationDocument.from_dict(raw))
    if shape == DatasetShape.EXPORTED:
        return _convert_exported(ExportedClassificationDocument.from_dict(raw))
    return NormalizationOutcome.failure(
        UnsupportedFormatError(
            "Unsupported classification dataset format: expected 'sections' + 'starLevels' "
            "or 'categories'"
        )
    )


def normalize_classification_data(raw: Any) -> ClassificationDataset:
    """Normalize a raw classification document into the canonical dataset.

    Raises:
        InvalidDatasetError: If ``raw`` is not a JSON object.
        UnsupportedFormatError: If neither supported shape matches.
    """
    dataset = parse_classification_document(raw).unwrap()
    logger.debug(
        f"Normalized classification dataset: {len(dataset.sections)} sections, "
        f"{sum(1 for _ in dataset.iter_criteria(assessable_only=True))} assessable criteria, "
        f"{len(dataset.star_levels)} star levels"
    )
    return dataset
