"""Field-level normalizers shared by the compliance and classification parsers.

Every helper here degrades gracefully: malformed input yields an empty,
False or zero default instead of an exception.  Only a wrong document
root is fatal, and that is handled by the document parsers.
"""

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from hotel_standards.schemas.classification import ScoringRule
from hotel_standards.schemas.common import (
    LANGUAGES,
    STAR_KEYS,
    LocalizedText,
    Points,
    empty_star_map,
)

logger = logging.getLogger(__name__)

_STAR_KEY_PATTERN = re.compile(r"^([1-5])(?:_star)?$")
_ASTERISK_KEY_PATTERN = re.compile(r"^\*{1,5}$")
_REFERENCE_SPLIT_PATTERN = re.compile(r"[,\s;]+")
_NON_ALNUM_PATTERN = re.compile(r"[^A-Z0-9]")
_REFERENCE_CODE_PATTERN = re.compile(r"^A\d+$")

# Cyrillic capital/small A typed in place of the Latin letter
_CYRILLIC_A = str.maketrans({"А": "A", "а": "a"})


# =============================================================================
# SCALARS
# =============================================================================

def to_number(value: Any) -> Optional[Points]:
    """Convert a raw JSON value to a finite number, or None.

    Integral strings stay ``int`` so that point totals remain integral.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def to_text(value: Any) -> str:
    """Convert a raw value to a stripped string ('' for None)."""
    if value is None:
        return ""
    return str(value).strip()


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


# =============================================================================
# LOCALIZED TEXT
# =============================================================================

def localized_text(value: Any, fallback: str = "") -> LocalizedText:
    """Build LocalizedText from a nested ``{uz, ru, en}`` object or a plain string."""
    if isinstance(value, Mapping):
        return LocalizedText(
            **{lang: to_text(value.get(lang)) or fallback for lang in LANGUAGES}
        )
    text = to_text(value)
    if text:
        return LocalizedText.uniform(text)
    return LocalizedText.uniform(fallback) if fallback else LocalizedText()


def localized_fields(raw: Mapping[str, Any], *prefixes: str, fallback: str = "") -> LocalizedText:
    """Build LocalizedText from flattened ``<prefix>_<lang>`` fields.

    For each language the first non-empty prefix wins, e.g.
    ``localized_fields(item, "criterion", "name")`` reads ``criterion_en``
    and falls back to ``name_en``.
    """
    values: Dict[str, str] = {}
    for lang in LANGUAGES:
        text = ""
        for prefix in prefixes:
            text = to_text(raw.get(f"{prefix}_{lang}"))
            if text:
                break
        values[lang] = text or fallback
    return LocalizedText(**values)


def pick_localized(raw: Mapping[str, Any], nested_key: str, *prefixes: str) -> LocalizedText:
    """Prefer a nested localized object, else flattened per-language fields."""
    nested = raw.get(nested_key)
    if isinstance(nested, (Mapping, str)) and nested:
        return localized_text(nested)
    return localized_fields(raw, *prefixes)


# =============================================================================
# STAR MAPS
# =============================================================================

def normalize_star_key(raw_key: Any) -> Optional[str]:
    """Map '3', 3, '3_star' or '***' to '3'; anything else to None."""
    key = str(raw_key if raw_key is not None else "").strip().lower()
    match = _STAR_KEY_PATTERN.match(key)
    if match:
        return match.group(1)
    if _ASTERISK_KEY_PATTERN.match(key):
        return str(len(key))
    return None


def normalize_star_flags(raw_flags: Any) -> Dict[str, bool]:
    """Normalize a per-star boolean map; only a literal ``true`` counts."""
    flags = empty_star_map()
    if not isinstance(raw_flags, Mapping):
        return flags
    for raw_key, raw_value in raw_flags.items():
        star_key = normalize_star_key(raw_key)
        if star_key is None:
            logger.debug(f"Ignoring unrecognized star key {raw_key!r}")
            continue
        flags[star_key] = raw_value is True
    return flags


def union_star_flags(*maps: Mapping[str, bool]) -> Dict[str, bool]:
    """Combine star maps; a key is true when any input marks it true."""
    merged = empty_star_map()
    for flags in maps:
        for key in STAR_KEYS:
            if flags.get(key) is True:
                merged[key] = True
    return merged


def build_optional_flags(
    mandatory: Mapping[str, bool],
    strict_optional: Optional[Mapping[str, bool]] = None,
) -> Dict[str, bool]:
    """Optional map = complement of mandatory, plus additive strict flags.

    A strict ``optional[k] = true`` only applies where ``mandatory[k]`` is
    false; optional can never be forced false while mandatory is true.
    """
    optional = {key: mandatory.get(key) is not True for key in STAR_KEYS}
    if strict_optional:
        for key in STAR_KEYS:
            if mandatory.get(key) is True:
                optional[key] = False
            elif strict_optional.get(key) is True:
                optional[key] = True
    return optional


# =============================================================================
# REFERENCE CODES
# =============================================================================

def normalize_reference_codes(raw_reference: Any) -> List[str]:
    """Extract annotation codes (``A<n>``) from free-form reference text.

    Cyrillic homoglyphs of 'A' are folded to Latin before splitting on
    commas, whitespace and semicolons.  Order of first occurrence is kept.
    """
    if not raw_reference:
        return []
    if isinstance(raw_reference, (list, tuple)):
        text = ",".join(to_text(part) for part in raw_reference)
    else:
        text = str(raw_reference)
    text = text.translate(_CYRILLIC_A)

    codes: List[str] = []
    for part in _REFERENCE_SPLIT_PATTERN.split(text):
        token = _NON_ALNUM_PATTERN.sub("", part.strip().upper())
        if _REFERENCE_CODE_PATTERN.match(token) and token not in codes:
            codes.append(token)
    return codes


def merge_reference_codes(*groups: Iterable[str]) -> List[str]:
    merged: List[str] = []
    for group in groups:
        for code in group:
            if code not in merged:
                merged.append(code)
    return merged


# =============================================================================
# QUANTITIES
# =============================================================================

def normalize_quantity_value(value: Any) -> int:
    """Floor a positive finite quantity; everything else becomes 0 (absent)."""
    number = to_number(value)
    if number is None or number <= 0:
        return 0
    return math.floor(number)


def normalize_quantity_map(raw_map: Any) -> Dict[str, int]:
    """Keep only positive quantities, floored to integers."""
    normalized: Dict[str, int] = {}
    if not isinstance(raw_map, Mapping):
        return normalized
    for criterion_id, value in raw_map.items():
        quantity = normalize_quantity_value(value)
        if quantity > 0:
            normalized[str(criterion_id)] = quantity
    return normalized


# =============================================================================
# SCORING
# =============================================================================

def normalize_scoring_rule(raw_rule: Any, fallback_max_points: Any = None) -> Optional[ScoringRule]:
    """Normalize a raw scoring rule; only ``per_unit`` is recognized.

    Args:
        raw_rule: Raw rule object (``type``, ``points_per_unit``, ``max_points``,
            ``unit_<lang>``).
        fallback_max_points: Item-level max used when the rule declares none.

    Returns:
        ScoringRule, or None when the rule is absent or invalid (the criterion
        then scores with its static points).
    """
    if not isinstance(raw_rule, Mapping):
        return None
    if raw_rule.get("type") != "per_unit":
        logger.debug(f"Ignoring scoring rule of type {raw_rule.get('type')!r}")
        return None

    points_per_unit = to_number(raw_rule.get("points_per_unit", raw_rule.get("pointsPerUnit")))
    rule_max = raw_rule.get("max_points", raw_rule.get("maxPoints"))
    max_points = to_number(rule_max if rule_max is not None else fallback_max_points)

    if points_per_unit is None or points_per_unit <= 0:
        logger.warning(f"Invalid points_per_unit in scoring rule: {raw_rule!r}")
        return None
    if max_points is None or max_points < 0:
        logger.warning(f"Invalid max_points in scoring rule: {raw_rule!r}")
        return None

    unit = raw_rule.get("unit")
    return ScoringRule(
        points_per_unit=points_per_unit,
        max_points=max_points,
        unit=localized_text(unit) if isinstance(unit, Mapping) else localized_fields(raw_rule, "unit"),
    )


def resolve_max_points(
    raw_max_points: Any,
    scoring_rule: Optional[ScoringRule],
    points: Points,
) -> Points:
    """Explicit non-negative max > scoring rule max > static points > 0."""
    explicit = to_number(raw_max_points)
    if explicit is not None and explicit >= 0:
        return explicit
    if scoring_rule is not None:
        return scoring_rule.max_points
    return points if points and points > 0 else 0
