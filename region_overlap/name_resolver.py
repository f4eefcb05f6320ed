"""
Display-name resolution for boundary features.

Boundary datasets from different publishers (GADM, geoBoundaries, HDX,
national agencies) name their label columns differently. Resolution order:

1. PRIORITY_NAME_KEYS, first present key with a non-blank value
2. Any key containing "name" (case-insensitive), in the bag's own order
3. CODE_KEYS -> "(no name: KEY=VALUE)" so the feature can be traced
4. NO_NAME_PLACEHOLDER (logged as NO_NAME_FEATURE for dataset triage)
"""

from typing import Any, Mapping, Optional
import logging

logger = logging.getLogger(__name__)

NO_NAME_PLACEHOLDER = "(no name)"

# fmt: off
PRIORITY_NAME_KEYS = (
    "name", "NAME", "NAME_EN", "NAME_ENG", "NAME_LOCAL",
    "NAME_1", "NAME_2", "NAME_3", "NAME_4",
    "NL_NAME_1", "NL_NAME_2", "NL_NAME_3", "NL_NAME_4",
    "shapeName", "shapeName_en", "shapeName_local",
    "ADM1_EN", "ADM2_EN", "ADM3_EN", "ADM4_EN",
    "ADM1_LC", "ADM2_LC", "ADM3_LC", "ADM4_LC",
    "PROV_NAME", "DIST_NAME", "TAM_NAME", "VIL_NAME",
)

CODE_KEYS = (
    "GID_0", "GID_1", "GID_2", "GID_3", "GID_4",
    "HASC_1", "HASC_2", "shapeID", "shapeGroup",
)
# fmt: on

# OSM relation tags, most specific first
RELATION_NAME_TAGS = ("name", "name:en", "name:local")

# Keys included in the NO_NAME_FEATURE warning
NO_NAME_SAMPLE_KEYS = 10


def _text(value: Any) -> str:
    """Stringify + trim; None becomes empty."""
    if value is None:
        return ""
    return str(value).strip()


def resolve_name(
    properties: Optional[Mapping[str, Any]],
    feature_id: Any = None,
    level: Optional[int] = None,
) -> str:
    """
    Derive a non-empty display name from a feature's property bag.

    Args:
        properties: Property bag (iteration order is the file's order)
        feature_id: Only used for the NO_NAME_FEATURE warning
        level: Admin level, only used for the NO_NAME_FEATURE warning

    Returns:
        The resolved name, a code placeholder, or NO_NAME_PLACEHOLDER.
    """
    props = properties or {}

    for key in PRIORITY_NAME_KEYS:
        if key in props:
            value = _text(props[key])
            if value:
                return value

    for key, raw in props.items():
        if "name" in str(key).lower():
            value = _text(raw)
            if value:
                return value

    for key in CODE_KEYS:
        if key in props:
            return f"(no name: {key}={props[key]})"

    sample_keys = ", ".join(str(k) for k in list(props)[:NO_NAME_SAMPLE_KEYS])
    logger.warning(
        f"NO_NAME_FEATURE level={level} id={feature_id} keys=[{sample_keys}]"
    )
    return NO_NAME_PLACEHOLDER


def resolve_relation_name(tags: Optional[Mapping[str, Any]]) -> str:
    """Name for an OSM relation from its tags, or NO_NAME_PLACEHOLDER."""
    tags = tags or {}
    for key in RELATION_NAME_TAGS:
        value = _text(tags.get(key))
        if value:
            return value
    return NO_NAME_PLACEHOLDER
