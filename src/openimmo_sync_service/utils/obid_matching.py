"""
Matching of Webflow items back to an OpenImmo OBID.

The collection schema changed several times while the integration was built,
so an item may carry the OBID under `fieldData`, as a flat property, or with an
underscore instead of a hyphen. The matchers are tried in order and the first
hit wins. This is a known fragility, not a design goal: the substring matcher
in particular can be fooled by unrelated fields holding the same JSON fragment.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

OBID_FIELD = "openimmo-obid"
LEGACY_OBID_FIELD = "openimmo_obid"

ItemMatcher = Callable[[Dict[str, Any], str], bool]


def item_id(item: Dict[str, Any]) -> Optional[str]:
    """Return the Webflow id of an item from either the v2 or the v1 shape."""
    return item.get("id") or item.get("_id")


def match_field_data(item: Dict[str, Any], obid: str) -> bool:
    field_data = item.get("fieldData")
    return isinstance(field_data, dict) and field_data.get(OBID_FIELD) == obid


def match_flat_field(item: Dict[str, Any], obid: str) -> bool:
    return item.get(OBID_FIELD) == obid


def match_legacy_field(item: Dict[str, Any], obid: str) -> bool:
    return item.get(LEGACY_OBID_FIELD) == obid


def match_serialized(item: Dict[str, Any], obid: str) -> bool:
    serialized = json.dumps(item, separators=(",", ":"), ensure_ascii=False)
    value = json.dumps(obid, ensure_ascii=False)
    return f'"{OBID_FIELD}":{value}' in serialized or f'"{LEGACY_OBID_FIELD}":{value}' in serialized


DEFAULT_MATCHERS: List[Tuple[str, ItemMatcher]] = [
    ("fieldData", match_field_data),
    ("flat field", match_flat_field),
    ("underscore field", match_legacy_field),
    ("serialized content", match_serialized),
]


def item_matches_obid(
    item: Dict[str, Any],
    obid: str,
    matchers: List[Tuple[str, ItemMatcher]] = None,
) -> bool:
    """Return True when any matcher recognizes the OBID on the item."""
    if not item or not obid:
        return False
    for name, matcher in matchers or DEFAULT_MATCHERS:
        try:
            if matcher(item, obid):
                logger.info(f"Found {name} match for OBID {obid} in item {item_id(item)}")
                return True
        except (TypeError, ValueError) as e:
            logger.error(f"Error in {name} matcher for OBID {obid}: {e}")
    return False
