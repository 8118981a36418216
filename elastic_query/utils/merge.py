"""
Structural merge of where-tree fragments.
"""

import copy
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def merge_values(base: Any, fragment: Any) -> Any:
    """
    Merge two where-tree nodes.

    - dict + dict: keys merged recursively, keys on one side copied as-is
    - list + list: concatenation, base first
    - anything else: the fragment replaces the base

    The last rule means two fragments that set the same scalar leaf
    (e.g. two ``term`` clauses on one field through ``bool()``) keep
    only the later value; the replacement is logged as a warning.
    """
    if isinstance(base, dict) and isinstance(fragment, dict):
        merged = {key: copy.deepcopy(value) for key, value in base.items()}
        for key, value in fragment.items():
            if key in merged:
                merged[key] = merge_values(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    if isinstance(base, list) and isinstance(fragment, list):
        return copy.deepcopy(base) + copy.deepcopy(fragment)

    if base != fragment:
        logger.warning("Where-tree value %r replaced by %r", base, fragment)
    return copy.deepcopy(fragment)


def merge_where(base: Dict[str, Any], fragment: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge a clause fragment into a where-tree.

    Neither input is modified.

    Args:
        base: Accumulated where-tree
        fragment: Newly built fragment

    Returns:
        A new where-tree holding both
    """
    return merge_values(base or {}, fragment or {})
