"""Merging of configuration layers.

A later layer refines the mappings of an earlier one key by key. Any other
value, lists included, is taken from the later layer as written, so
``configFiles: []`` in project config really disables config-file copying.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` onto ``base`` without mutating either.

    >>> deep_merge({"runner": {"cwd": ".", "configFiles": ["a.ts"]}}, {"runner": {"configFiles": []}})
    {'runner': {'cwd': '.', 'configFiles': []}}
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


__all__ = ["deep_merge"]
