"""Deep-merge engine for partial node updates.

Merge rules:

* ``parameters`` merges recursively: ``None`` deletes a key, a mapping
  merges into a mapping, anything else (scalars, lists, shape changes)
  replaces the existing value. Lists are never concatenated.
* ``credentials`` is replaced wholesale.
* Every other field is replaced wholesale.

Nothing here mutates its inputs; merged nodes are built from fresh dicts
and only untouched subtrees are shared with the original.
"""
import copy
import logging
from enum import Enum
from typing import Any, Mapping

from .errors import ValidationError
from .graph import Node

logger = logging.getLogger(__name__)


class ValueKind(str, Enum):
    NULL = "NULL"
    SCALAR = "SCALAR"
    ARRAY = "ARRAY"
    MAP = "MAP"


def value_kind(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def merge_parameters(
    original: Mapping[str, Any],
    updates: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``updates`` onto ``original`` and return a new dict."""
    merged = dict(original)
    for key, value in updates.items():
        kind = value_kind(value)
        if kind is ValueKind.NULL:
            merged.pop(key, None)
        elif kind is ValueKind.MAP:
            existing = original.get(key)
            base = existing if value_kind(existing) is ValueKind.MAP else {}
            # Merging into an empty base also prunes nested None values.
            merged[key] = merge_parameters(base, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_node_update(original: Node, partial: Mapping[str, Any]) -> list[str]:
    """Return shape violations of ``partial`` against ``original`` (empty = ok)."""
    errors: list[str] = []

    if "id" in partial and partial["id"] != original.get("id"):
        errors.append("Cannot change node ID")

    if "type" in partial and partial["type"] != original.get("type"):
        logger.warning(
            "Changing node type from %s to %s",
            original.get("type"), partial["type"],
        )

    if "position" in partial:
        position = partial["position"]
        if (
            not isinstance(position, (list, tuple))
            or len(position) != 2
            or not all(_is_number(p) for p in position)
        ):
            errors.append("Position must be an array of two numbers")

    if "parameters" in partial and value_kind(partial["parameters"]) is not ValueKind.MAP:
        errors.append("Parameters must be an object")

    return errors


def merge_node_properties(original: Node, partial: Mapping[str, Any]) -> Node:
    merged = dict(original)
    for key, value in partial.items():
        if key == "parameters":
            existing = original.get("parameters")
            base = existing if value_kind(existing) is ValueKind.MAP else {}
            merged["parameters"] = merge_parameters(base, value)
        elif key == "credentials":
            merged["credentials"] = copy.deepcopy(value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_node_update(original: Node, partial: Mapping[str, Any]) -> Node:
    """Validate and merge one partial update; raises ``ValidationError``."""
    errors = check_node_update(original, partial)
    if errors:
        raise ValidationError(str(original.get("id")), errors)
    return merge_node_properties(original, partial)
