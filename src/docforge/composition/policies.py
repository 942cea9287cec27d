"""Per-field merge policies.

Every field a composition operation touches is listed in a policy table
mapping a dotted document path (public field names, e.g. ``schema.layout``)
to the rule that combines the parent/base value with the child/override
value. Paths are applied in table order, so a nested path listed after its
container refines the container's result.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from docforge.config.logging import get_logger
from docforge.constants import CONTENT_PLACEHOLDER_PATTERN

logger = get_logger(__name__)

_CONTENT_PLACEHOLDER = re.compile(CONTENT_PLACEHOLDER_PATTERN)

# Public document names that differ from the model attribute names
_ATTRIBUTE_NAMES = {"schema": "schema_"}


class PolicyKind(str, Enum):
    """How two values of the same field are combined."""

    CHILD = "child"
    CHILD_ELSE_PARENT = "child-else-parent"
    KEYED_APPEND = "keyed-append"
    CONCAT = "concat"
    SHALLOW_OVERRIDE = "shallow-override"
    DICT_OVERRIDE = "dict-override"
    TEXT_JOIN = "text-join"
    MARKUP_JOIN = "markup-join"
    CONTENT_SLOT = "content-slot"
    DROP = "drop"


@dataclass(frozen=True)
class FieldPolicy:
    kind: PolicyKind
    key: Optional[str] = None


PolicyTable = Mapping[str, FieldPolicy]


def join_text(*parts: Optional[str]) -> Optional[str]:
    """Newline-join the non-empty parts; None when there are none."""
    present = [p for p in parts if p]
    if not present:
        return None
    return "\n".join(present)


def fill_content_slot(parent_markup: str, child_markup: str) -> str:
    """Place child markup in the parent's ``{{content}}`` slot(s), else append it."""
    if _CONTENT_PLACEHOLDER.search(parent_markup):
        return _CONTENT_PLACEHOLDER.sub(lambda _m: child_markup, parent_markup)
    return join_text(parent_markup, child_markup) or ""


def keyed_append(parent: List[dict], child: List[dict], key: str, path: str = "") -> List[dict]:
    """Parent entries, then child entries whose key is not present yet."""
    merged = list(parent)
    seen = {entry[key] for entry in parent}
    for entry in child:
        if entry[key] in seen:
            logger.debug("Skipping %s entry '%s': already defined by parent", path, entry[key])
            continue
        seen.add(entry[key])
        merged.append(entry)
    return merged


def _combine(policy: FieldPolicy, parent: Any, child: Any, child_explicit: Any, path: str) -> Any:
    kind = policy.kind
    if kind is PolicyKind.CHILD:
        return child
    if kind is PolicyKind.CHILD_ELSE_PARENT:
        return child if child is not None else parent
    if kind is PolicyKind.KEYED_APPEND:
        return keyed_append(parent or [], child or [], policy.key or "id", path)
    if kind is PolicyKind.CONCAT:
        return list(parent or []) + list(child or [])
    if kind is PolicyKind.SHALLOW_OVERRIDE:
        if parent is None:
            return child
        return {**parent, **(child_explicit or {})}
    if kind is PolicyKind.DICT_OVERRIDE:
        return {**(parent or {}), **(child or {})}
    if kind is PolicyKind.TEXT_JOIN:
        return join_text(parent, child)
    if kind is PolicyKind.MARKUP_JOIN:
        return join_text(parent, child) or ""
    if kind is PolicyKind.CONTENT_SLOT:
        return fill_content_slot(parent or "", child or "")
    if kind is PolicyKind.DROP:
        return None
    raise AssertionError(f"Unhandled policy kind: {kind}")


def _get(doc: Dict[str, Any], path: str) -> Any:
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _set(doc: Dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    target = doc
    for part in parents:
        target = target.setdefault(part, {})
    target[leaf] = value


def explicit_fields(model: BaseModel, path: str) -> Optional[Dict[str, Any]]:
    """Dump only the fields explicitly set on the sub-model at ``path``."""
    value: Any = model
    for part in path.split("."):
        value = getattr(value, _ATTRIBUTE_NAMES.get(part, part), None)
        if value is None:
            return None
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True, by_alias=True)
    return value


def apply_policies(
    parent: BaseModel,
    child: BaseModel,
    table: PolicyTable,
) -> Dict[str, Any]:
    """Combine two models field by field into a new document dict.

    Neither model is modified; the result starts as a deep copy of the
    child's document and every table path is recomputed from both sides.
    """
    parent_doc = parent.model_dump(by_alias=True)
    child_doc = child.model_dump(by_alias=True)
    result = copy.deepcopy(child_doc)
    for path, policy in table.items():
        child_explicit = None
        if policy.kind is PolicyKind.SHALLOW_OVERRIDE:
            child_explicit = explicit_fields(child, path)
        parent_value = _get(parent_doc, path)
        child_value = _get(child_doc, path)
        _set(result, path, _combine(policy, parent_value, child_value, child_explicit, path))
    return result


def shallow_override(
    base: Mapping[str, Any],
    override: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Key-by-key override of a mapping; returns a new dict."""
    return {**copy.deepcopy(dict(base)), **copy.deepcopy(dict(override or {}))}


def duplicate_keys(entries: List[dict], key: str) -> List[str]:
    """Keys that occur more than once, in first-seen order."""
    seen: set = set()
    dupes: List[str] = []
    for entry in entries:
        k = entry[key]
        if k in seen and k not in dupes:
            dupes.append(k)
        seen.add(k)
    return dupes
