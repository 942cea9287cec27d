"""Priority-ordered layer resolution.

Layers are partial template documents from independent sources (a base
template, a theme, content fills, behaviour scripts). They are sorted by
ascending priority with a stable sort and folded left to right with a deep
merge: nested mappings merge recursively, while lists and scalars from the
later layer replace the accumulated value outright. Unlike the inheritance
strategies there is no list concatenation here.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional

from docforge.config.logging import get_logger
from docforge.exceptions import ValidationError

from ..models import Layer, ResolvedTemplate, Template
from ..models.template import utcnow

logger = get_logger(__name__)

# Provenance fields are computed here, never taken from layer content
_PROVENANCE_FIELDS = ("resolved", "resolved_at", "sources")

_TEMPLATE_KEYS = frozenset(
    key for name, field in Template.model_fields.items() for key in (name, field.alias) if key
)


def deep_merge(base: Mapping[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``incoming`` over ``base`` into a new dict.

    Neither argument is modified.
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in incoming.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def order_layers(layers: Iterable[Layer]) -> List[Layer]:
    """Layers in application order: ascending priority, ties keep input order."""
    return sorted(layers, key=lambda layer: layer.priority)


def merge_layer_contents(layers: Iterable[Layer]) -> Dict[str, Any]:
    """Deep-merge the contents of ``layers`` in application order."""
    merged: Dict[str, Any] = {}
    for layer in order_layers(layers):
        logger.debug(
            "Applying %s layer %s (priority %s)", layer.kind.value, layer.source, layer.priority
        )
        merged = deep_merge(merged, layer.content)
    return merged


def _unbranded_view(content: Mapping[str, Any]) -> Mapping[str, Any]:
    """Layer content with its branded text swapped for its branding snapshot."""
    snapshot = content.get("unbranded")
    if not isinstance(snapshot, Mapping):
        return content
    return deep_merge(
        content,
        {
            "content": snapshot.get("content", {}),
            "schema": {"styling": snapshot.get("styling", {})},
        },
    )


def merge_branding_snapshots(layers: Iterable[Layer]) -> Optional[Dict[str, Any]]:
    """Branding snapshot for the merged layers, or None when no layer is branded.

    Layers above a branded layer are merged over its snapshot as well, so a
    later re-branding keeps their content instead of reverting it.
    """
    ordered = order_layers(layers)
    if not any(isinstance(layer.content.get("unbranded"), Mapping) for layer in ordered):
        return None
    view: Dict[str, Any] = {}
    for layer in ordered:
        view = deep_merge(view, _unbranded_view(layer.content))
    return {
        "content": view.get("content", {}),
        "styling": view.get("schema", {}).get("styling", {}),
    }


def resolve_conflicts(layers: Iterable[Layer]) -> ResolvedTemplate:
    """Merge ``layers`` into a fully resolved template with provenance.

    Raises:
        ValidationError: If no layers are given, the merged document has keys
            a template does not define, or it is not a valid template.
    """
    ordered = order_layers(layers)
    if not ordered:
        raise ValidationError("Cannot resolve an empty set of layers")
    sources = [layer.source for layer in ordered]

    merged = merge_layer_contents(ordered)
    for field in _PROVENANCE_FIELDS:
        merged.pop(field, None)
    template_id = merged.get("id", "<unknown>")
    unknown = sorted(set(merged) - _TEMPLATE_KEYS)
    if unknown:
        raise ValidationError(
            f"Layers for template '{template_id}' set unknown fields: {', '.join(unknown)}",
            details=f"sources: {', '.join(sources)}",
        )
    merged["unbranded"] = merge_branding_snapshots(ordered)
    try:
        resolved = ResolvedTemplate.model_validate(
            {**merged, "resolved": True, "resolved_at": utcnow(), "sources": sources}
        )
    except ValueError as e:
        raise ValidationError(
            f"Layers for template '{template_id}' do not form a valid template",
            details=f"sources: {', '.join(sources)}; {e}",
        ) from e
    logger.info("Resolved template %s from %d layers", resolved.id, len(sources))
    return resolved
