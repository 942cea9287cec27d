"""Inheritance resolution across a template's parent chain.

A child template is merged into its fully resolved parent using the strategy
the child declares. Resolution walks the chain with an explicit visited set:
revisiting an id fails with CycleDetectedError instead of recursing forever,
and chains deeper than the configured limit fail with InheritanceDepthError.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from docforge.config.logging import get_logger
from docforge.exceptions import (
    CycleDetectedError,
    InheritanceDepthError,
    TemplateNotFoundError,
    ValidationError,
)

from ..models import MergeStrategy, Template
from ..store import TemplateStore
from .policies import FieldPolicy, PolicyKind, PolicyTable, apply_policies, duplicate_keys

logger = get_logger(__name__)

_P = PolicyKind

# Identity fields always follow the child; listed explicitly so the tables
# document every field.
_IDENTITY: Dict[str, FieldPolicy] = {
    "id": FieldPolicy(_P.CHILD),
    "name": FieldPolicy(_P.CHILD),
    "version": FieldPolicy(_P.CHILD),
    "type": FieldPolicy(_P.CHILD),
    "inheritance": FieldPolicy(_P.CHILD),
}

MERGE_POLICIES: PolicyTable = {
    **_IDENTITY,
    "schema.variables": FieldPolicy(_P.KEYED_APPEND, key="name"),
    "schema.sections": FieldPolicy(_P.KEYED_APPEND, key="id"),
    "schema.layout": FieldPolicy(_P.SHALLOW_OVERRIDE),
    "schema.styling.fonts": FieldPolicy(_P.CONCAT),
    "schema.styling.colors": FieldPolicy(_P.DICT_OVERRIDE),
    "schema.styling.spacing": FieldPolicy(_P.DICT_OVERRIDE),
    "schema.styling.custom_css": FieldPolicy(_P.TEXT_JOIN),
    "content.markup": FieldPolicy(_P.CONTENT_SLOT),
    "content.css": FieldPolicy(_P.TEXT_JOIN),
    "content.js": FieldPolicy(_P.CHILD_ELSE_PARENT),
    "content.assets": FieldPolicy(_P.KEYED_APPEND, key="id"),
    "metadata": FieldPolicy(_P.SHALLOW_OVERRIDE),
    "branding": FieldPolicy(_P.CHILD_ELSE_PARENT),
    "unbranded": FieldPolicy(_P.DROP),
}

EXTEND_POLICIES: PolicyTable = {
    **_IDENTITY,
    "schema.variables": FieldPolicy(_P.CONCAT),
    "schema.sections": FieldPolicy(_P.CONCAT),
    "schema.layout": FieldPolicy(_P.SHALLOW_OVERRIDE),
    "schema.layout.sections": FieldPolicy(_P.CONCAT),
    "schema.styling.fonts": FieldPolicy(_P.CONCAT),
    "schema.styling.colors": FieldPolicy(_P.DICT_OVERRIDE),
    "schema.styling.spacing": FieldPolicy(_P.DICT_OVERRIDE),
    "schema.styling.custom_css": FieldPolicy(_P.TEXT_JOIN),
    "content.markup": FieldPolicy(_P.MARKUP_JOIN),
    "content.css": FieldPolicy(_P.TEXT_JOIN),
    "content.js": FieldPolicy(_P.CHILD_ELSE_PARENT),
    "content.assets": FieldPolicy(_P.CONCAT),
    "metadata": FieldPolicy(_P.SHALLOW_OVERRIDE),
    "branding": FieldPolicy(_P.CHILD_ELSE_PARENT),
    "unbranded": FieldPolicy(_P.DROP),
}


def merge_into_parent(parent: Template, child: Template) -> Template:
    """Merge strategy: keyed dedup (parent wins), slot-filled markup."""
    return _build(child, apply_policies(parent, child, MERGE_POLICIES))


def replace_parent(parent: Template, child: Template) -> Template:
    """Replace strategy: the child supersedes the parent entirely."""
    return child.model_copy(deep=True)


def extend_parent(parent: Template, child: Template) -> Template:
    """Extend strategy: concatenate lists and text without dedup."""
    doc = apply_policies(parent, child, EXTEND_POLICIES)
    collisions = {
        "variables": duplicate_keys(doc["schema"]["variables"], "name"),
        "sections": duplicate_keys(doc["schema"]["sections"], "id"),
        "assets": duplicate_keys(doc["content"]["assets"], "id"),
    }
    for field, keys in collisions.items():
        if keys:
            logger.warning(
                "Template '%s' extends '%s' with colliding %s: %s",
                child.id,
                parent.id,
                field,
                ", ".join(keys),
            )
    return _build(child, doc)


STRATEGIES: Dict[MergeStrategy, Callable[[Template, Template], Template]] = {
    MergeStrategy.MERGE: merge_into_parent,
    MergeStrategy.REPLACE: replace_parent,
    MergeStrategy.EXTEND: extend_parent,
}


def _build(child: Template, doc: dict) -> Template:
    try:
        return Template.model_validate(doc)
    except ValueError as e:
        raise ValidationError(f"Merged template '{child.id}' is invalid", details=str(e)) from e


class InheritanceResolver:
    """Resolves templates against their parent chain from a TemplateStore."""

    def __init__(self, store: TemplateStore, max_depth: int = 32):
        self.store = store
        self.max_depth = max_depth

    async def resolve(self, template: Template) -> Template:
        """Resolve a template's inheritance.

        Templates without a parent are returned unchanged.

        Raises:
            UnknownStrategyError: If a template in the chain declares an unknown strategy.
            TemplateNotFoundError: If a parent is missing from the store.
            CycleDetectedError: If the chain revisits a template id.
            InheritanceDepthError: If the chain is deeper than ``max_depth``.
            ValidationError: If a parent id is rejected by the store.
        """
        if template.inheritance is None:
            return template
        resolved = await self._resolve(template, visited=set(), chain=[])
        logger.info("Resolved inheritance for template %s", template.id)
        return resolved

    async def _resolve(self, template: Template, visited: set[str], chain: List[str]) -> Template:
        visited = visited | {template.id}
        chain = chain + [template.id]
        inheritance = template.inheritance
        if inheritance is None:
            return template

        strategy = inheritance.strategy_for(template.id)
        parent_id = inheritance.parent_id
        if parent_id in visited:
            raise CycleDetectedError(parent_id, chain + [parent_id])
        if len(chain) > self.max_depth:
            raise InheritanceDepthError(chain[0], self.max_depth)

        parent = await self._fetch_parent(parent_id, template.id)
        resolved_parent = await self._resolve(parent, visited, chain)
        logger.debug(
            "Applying %s strategy: %s <- %s", strategy.value, resolved_parent.id, template.id
        )
        return STRATEGIES[strategy](resolved_parent, template)

    async def chain(self, template: Template) -> List[str]:
        """Template ids from the root ancestor down to ``template``.

        Walks parents with the same NotFound/cycle/depth guarantees as
        :meth:`resolve` but performs no merging.
        """
        ids: List[str] = [template.id]
        current: Optional[Template] = template
        while current is not None and current.inheritance is not None:
            parent_id = current.inheritance.parent_id
            if parent_id in ids:
                raise CycleDetectedError(parent_id, ids + [parent_id])
            if len(ids) > self.max_depth:
                raise InheritanceDepthError(template.id, self.max_depth)
            current = await self._fetch_parent(parent_id, current.id)
            ids.append(current.id)
        return list(reversed(ids))

    async def _fetch_parent(self, parent_id: str, child_id: str) -> Template:
        try:
            parent = await self.store.get_by_id(parent_id)
        except ValidationError as e:
            raise ValidationError(
                f"Template '{child_id}' declares an invalid parent id", details=str(e)
            ) from e
        if parent is None:
            raise TemplateNotFoundError(parent_id, referenced_by=child_id)
        return parent


async def resolve_inheritance(
    template: Template,
    store: TemplateStore,
    max_depth: int = 32,
) -> Template:
    """Resolve ``template`` against its parent chain. See InheritanceResolver.resolve."""
    return await InheritanceResolver(store, max_depth=max_depth).resolve(template)
