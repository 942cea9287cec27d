"""TemplateEngine - wires the store, settings and composition steps together.

Pipeline for a draft template:
    1. Inheritance: merge the template into its resolved parent chain.
    2. Layers: deep-merge extra layers over the resolved template.
    3. Branding: substitute brand tokens, then append component overrides.

Each step returns a new template; the store's copy is never modified.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from docforge.config.logging import get_logger
from docforge.config.settings import Settings, get_settings
from docforge.exceptions import TemplateNotFoundError

from .composition import (
    InheritanceResolver,
    TemplateOverrides,
    apply_branding,
    apply_component_overrides,
    compose_from_base,
    resolve_conflicts,
)
from .models import (
    ClientBranding,
    ComponentStyleOverride,
    Layer,
    LayerKind,
    ResolvedTemplate,
    Template,
)
from .store import TemplateStore

logger = get_logger(__name__)


class TemplateEngine:
    """Facade over the composition operations for one template store."""

    def __init__(self, store: TemplateStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()
        self._resolver = InheritanceResolver(store, max_depth=self.settings.max_inheritance_depth)

    async def compose_from_base(
        self,
        base_id: str,
        overrides: TemplateOverrides | Dict[str, Any] | None = None,
    ) -> Template:
        return await compose_from_base(self.store, base_id, overrides)

    async def resolve_inheritance(self, template: Template) -> Template:
        return await self._resolver.resolve(template)

    async def inheritance_chain(self, template: Template) -> List[str]:
        return await self._resolver.chain(template)

    def resolve_conflicts(self, layers: Sequence[Layer]) -> ResolvedTemplate:
        return resolve_conflicts(layers)

    def apply_branding(self, template: Template, branding: ClientBranding) -> Template:
        return apply_branding(
            template,
            branding,
            include_css_variables=self.settings.include_css_variables,
            default_logo_alt=self.settings.default_logo_alt,
        )

    def apply_component_overrides(
        self,
        template: Template,
        overrides: Mapping[str, ComponentStyleOverride],
    ) -> Template:
        return apply_component_overrides(template, overrides)

    async def build(
        self,
        template: Template | str,
        *,
        layers: Sequence[Layer] = (),
        branding: ClientBranding | None = None,
    ) -> Template:
        """Run a template (or a stored template id) through the full pipeline.

        The resolved template becomes the lowest-priority base layer when
        extra layers are given, so every layer can override it.
        """
        if isinstance(template, str):
            template = await self._fetch(template)

        result = await self.resolve_inheritance(template)
        if layers:
            base_priority = min(layer.priority for layer in layers) - 1
            base_layer = Layer(
                kind=LayerKind.BASE,
                priority=base_priority,
                content=result.model_dump(by_alias=True),
                source=result.id,
            )
            result = self.resolve_conflicts([base_layer, *layers])
        if branding is not None:
            result = self.apply_branding(result, branding)
            if branding.components:
                result = self.apply_component_overrides(result, branding.components)
        logger.info("Built template %s", result.id)
        return result

    async def _fetch(self, template_id: str) -> Template:
        found = await self.store.get_by_id(template_id)
        if found is None:
            raise TemplateNotFoundError(template_id)
        return found
