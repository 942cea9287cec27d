"""Derive new templates from a stored base template plus ad-hoc overrides."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from docforge.config.logging import get_logger
from docforge.exceptions import TemplateNotFoundError, ValidationError

from ..models import ClientBranding, Template, TemplateContent, TemplateMetadata, TemplateStyling
from ..models.template import utcnow
from ..store import TemplateStore
from .policies import shallow_override

logger = get_logger(__name__)


class TemplateOverrides(BaseModel):
    """Ad-hoc overrides applied on top of a base template.

    Each group is a partial mapping; keys present here replace the base's
    value for that key, keys absent keep the base's value.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, description="Name of the derived template")
    content: Optional[Dict[str, Any]] = Field(default=None, description="Content keys")
    styling: Optional[Dict[str, Any]] = Field(default=None, description="schema.styling keys")
    branding: Optional[Dict[str, Any]] = Field(default=None, description="Branding fields")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Metadata keys")


def _dump(model: Optional[BaseModel]) -> Dict[str, Any]:
    return model.model_dump() if model is not None else {}


def apply_overrides(base: Template, overrides: TemplateOverrides) -> Template:
    """Build a new template from ``base`` and ``overrides``.

    Field policy:
        content   shallow override, key by key
        styling   shallow override of schema.styling, key by key
        branding  shallow merge of base branding and override, override wins
        metadata  shallow override; created/updated timestamps reset
        id        fresh uuid
        unbranded dropped (content changed, the snapshot no longer applies)

    Raises:
        ValidationError: If an override group contains unknown keys or bad values.
    """
    try:
        content = TemplateContent.model_validate(
            shallow_override(_dump(base.content), overrides.content)
        )
        styling = TemplateStyling.model_validate(
            shallow_override(_dump(base.schema_.styling), overrides.styling)
        )
        branding = base.branding.model_copy(deep=True) if base.branding else None
        if overrides.branding is not None:
            branding = ClientBranding.model_validate(
                shallow_override(_dump(base.branding), overrides.branding)
            )
        now = utcnow()
        metadata = TemplateMetadata.model_validate(
            shallow_override(_dump(base.metadata), overrides.metadata)
            | {"created_at": now, "updated_at": now}
        )
    except ValueError as e:
        raise ValidationError(
            f"Invalid overrides for base template '{base.id}'", details=str(e)
        ) from e

    schema = base.schema_.model_copy(deep=True, update={"styling": styling})
    return base.model_copy(
        deep=True,
        update={
            "id": uuid.uuid4().hex,
            "name": overrides.name or base.name,
            "schema_": schema,
            "content": content,
            "branding": branding,
            "metadata": metadata,
            "unbranded": None,
        },
    )


async def compose_from_base(
    store: TemplateStore,
    base_id: str,
    overrides: TemplateOverrides | Dict[str, Any] | None = None,
) -> Template:
    """Fetch ``base_id`` and derive a new template from it.

    The stored base is never modified.

    Raises:
        TemplateNotFoundError: If the base template doesn't exist.
        ValidationError: If the overrides are malformed.
    """
    if overrides is None:
        overrides = TemplateOverrides()
    elif not isinstance(overrides, TemplateOverrides):
        try:
            overrides = TemplateOverrides.model_validate(overrides)
        except ValueError as e:
            raise ValidationError(
                f"Invalid overrides for base template '{base_id}'", details=str(e)
            ) from e

    base = await store.get_by_id(base_id)
    if base is None:
        raise TemplateNotFoundError(base_id)
    derived = apply_overrides(base, overrides)
    logger.info("Composed template %s from base %s", derived.id, base_id)
    return derived
