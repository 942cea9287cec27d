"""Template store interface + an in-memory implementation."""

from __future__ import annotations

import re
from typing import Iterable, Protocol, runtime_checkable

from docforge.config.logging import get_logger
from docforge.exceptions import ValidationError

from ..models import Template

logger = get_logger(__name__)


@runtime_checkable
class TemplateStore(Protocol):
    """Read-only template lookup used by the engine.

    Returns None when the id is unknown; the engine turns that into
    TemplateNotFoundError with the referencing template in the message.
    """

    async def get_by_id(self, template_id: str) -> Template | None: ...


def validate_template_id(template_id: str) -> None:
    """Raise ValidationError if a template id is unsafe to use as a path segment."""
    if not template_id or len(template_id) > 100:
        raise ValidationError(f"Template id {template_id!r} is empty or too long")
    if ".." in template_id or "/" in template_id or "\\" in template_id:
        raise ValidationError(f"Invalid template id {template_id!r}: path traversal")
    if not re.match(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*$", template_id):
        raise ValidationError(f"Invalid template id format: {template_id!r}")


class InMemoryTemplateStore:
    """Dict-backed store. Hands out deep copies so stored templates stay pristine."""

    def __init__(self, templates: Iterable[Template] = ()):
        self._templates: dict[str, Template] = {}
        for template in templates:
            self.add(template)

    def add(self, template: Template) -> None:
        self._templates[template.id] = template.model_copy(deep=True)
        logger.debug("Stored template %s", template.id)

    async def get_by_id(self, template_id: str) -> Template | None:
        template = self._templates.get(template_id)
        if template is None:
            return None
        return template.model_copy(deep=True)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)
