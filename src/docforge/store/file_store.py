"""JSON-directory template store.

Layout on disk::

    <root>/<template_id>/template.json

The store is read-only; writing templates belongs to the authoring side.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docforge.config.logging import get_logger
from docforge.config.settings import Settings, get_settings
from docforge.exceptions import StorageError

from ..models import Template
from .base import validate_template_id

logger = get_logger(__name__)

TEMPLATE_FILENAME = "template.json"

# OSErrors that another attempt cannot fix
_PERMANENT_READ_ERRORS = (PermissionError, IsADirectoryError, NotADirectoryError)


class FileTemplateStore:
    """Reads templates from a directory tree of JSON documents."""

    def __init__(self, root: Path, read_attempts: int = 3):
        self.root = Path(root)
        self.read_attempts = read_attempts

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> FileTemplateStore:
        """Store rooted at the configured ``templates_dir``."""
        settings = settings or get_settings()
        return cls(settings.templates_dir, read_attempts=settings.store_read_attempts)

    def get_template_path(self, template_id: str) -> Path:
        """Get the JSON file path for a template id."""
        validate_template_id(template_id)
        return self.root / template_id / TEMPLATE_FILENAME

    async def get_by_id(self, template_id: str) -> Template | None:
        """Load a template by id.

        Returns:
            Template or None if no file exists for the id.

        Raises:
            ValidationError: If the id is not a safe path segment.
            StorageError: If the file exists but is not a valid template.
        """
        path = self.get_template_path(template_id)
        raw = await asyncio.to_thread(self._read_with_retry, path)
        if raw is None:
            logger.debug("Template not found on disk: %s", template_id)
            return None
        try:
            return Template.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in template '{template_id}'", details=str(e)) from e
        except PydanticValidationError as e:
            raise StorageError(f"Invalid template data for '{template_id}'", details=str(e)) from e

    def _read_with_retry(self, path: Path) -> str | None:
        reader = retry(
            retry=(
                retry_if_exception_type(OSError)
                & retry_if_not_exception_type(_PERMANENT_READ_ERRORS)
            ),
            stop=stop_after_attempt(self.read_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        )(_read_text)
        return reader(path)


def _read_text(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")
