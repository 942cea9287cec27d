"""Template store access.

The engine only needs ``get_by_id``; persistence, revisions and listing
belong to the storage collaborator.
"""

__all__ = [
    "TemplateStore",
    "InMemoryTemplateStore",
    "FileTemplateStore",
    "validate_template_id",
]
from .base import InMemoryTemplateStore, TemplateStore, validate_template_id
from .file_store import FileTemplateStore
