"""Centralized exception classes for docforge.

This module provides a hierarchy of exceptions for template composition.
Every error names the template it concerns so callers can surface it
directly to the person editing the template.
"""

from __future__ import annotations


class DocForgeError(Exception):
    """Base exception for all docforge errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: str | None = None):
        """Initialize the exception.

        Args:
            message: User-friendly error message.
            details: Additional technical details for debugging.
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class TemplateNotFoundError(DocForgeError, LookupError):
    """Raised when a base or parent template doesn't exist in the store."""

    def __init__(self, template_id: str, referenced_by: str | None = None):
        if referenced_by:
            message = f"Template '{template_id}' not found (parent of '{referenced_by}')"
        else:
            message = f"Template '{template_id}' not found"
        super().__init__(message)
        self.template_id = template_id
        self.referenced_by = referenced_by


class CycleDetectedError(DocForgeError):
    """Raised when an inheritance chain revisits a template id."""

    def __init__(self, template_id: str, chain: list[str]):
        super().__init__(
            f"Inheritance cycle detected at template '{template_id}'",
            details=" -> ".join(chain),
        )
        self.template_id = template_id
        self.chain = list(chain)


class UnknownStrategyError(DocForgeError, ValueError):
    """Raised when a template declares a merge strategy outside merge/replace/extend."""

    def __init__(self, template_id: str, strategy: object):
        super().__init__(
            f"Template '{template_id}' declares unknown merge strategy {strategy!r}",
            details="Expected one of: merge, replace, extend",
        )
        self.template_id = template_id
        self.strategy = strategy


class InheritanceDepthError(DocForgeError):
    """Raised when an inheritance chain is deeper than the configured limit."""

    def __init__(self, template_id: str, limit: int):
        super().__init__(
            f"Inheritance chain of template '{template_id}' exceeds {limit} levels"
        )
        self.template_id = template_id
        self.limit = limit


class ValidationError(DocForgeError, ValueError):
    """Raised when an override, layer or branding input is malformed."""

    pass


class StorageError(DocForgeError):
    """Raised when a template store cannot read a stored template."""

    pass
