"""docforge - hierarchical document template composition.

Compose quotes, proposals and reports from base templates, inheritance
chains, priority-ordered layers and client branding.
"""

from docforge.composition import (
    TemplateOverrides,
    apply_branding,
    apply_component_overrides,
    compose_from_base,
    deep_merge,
    generate_css_variables,
    render_css_variables,
    resolve_conflicts,
    resolve_inheritance,
)
from docforge.engine import TemplateEngine
from docforge.exceptions import (
    CycleDetectedError,
    DocForgeError,
    InheritanceDepthError,
    StorageError,
    TemplateNotFoundError,
    UnknownStrategyError,
    ValidationError,
)
from docforge.models import (
    ClientBranding,
    Layer,
    LayerKind,
    MergeStrategy,
    ResolvedTemplate,
    Template,
)
from docforge.store import FileTemplateStore, InMemoryTemplateStore, TemplateStore

__version__ = "0.1.0"

__all__ = [
    "TemplateEngine",
    # Operations
    "TemplateOverrides",
    "compose_from_base",
    "resolve_inheritance",
    "resolve_conflicts",
    "deep_merge",
    "apply_branding",
    "apply_component_overrides",
    "generate_css_variables",
    "render_css_variables",
    # Models
    "Template",
    "ResolvedTemplate",
    "ClientBranding",
    "Layer",
    "LayerKind",
    "MergeStrategy",
    # Stores
    "TemplateStore",
    "InMemoryTemplateStore",
    "FileTemplateStore",
    # Errors
    "DocForgeError",
    "TemplateNotFoundError",
    "CycleDetectedError",
    "UnknownStrategyError",
    "InheritanceDepthError",
    "ValidationError",
    "StorageError",
]
