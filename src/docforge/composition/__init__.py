"""Template composition: base composition, inheritance, layering, branding."""

__all__ = [
    # base composer
    "TemplateOverrides", "apply_overrides", "compose_from_base",
    # inheritance
    "InheritanceResolver", "resolve_inheritance", "MERGE_POLICIES", "EXTEND_POLICIES", "STRATEGIES",
    # branding
    "apply_branding", "apply_component_overrides", "generate_css_variables", "render_css_variables",
    # layers
    "deep_merge", "merge_layer_contents", "resolve_conflicts",
]
from .base_composer import TemplateOverrides, apply_overrides, compose_from_base
from .branding import apply_branding, apply_component_overrides, generate_css_variables, render_css_variables
from .inheritance import EXTEND_POLICIES, MERGE_POLICIES, STRATEGIES, InheritanceResolver, resolve_inheritance
from .layers import deep_merge, merge_layer_contents, resolve_conflicts
