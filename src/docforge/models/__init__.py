"""Pydantic models for templates, branding and layers."""

from docforge.models.branding import (
    BrandAssets,
    ClientBranding,
    ColorPalette,
    ComponentStyleOverride,
    Typography,
)
from docforge.models.layer import Layer, LayerKind
from docforge.models.template import (
    BrandingSnapshot,
    FontDefinition,
    MergeStrategy,
    ResolvedTemplate,
    Template,
    TemplateAsset,
    TemplateContent,
    TemplateInheritance,
    TemplateLayout,
    TemplateMetadata,
    TemplateSchema,
    TemplateSection,
    TemplateStyling,
    TemplateVariable,
)

__all__ = [
    # Branding
    "BrandAssets",
    "ClientBranding",
    "ColorPalette",
    "ComponentStyleOverride",
    "Typography",
    # Layers
    "Layer",
    "LayerKind",
    # Templates
    "BrandingSnapshot",
    "FontDefinition",
    "MergeStrategy",
    "ResolvedTemplate",
    "Template",
    "TemplateAsset",
    "TemplateContent",
    "TemplateInheritance",
    "TemplateLayout",
    "TemplateMetadata",
    "TemplateSchema",
    "TemplateSection",
    "TemplateStyling",
    "TemplateVariable",
]
