"""Client branding models.

A ClientBranding value carries the visual tokens substituted into a template:
palette, typography, spacing scale, logo assets, raw custom CSS, and optional
per-component style overrides. The engine only reads the fields it
substitutes; palette completeness is the branding collaborator's concern.
"""

from __future__ import annotations

from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

SpacingValue = Union[int, float, str]


class ColorPalette(BaseModel):
    """Brand palette with a shade-indexed neutral ramp."""

    primary: str = Field(description="Primary brand color, e.g., '#1D4ED8'")
    secondary: str = Field(description="Secondary brand color")
    accent: str = Field(description="Accent/highlight color")
    neutral: Dict[str, str] = Field(
        default_factory=dict,
        description="Neutral ramp keyed by shade, e.g., {'100': '#F5F5F5', '900': '#111'}",
    )
    success: Optional[str] = Field(default=None, description="Success state color")
    warning: Optional[str] = Field(default=None, description="Warning state color")
    error: Optional[str] = Field(default=None, description="Error state color")
    info: Optional[str] = Field(default=None, description="Informational state color")
    background: Optional[str] = Field(default=None, description="Page background color")
    surface: Optional[str] = Field(default=None, description="Card/panel surface color")
    text: Optional[str] = Field(default=None, description="Body text color")
    border: Optional[str] = Field(default=None, description="Border color")


class Typography(BaseModel):
    """Brand typography."""

    font_family: str = Field(description="Primary font family, e.g., 'Inter'")
    secondary_font_family: Optional[str] = Field(
        default=None,
        description="Font family for secondary text",
    )
    heading_weight: str = Field(default="700", description="Heading font weight")
    body_weight: str = Field(default="400", description="Body font weight")
    font_url: str = Field(default="", description="Stylesheet URL that loads the font")


class BrandAssets(BaseModel):
    """Asset references used by markup placeholders."""

    logo_url: str = Field(default="", description="URL of the primary logo")
    logo_alt: Optional[str] = Field(default=None, description="Alt text for the logo")
    favicon_url: str = Field(default="", description="URL of the favicon")


class ComponentStyleOverride(BaseModel):
    """Style overrides for one UI component.

    ``base`` holds CSS properties for the component itself; each entry of
    ``variants`` holds the properties of one named variant.
    """

    base: Dict[str, str] = Field(
        default_factory=dict,
        description="CSS properties, e.g., {'borderRadius': '8px'}",
    )
    variants: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="Variant name to CSS properties, e.g., {'primary': {...}}",
    )


class ClientBranding(BaseModel):
    """Client-specific visual tokens applied to a resolved template."""

    name: str = Field(description="Brand name shown in documents")
    colors: ColorPalette = Field(description="Brand color palette")
    typography: Optional[Typography] = Field(default=None, description="Brand typography")
    spacing: Dict[str, SpacingValue] = Field(
        default_factory=dict,
        description="Spacing scale keyed by token, e.g., {'sm': 8, 'md': 16}",
    )
    assets: BrandAssets = Field(default_factory=BrandAssets, description="Logo references")
    custom_css: Optional[str] = Field(
        default=None,
        description="Raw CSS appended to the template's style text",
    )
    components: Dict[str, ComponentStyleOverride] = Field(
        default_factory=dict,
        description="Component name to style overrides",
    )
