"""Data models for composable document templates.

A Template combines a structured schema (variables, sections, layout,
styling), textual content (markup, CSS, script, assets), descriptive
metadata, optional client branding and an optional inheritance declaration.

Model hierarchy:
- TemplateSchema: variables, sections, layout, styling
- TemplateContent: markup, css, js, assets
- TemplateInheritance: parent linkage and merge strategy
- Template: the full document definition
- ResolvedTemplate: a Template produced by layer resolution, with provenance
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docforge.exceptions import UnknownStrategyError

from .branding import ClientBranding


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class MergeStrategy(str, Enum):
    """How a child template combines with its resolved parent."""

    MERGE = "merge"
    REPLACE = "replace"
    EXTEND = "extend"

    @classmethod
    def parse(cls, value: Union[str, MergeStrategy], template_id: str) -> MergeStrategy:
        """Parse a declared strategy, failing loudly on anything unrecognized.

        Raises:
            UnknownStrategyError: If value is not exactly one of the members.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownStrategyError(template_id, value) from None


# =============================================================================
# Schema
# =============================================================================


class TemplateVariable(BaseModel):
    """A fillable variable declared by the template. Keyed by name."""

    name: str = Field(description="Unique variable name, e.g., 'client_name'")
    type: str = Field(default="text", description="Value type: text, number, date, currency")
    label: str = Field(default="", description="Human-readable label")
    required: bool = Field(default=False, description="Whether a value must be supplied")
    default: Any = Field(default=None, description="Default value")
    description: str = Field(default="", description="Authoring hint")


class TemplateSection(BaseModel):
    """A document section declared by the template. Keyed by id."""

    id: str = Field(description="Unique section id, e.g., 'pricing'")
    name: str = Field(default="", description="Display name")
    type: str = Field(default="content", description="Section kind: header, content, table")
    order: int = Field(default=0, description="Sort hint within the layout")
    required: bool = Field(default=False, description="Whether the section must be filled")
    config: Dict[str, Any] = Field(default_factory=dict, description="Section-specific settings")


class TemplateLayout(BaseModel):
    """Layout descriptor."""

    type: str = Field(default="single-column", description="Layout kind")
    columns: int = Field(default=1, description="Number of content columns")
    sections: List[str] = Field(
        default_factory=list,
        description="Section ids in display order",
    )
    header: bool = Field(default=True, description="Whether a page header is rendered")
    footer: bool = Field(default=True, description="Whether a page footer is rendered")


class FontDefinition(BaseModel):
    """A font used by the template."""

    family: str = Field(description="Font family name, e.g., 'Inter'")
    weight: str = Field(default="400", description="Font weight")
    role: str = Field(default="body", description="Where used: 'headings', 'body', 'brand'")
    url: str = Field(default="", description="Stylesheet URL that loads the font")


class TemplateStyling(BaseModel):
    """Structured styling descriptor."""

    model_config = ConfigDict(extra="forbid")

    fonts: List[FontDefinition] = Field(default_factory=list, description="Fonts in priority order")
    colors: Dict[str, str] = Field(
        default_factory=dict,
        description="Named colors, e.g., {'primary': '#1D4ED8'}",
    )
    spacing: Dict[str, Union[int, float, str]] = Field(
        default_factory=dict,
        description="Spacing scale keyed by token, e.g., {'md': 16}",
    )
    custom_css: Optional[str] = Field(default=None, description="Raw custom style text")


class TemplateSchema(BaseModel):
    """Structured part of a template."""

    model_config = ConfigDict(extra="forbid")

    variables: List[TemplateVariable] = Field(default_factory=list)
    sections: List[TemplateSection] = Field(default_factory=list)
    layout: TemplateLayout = Field(default_factory=TemplateLayout)
    styling: TemplateStyling = Field(default_factory=TemplateStyling)


# =============================================================================
# Content
# =============================================================================


class TemplateAsset(BaseModel):
    """An asset referenced by the template markup. Keyed by id."""

    id: str = Field(description="Unique asset id")
    type: str = Field(default="image", description="Asset kind: image, font, file")
    url: str = Field(default="", description="Where the asset is served from")
    alt: str = Field(default="", description="Alt text for images")


class TemplateContent(BaseModel):
    """Textual part of a template."""

    model_config = ConfigDict(extra="forbid")

    markup: str = Field(default="", description="HTML markup")
    css: Optional[str] = Field(default=None, description="Style text")
    js: Optional[str] = Field(default=None, description="Script text")
    assets: List[TemplateAsset] = Field(default_factory=list)


class TemplateMetadata(BaseModel):
    """Descriptive fields. Extra keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    description: str = Field(default="", description="What the template is for")
    author: str = Field(default="", description="Who authored it")
    category: str = Field(default="", description="Catalog category")
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# Template
# =============================================================================


class TemplateInheritance(BaseModel):
    """Parent linkage of a template.

    ``merge_strategy`` is kept as the declared string so that an unknown value
    is reported by the resolver as UnknownStrategyError, naming the template.
    """

    parent_id: str = Field(description="Id of the parent template")
    overrides: List[str] = Field(
        default_factory=list,
        description="Field paths the child declares it overrides (informational)",
    )
    merge_strategy: str = Field(description="One of: merge, replace, extend")

    @field_validator("merge_strategy", mode="before")
    @classmethod
    def _strategy_value(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v

    def strategy_for(self, template_id: str) -> MergeStrategy:
        """Parsed strategy for the owning template."""
        return MergeStrategy.parse(self.merge_strategy, template_id)


class BrandingSnapshot(BaseModel):
    """Content and styling of a template as it was before branding was applied."""

    content: TemplateContent
    styling: TemplateStyling


class Template(BaseModel):
    """A versioned document definition."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Opaque template identifier")
    name: str = Field(description="Display name, e.g., 'Standard Quote'")
    version: str = Field(default="1.0.0", description="Template version")
    type: str = Field(default="document", description="Document kind: quote, proposal, report")
    schema_: TemplateSchema = Field(
        default_factory=TemplateSchema,
        alias="schema",
        description="Structured definition",
    )
    content: TemplateContent = Field(default_factory=TemplateContent)
    metadata: TemplateMetadata = Field(default_factory=TemplateMetadata)
    branding: Optional[ClientBranding] = Field(default=None)
    inheritance: Optional[TemplateInheritance] = Field(default=None)
    unbranded: Optional[BrandingSnapshot] = Field(
        default=None,
        description="Pre-branding content/styling, set by apply_branding",
    )

    @property
    def has_parent(self) -> bool:
        return self.inheritance is not None

    def variable_names(self) -> List[str]:
        return [v.name for v in self.schema_.variables]

    def section_ids(self) -> List[str]:
        return [s.id for s in self.schema_.sections]

    def to_document(self) -> Dict[str, Any]:
        """JSON-compatible dict using the public field names (``schema``)."""
        return self.model_dump(mode="json", by_alias=True)


class ResolvedTemplate(Template):
    """A template assembled from layers, with provenance.

    ``sources`` lists each layer's source identifier in application order
    (lowest priority first), i.e. overwrite order, not final precedence.
    """

    resolved: Literal[True] = True
    resolved_at: datetime = Field(default_factory=utcnow)
    sources: List[str] = Field(default_factory=list)
