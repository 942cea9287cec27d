"""Apply client branding to a resolved template.

Branding is a pure substitution pass over the template's style text and
markup plus an overwrite of the structured styling descriptor.

Re-application policy (snapshot-and-rebuild): the first application records
the template's unbranded content and styling in ``Template.unbranded``.
Every application starts from that snapshot when it exists, never from
already-branded text, so applying the same branding twice gives a deep-equal
result and appended custom CSS is never duplicated. Applying a different
branding re-brands from the clean snapshot.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Union

from docforge.config.logging import get_logger
from docforge.constants import (
    ACCENT_COLOR_TOKEN,
    BRAND_FONT_ROLE,
    BRAND_NAME_TOKEN,
    DEFAULT_LOGO_ALT,
    FONT_FAMILY_TOKEN,
    LOGO_ALT_TOKEN,
    LOGO_URL_TOKEN,
    NEUTRAL_TOKEN_TEMPLATE,
    PRIMARY_COLOR_TOKEN,
    SECONDARY_COLOR_TOKEN,
    SPACING_TOKEN_TEMPLATE,
)

from ..models import (
    BrandingSnapshot,
    ClientBranding,
    ComponentStyleOverride,
    FontDefinition,
    Template,
    TemplateStyling,
)
from .policies import join_text

logger = get_logger(__name__)

_OPTIONAL_PALETTE_FIELDS = (
    "success",
    "warning",
    "error",
    "info",
    "background",
    "surface",
    "text",
    "border",
)


def format_spacing(value: Union[int, float, str]) -> str:
    """Numbers become pixel lengths; strings are used verbatim."""
    if isinstance(value, (int, float)):
        return f"{value:g}px"
    return value


def style_tokens(branding: ClientBranding) -> Dict[str, str]:
    """Token -> replacement map for style text."""
    tokens = {
        PRIMARY_COLOR_TOKEN: branding.colors.primary,
        SECONDARY_COLOR_TOKEN: branding.colors.secondary,
        ACCENT_COLOR_TOKEN: branding.colors.accent,
    }
    for shade, color in branding.colors.neutral.items():
        tokens[NEUTRAL_TOKEN_TEMPLATE.format(shade=shade)] = color
    if branding.typography is not None:
        tokens[FONT_FAMILY_TOKEN] = branding.typography.font_family
    for token, value in branding.spacing.items():
        tokens[SPACING_TOKEN_TEMPLATE.format(token=token)] = format_spacing(value)
    return tokens


def markup_tokens(
    branding: ClientBranding,
    default_logo_alt: str = DEFAULT_LOGO_ALT,
) -> Dict[str, str]:
    """Token -> replacement map for markup."""
    return {
        LOGO_URL_TOKEN: branding.assets.logo_url,
        LOGO_ALT_TOKEN: branding.assets.logo_alt or default_logo_alt,
        BRAND_NAME_TOKEN: branding.name,
    }


def substitute(text: str, tokens: Mapping[str, str]) -> str:
    """Literal replacement of every token occurrence in a single pass."""
    if not text or not tokens:
        return text
    pattern = re.compile("|".join(re.escape(t) for t in sorted(tokens, key=len, reverse=True)))
    return pattern.sub(lambda m: tokens[m.group(0)], text)


def generate_css_variables(branding: ClientBranding) -> Dict[str, str]:
    """CSS custom properties describing the branding."""
    colors = branding.colors
    variables = {
        "--color-primary": colors.primary,
        "--color-secondary": colors.secondary,
        "--color-accent": colors.accent,
    }
    for shade, color in colors.neutral.items():
        variables[f"--color-neutral-{shade}"] = color
    for field in _OPTIONAL_PALETTE_FIELDS:
        value = getattr(colors, field)
        if value:
            variables[f"--color-{field}"] = value
    typography = branding.typography
    if typography is not None:
        variables["--font-primary"] = typography.font_family
        if typography.secondary_font_family:
            variables["--font-secondary"] = typography.secondary_font_family
        variables["--font-weight-heading"] = typography.heading_weight
        variables["--font-weight-body"] = typography.body_weight
    for token, value in branding.spacing.items():
        variables[f"--spacing-{token}"] = format_spacing(value)
    return variables


def render_css_variables(branding: ClientBranding) -> str:
    """Render the branding's custom properties as a ``:root`` rule."""
    variables = generate_css_variables(branding)
    body = "\n".join(f"  {name}: {value};" for name, value in variables.items())
    return f":root {{\n{body}\n}}"


def brand_styling(styling: TemplateStyling, branding: ClientBranding) -> TemplateStyling:
    """Overwrite the structured styling descriptor with branding values."""
    colors = {
        **styling.colors,
        "primary": branding.colors.primary,
        "secondary": branding.colors.secondary,
        "accent": branding.colors.accent,
    }
    fonts = [font.model_copy() for font in styling.fonts]
    typography = branding.typography
    if typography is not None:
        brand_font = FontDefinition(
            family=typography.font_family,
            weight=typography.body_weight,
            role=BRAND_FONT_ROLE,
            url=typography.font_url,
        )
        fonts.insert(0, brand_font)
    spacing = dict(styling.spacing)
    for token, value in branding.spacing.items():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            spacing[token] = value
    return styling.model_copy(
        deep=True,
        update={"colors": colors, "fonts": fonts, "spacing": spacing},
    )


def apply_branding(
    template: Template,
    branding: ClientBranding,
    *,
    include_css_variables: bool = False,
    default_logo_alt: str = DEFAULT_LOGO_ALT,
) -> Template:
    """Return a branded copy of ``template``.

    Args:
        template: Template to brand; may already be branded.
        branding: Client branding to apply.
        include_css_variables: Prepend a ``:root`` block of brand custom properties.
        default_logo_alt: Alt text used when the branding logo has none.
    """
    snapshot = template.unbranded or BrandingSnapshot(
        content=template.content,
        styling=template.schema_.styling,
    )
    base_content = snapshot.content

    css = join_text(
        render_css_variables(branding) if include_css_variables else None,
        substitute(base_content.css or "", style_tokens(branding)),
        branding.custom_css,
    )
    markup = substitute(base_content.markup, markup_tokens(branding, default_logo_alt))
    content = base_content.model_copy(deep=True, update={"markup": markup, "css": css})
    schema = template.schema_.model_copy(
        deep=True,
        update={"styling": brand_styling(snapshot.styling, branding)},
    )
    if template.unbranded is not None:
        logger.debug("Re-branding template %s from its unbranded snapshot", template.id)
    return template.model_copy(
        deep=True,
        update={
            "schema_": schema,
            "content": content,
            "branding": branding.model_copy(deep=True),
            "unbranded": snapshot.model_copy(deep=True),
        },
    )


def _kebab(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).replace("_", "-").lower()


def _rule(selector: str, properties: Mapping[str, str]) -> str:
    lines = [f"  {_kebab(prop)}: {value};" for prop, value in properties.items()]
    return "\n".join([f"{selector} {{", *lines, "}"])


def component_rules(overrides: Mapping[str, ComponentStyleOverride]) -> List[str]:
    """Rule blocks for each component: the base block, then one per variant."""
    rules: List[str] = []
    for component, override in overrides.items():
        rules.append(_rule(f".{component}", override.base))
        for variant, properties in override.variants.items():
            rules.append(_rule(f".{component}--{variant}", properties))
    return rules


def apply_component_overrides(
    template: Template,
    overrides: Mapping[str, ComponentStyleOverride],
) -> Template:
    """Append component rule blocks to the template's style text.

    Blocks already present verbatim are not appended again. A branded
    template gets the blocks in its unbranded snapshot too, so re-branding
    keeps them.
    """
    rules = component_rules(overrides)
    css = template.content.css
    new_rules = [rule for rule in rules if not css or rule not in css]
    update = {}
    if new_rules:
        update["content"] = template.content.model_copy(
            deep=True, update={"css": join_text(css, *new_rules)}
        )
    snapshot = template.unbranded
    if snapshot is not None:
        snapshot_css = snapshot.content.css
        snapshot_rules = [rule for rule in rules if not snapshot_css or rule not in snapshot_css]
        if snapshot_rules:
            snapshot_content = snapshot.content.model_copy(
                deep=True, update={"css": join_text(snapshot_css, *snapshot_rules)}
            )
            update["unbranded"] = snapshot.model_copy(
                deep=True, update={"content": snapshot_content}
            )
    return template.model_copy(deep=True, update=update)
