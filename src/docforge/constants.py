"""Centralized constants for docforge."""
#Placeholder in parent markup that receives child markup under the merge strategy
CONTENT_PLACEHOLDER_PATTERN=r"\{\{\s*content\s*\}\}"
#Markup placeholders filled from ClientBranding
LOGO_URL_TOKEN="{{logo_url}}"
LOGO_ALT_TOKEN="{{logo_alt}}"
BRAND_NAME_TOKEN="{{brand_name}}"
#Style text tokens filled from ClientBranding
PRIMARY_COLOR_TOKEN="{{brand.primary}}"
SECONDARY_COLOR_TOKEN="{{brand.secondary}}"
ACCENT_COLOR_TOKEN="{{brand.accent}}"
FONT_FAMILY_TOKEN="{{brand.font_family}}"
NEUTRAL_TOKEN_TEMPLATE="{{{{brand.neutral.{shade}}}}}"
SPACING_TOKEN_TEMPLATE="{{{{spacing.{token}}}}}"
DEFAULT_LOGO_ALT="Logo"
#Role given to the font entry built from branding typography
BRAND_FONT_ROLE="brand"
