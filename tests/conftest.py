"""Shared fixtures for docforge tests."""

import pytest

from docforge.config.settings import Settings, clear_settings_cache
from docforge.models import (
    BrandAssets,
    ClientBranding,
    ColorPalette,
    Template,
    Typography,
)
from docforge.store import InMemoryTemplateStore


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Isolate every test from the developer's DOCFORGE_* environment."""
    for name in (
        "DOCFORGE_LOG_LEVEL",
        "DOCFORGE_MAX_INHERITANCE_DEPTH",
        "DOCFORGE_DEFAULT_LOGO_ALT",
        "DOCFORGE_INCLUDE_CSS_VARIABLES",
        "DOCFORGE_TEMPLATES_DIR",
        "DOCFORGE_STORE_READ_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings that ignore any local .env file."""
    return Settings(_env_file=None, templates_dir=tmp_path / "templates")


@pytest.fixture
def base_template() -> Template:
    """A root template with one variable, one section and a content slot."""
    return Template.model_validate(
        {
            "id": "base",
            "name": "Base Document",
            "type": "quote",
            "schema": {
                "variables": [{"name": "client_name", "label": "Client"}],
                "sections": [{"id": "header", "name": "Header", "type": "header"}],
                "layout": {"type": "single-column", "sections": ["header"]},
                "styling": {
                    "fonts": [{"family": "Inter", "role": "body"}],
                    "colors": {"primary": "#000000", "text": "#111111"},
                    "spacing": {"md": 16},
                },
            },
            "content": {
                "markup": "<main>{{content}}</main>",
                "css": "main { color: {{brand.primary}}; }",
                "assets": [{"id": "logo", "url": "/logo.png"}],
            },
            "metadata": {"description": "Base quote", "author": "ops", "tags": ["quote"]},
        }
    )


@pytest.fixture
def child_template() -> Template:
    """A child of ``base`` using the merge strategy."""
    return Template.model_validate(
        {
            "id": "child",
            "name": "Child Document",
            "schema": {
                "variables": [{"name": "total", "type": "currency"}],
                "sections": [
                    {"id": "header", "name": "Child Header"},
                    {"id": "pricing", "name": "Pricing", "type": "table"},
                ],
            },
            "content": {"markup": "<p>Child body</p>", "css": ".price { font-weight: 700; }"},
            "inheritance": {"parent_id": "base", "merge_strategy": "merge"},
        }
    )


@pytest.fixture
def store(base_template: Template) -> InMemoryTemplateStore:
    """Store holding the base template."""
    return InMemoryTemplateStore([base_template])


@pytest.fixture
def branding() -> ClientBranding:
    """A complete client branding."""
    return ClientBranding(
        name="Acme",
        colors=ColorPalette(
            primary="#1D4ED8",
            secondary="#9333EA",
            accent="#F59E0B",
            neutral={"100": "#F5F5F5", "900": "#171717"},
        ),
        typography=Typography(font_family="Lato", font_url="https://fonts.example/lato.css"),
        spacing={"sm": 8, "md": 16, "gutter": "1.5rem"},
        assets=BrandAssets(logo_url="https://cdn.example/acme.svg", logo_alt="Acme logo"),
        custom_css=".brand { letter-spacing: 0.02em; }",
    )
