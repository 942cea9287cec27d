"""Tests for inheritance resolution and the merge strategies."""

import logging

import pytest

from docforge.composition import InheritanceResolver, resolve_inheritance
from docforge.composition.inheritance import extend_parent, merge_into_parent
from docforge.exceptions import (
    CycleDetectedError,
    InheritanceDepthError,
    TemplateNotFoundError,
    UnknownStrategyError,
)
from docforge.models import Template
from docforge.store import InMemoryTemplateStore


def _template(template_id: str, parent_id: str | None = None, strategy: str = "merge", **doc):
    data = {"id": template_id, "name": template_id.title(), **doc}
    if parent_id is not None:
        data["inheritance"] = {"parent_id": parent_id, "merge_strategy": strategy}
    return Template.model_validate(data)


def _chain_store(length: int) -> InMemoryTemplateStore:
    """t0 -> t1 -> ... -> t{length-1} (root)."""
    templates = [
        _template(f"t{i}", parent_id=f"t{i + 1}" if i < length - 1 else None)
        for i in range(length)
    ]
    return InMemoryTemplateStore(templates)


class TestNoParent:
    """Templates without inheritance."""

    @pytest.mark.asyncio
    async def test_identity(self, base_template: Template) -> None:
        resolved = await resolve_inheritance(base_template, InMemoryTemplateStore())
        assert resolved.model_dump() == base_template.model_dump()


class TestMergeStrategy:
    """Tests for the merge strategy."""

    @pytest.mark.asyncio
    async def test_sections_dedup_parent_wins(
        self, store: InMemoryTemplateStore, child_template: Template
    ) -> None:
        resolved = await resolve_inheritance(child_template, store)
        assert resolved.section_ids() == ["header", "pricing"]
        # Parent's definition of the shared key is kept
        assert resolved.schema_.sections[0].name == "Header"

    @pytest.mark.asyncio
    async def test_variables_appended(
        self, store: InMemoryTemplateStore, child_template: Template
    ) -> None:
        resolved = await resolve_inheritance(child_template, store)
        assert resolved.variable_names() == ["client_name", "total"]

    @pytest.mark.asyncio
    async def test_identity_fields_follow_child(
        self, store: InMemoryTemplateStore, child_template: Template
    ) -> None:
        resolved = await resolve_inheritance(child_template, store)
        assert resolved.id == "child"
        assert resolved.name == "Child Document"
        assert resolved.inheritance.parent_id == "base"

    @pytest.mark.asyncio
    async def test_markup_fills_content_slot(
        self, store: InMemoryTemplateStore, child_template: Template
    ) -> None:
        resolved = await resolve_inheritance(child_template, store)
        assert resolved.content.markup == "<main><p>Child body</p></main>"

    @pytest.mark.asyncio
    async def test_markup_appended_without_slot(self) -> None:
        parent = _template("p", content={"markup": "<header/>"})
        child = _template("c", "p", content={"markup": "<p>body</p>"})
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.content.markup == "<header/>\n<p>body</p>"

    @pytest.mark.asyncio
    async def test_slot_with_whitespace(self) -> None:
        parent = _template("p", content={"markup": "<div>{{ content }}</div>"})
        child = _template("c", "p", content={"markup": "x"})
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.content.markup == "<div>x</div>"

    @pytest.mark.asyncio
    async def test_css_joined_parent_first(
        self, store: InMemoryTemplateStore, child_template: Template
    ) -> None:
        resolved = await resolve_inheritance(child_template, store)
        assert resolved.content.css == (
            "main { color: {{brand.primary}}; }\n.price { font-weight: 700; }"
        )

    @pytest.mark.asyncio
    async def test_assets_and_styling_inherited(
        self, store: InMemoryTemplateStore, child_template: Template
    ) -> None:
        resolved = await resolve_inheritance(child_template, store)
        assert [a.id for a in resolved.content.assets] == ["logo"]
        assert resolved.schema_.styling.colors == {"primary": "#000000", "text": "#111111"}
        assert [f.family for f in resolved.schema_.styling.fonts] == ["Inter"]

    @pytest.mark.asyncio
    async def test_styling_dicts_child_wins(self) -> None:
        parent = _template(
            "p", schema={"styling": {"colors": {"primary": "#000", "text": "#111"}}}
        )
        child = _template("c", "p", schema={"styling": {"colors": {"primary": "#F00"}}})
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.schema_.styling.colors == {"primary": "#F00", "text": "#111"}

    @pytest.mark.asyncio
    async def test_layout_and_metadata_child_explicit_fields_win(self) -> None:
        parent = _template(
            "p",
            schema={"layout": {"type": "two-column", "columns": 2, "sections": ["a"]}},
            metadata={"description": "parent", "author": "ops"},
        )
        child = _template(
            "c",
            "p",
            schema={"layout": {"columns": 3}},
            metadata={"author": "sales"},
        )
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.schema_.layout.type == "two-column"
        assert resolved.schema_.layout.columns == 3
        assert resolved.schema_.layout.sections == ["a"]
        assert resolved.metadata.description == "parent"
        assert resolved.metadata.author == "sales"

    @pytest.mark.asyncio
    async def test_three_level_chain(self) -> None:
        root = _template("root", content={"markup": "<html>{{content}}</html>"})
        middle = _template("middle", "root", content={"markup": "<body>{{content}}</body>"})
        leaf = _template("leaf", "middle", content={"markup": "<p>hi</p>"})
        store = InMemoryTemplateStore([root, middle])
        resolved = await resolve_inheritance(leaf, store)
        assert resolved.content.markup == "<html><body><p>hi</p></body></html>"

    def test_merge_into_parent_does_not_mutate(
        self, base_template: Template, child_template: Template
    ) -> None:
        parent_before = base_template.model_dump()
        child_before = child_template.model_dump()
        merge_into_parent(base_template, child_template)
        assert base_template.model_dump() == parent_before
        assert child_template.model_dump() == child_before


class TestExtendStrategy:
    """Tests for the extend strategy."""

    @pytest.mark.asyncio
    async def test_variables_concatenated(self) -> None:
        parent = _template("p", schema={"variables": [{"name": "v1"}]})
        child = _template("c", "p", "extend", schema={"variables": [{"name": "v2"}]})
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.variable_names() == ["v1", "v2"]

    @pytest.mark.asyncio
    async def test_layout_sections_concatenated(self) -> None:
        parent = _template("p", schema={"layout": {"sections": ["header"]}})
        child = _template("c", "p", "extend", schema={"layout": {"sections": ["pricing"]}})
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.schema_.layout.sections == ["header", "pricing"]

    @pytest.mark.asyncio
    async def test_markup_joined(self) -> None:
        parent = _template("p", content={"markup": "<main>{{content}}</main>"})
        child = _template("c", "p", "extend", content={"markup": "<footer/>"})
        resolved = await resolve_inheritance(child, InMemoryTemplateStore([parent]))
        assert resolved.content.markup == "<main>{{content}}</main>\n<footer/>"

    def test_colliding_keys_kept_and_logged(self, caplog) -> None:
        parent = _template("p", schema={"sections": [{"id": "s1"}]})
        child = _template("c", "p", "extend", schema={"sections": [{"id": "s1"}]})
        with caplog.at_level(logging.WARNING):
            resolved = extend_parent(parent, child)
        assert resolved.section_ids() == ["s1", "s1"]
        assert "colliding sections: s1" in caplog.text


class TestReplaceStrategy:
    """Tests for the replace strategy."""

    @pytest.mark.asyncio
    async def test_child_supersedes_parent(self, store: InMemoryTemplateStore) -> None:
        child = _template("c", "base", "replace", content={"markup": "<p>only</p>"})
        resolved = await resolve_inheritance(child, store)
        assert resolved.model_dump() == child.model_dump()

    @pytest.mark.asyncio
    async def test_parent_must_still_exist(self) -> None:
        child = _template("c", "gone", "replace")
        with pytest.raises(TemplateNotFoundError):
            await resolve_inheritance(child, InMemoryTemplateStore())


class TestResolutionErrors:
    """Error cases for inheritance resolution."""

    @pytest.mark.asyncio
    async def test_missing_parent(self) -> None:
        child = _template("c", "missing")
        with pytest.raises(TemplateNotFoundError) as exc_info:
            await resolve_inheritance(child, InMemoryTemplateStore())
        assert exc_info.value.template_id == "missing"
        assert exc_info.value.referenced_by == "c"
        assert "parent of 'c'" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_two_template_cycle(self) -> None:
        a = _template("a", "b")
        b = _template("b", "a")
        with pytest.raises(CycleDetectedError) as exc_info:
            await resolve_inheritance(a, InMemoryTemplateStore([a, b]))
        assert exc_info.value.chain == ["a", "b", "a"]

    @pytest.mark.asyncio
    async def test_self_parent(self) -> None:
        a = _template("a", "a")
        with pytest.raises(CycleDetectedError) as exc_info:
            await resolve_inheritance(a, InMemoryTemplateStore([a]))
        assert exc_info.value.chain == ["a", "a"]

    @pytest.mark.asyncio
    async def test_unknown_strategy(self, store: InMemoryTemplateStore) -> None:
        child = _template("c", "base", "overlay")
        with pytest.raises(UnknownStrategyError) as exc_info:
            await resolve_inheritance(child, store)
        assert exc_info.value.template_id == "c"

    @pytest.mark.asyncio
    async def test_unknown_strategy_in_ancestor(self, store: InMemoryTemplateStore) -> None:
        middle = _template("middle", "base", "patch")
        leaf = _template("leaf", "middle")
        store.add(middle)
        with pytest.raises(UnknownStrategyError) as exc_info:
            await resolve_inheritance(leaf, store)
        assert exc_info.value.template_id == "middle"

    @pytest.mark.asyncio
    async def test_depth_limit(self) -> None:
        """t0 has three ancestors: allowed at limit 3, rejected at limit 2."""
        store = _chain_store(4)
        t0 = await store.get_by_id("t0")
        resolved = await resolve_inheritance(t0, store, max_depth=3)
        assert resolved.id == "t0"
        with pytest.raises(InheritanceDepthError) as exc_info:
            await resolve_inheritance(t0, store, max_depth=2)
        assert exc_info.value.limit == 2

    @pytest.mark.asyncio
    async def test_store_unchanged_after_resolution(
        self, store: InMemoryTemplateStore, base_template: Template, child_template: Template
    ) -> None:
        child_before = child_template.model_dump()
        await resolve_inheritance(child_template, store)
        assert (await store.get_by_id("base")).model_dump() == base_template.model_dump()
        assert child_template.model_dump() == child_before


class TestInheritanceChain:
    """Tests for InheritanceResolver.chain."""

    @pytest.mark.asyncio
    async def test_root_to_leaf(self) -> None:
        store = _chain_store(3)
        resolver = InheritanceResolver(store)
        t0 = await store.get_by_id("t0")
        assert await resolver.chain(t0) == ["t2", "t1", "t0"]

    @pytest.mark.asyncio
    async def test_root_only(self, base_template: Template) -> None:
        resolver = InheritanceResolver(InMemoryTemplateStore())
        assert await resolver.chain(base_template) == ["base"]

    @pytest.mark.asyncio
    async def test_cycle(self) -> None:
        a = _template("a", "b")
        b = _template("b", "a")
        resolver = InheritanceResolver(InMemoryTemplateStore([a, b]))
        with pytest.raises(CycleDetectedError) as exc_info:
            await resolver.chain(a)
        assert exc_info.value.chain == ["a", "b", "a"]

    @pytest.mark.asyncio
    async def test_depth(self) -> None:
        store = _chain_store(4)
        resolver = InheritanceResolver(store, max_depth=2)
        with pytest.raises(InheritanceDepthError):
            await resolver.chain(await store.get_by_id("t0"))


class TestExtendMarkup:
    """Markup concatenation under extend."""

    def test_both_empty(self) -> None:
        parent = _template("p")
        child = _template("c", "p", "extend")
        assert extend_parent(parent, child).content.markup == ""

    def test_only_parent(self) -> None:
        parent = _template("p", content={"markup": "<header/>"})
        child = _template("c", "p", "extend")
        assert extend_parent(parent, child).content.markup == "<header/>"
