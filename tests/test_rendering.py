"""Tests for module page rendering and navigation accumulation."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.indexing import GroupingIndexer
from docsite.models import IdentifierRecord
from docsite.rendering import (
    PageRenderer,
    RenderContext,
    RenderError,
    TemplateRenderer,
    link_entry,
)


def _connection_records() -> list[IdentifierRecord]:
    return [
        IdentifierRecord(
            id="lib.connection",
            source_path="lib/connection",
            body="Connection helpers.",
            name="connection",
            kind="module",
        ),
        IdentifierRecord(
            id="lib.connection.Connection",
            source_path="lib/connection",
            body="Streams quotes.",
            name="Connection",
            kind="class",
            memberof="lib.connection",
            signature="class Connection",
        ),
        IdentifierRecord(
            id="lib.connection.Connection.connect",
            source_path="lib/connection",
            body="Open the socket.",
            name="connect",
            kind="method",
            memberof="lib.connection.Connection",
            signature="connect(self, host)",
        ),
        IdentifierRecord(
            id="lib.connection._private",
            source_path="lib/connection",
            ignore=True,
            name="_private",
            kind="function",
        ),
    ]


def test_render_context_hands_out_unique_stable_anchors() -> None:
    context = RenderContext()
    assert context.anchor("a.b") == "a_b"
    assert context.anchor("a-b") == "a_b_1"
    assert context.anchor("a.b") == "a_b"

    context.reset()
    assert context.anchor("a-b") == "a_b"


def test_render_context_links_known_ids_only() -> None:
    context = RenderContext({"lib.x.Conn": "/content/sdk/lib-x"})
    assert context.link("lib.x.Conn", "Conn") == "[Conn](/content/sdk/lib-x?id=lib_x_conn)"
    assert context.link("lib.y.Missing") == "`lib.y.Missing`"


def test_layout_nests_members_under_parents() -> None:
    entries = TemplateRenderer.layout(
        [record for record in _connection_records() if not record.ignore]
    )
    assert [(entry.record.name, entry.level) for entry in entries] == [
        ("connection", 2),
        ("Connection", 3),
        ("connect", 4),
    ]


def test_layout_keeps_records_caught_in_memberof_cycles() -> None:
    records = [
        IdentifierRecord(id="a", source_path="lib/x", name="a", memberof="b"),
        IdentifierRecord(id="b", source_path="lib/x", name="b", memberof="a"),
        IdentifierRecord(id="c", source_path="lib/x", name="c"),
    ]
    entries = TemplateRenderer.layout(records)
    assert [(entry.record.id, entry.level) for entry in entries] == [
        ("c", 2),
        ("a", 2),
        ("b", 3),
    ]


def test_template_renderer_renders_visible_records() -> None:
    records = _connection_records()
    grouping = GroupingIndexer().group(records)
    context = RenderContext(grouping.path_index)

    output = TemplateRenderer().render(records, context, title="lib/connection")

    assert output.startswith("# lib/connection\n")
    assert "## Module: connection" in output
    assert "### Class: Connection" in output
    assert "#### connect()" in output
    assert "```\nconnect(self, host)\n```" in output
    assert "Open the socket." in output
    assert '<a name="lib_connection_connection_connect"></a>' in output
    assert (
        "**Member of**: [lib.connection.Connection]"
        "(/content/sdk/lib-connection?id=lib_connection_connection)"
    ) in output
    assert "_private" not in output
    assert "\n\n\n" not in output
    assert context.cached_templates == 1


def test_template_renderer_returns_empty_text_when_everything_is_ignored() -> None:
    records = [IdentifierRecord(id="lib.a._x", source_path="lib/a", ignore=True)]
    assert TemplateRenderer().render(records, RenderContext(), title="lib/a") == ""


def test_template_errors_are_fatal(tmp_path: Path) -> None:
    (tmp_path / "module.md.j2").write_text("{{ not_defined }}", encoding="utf-8")
    renderer = TemplateRenderer(tmp_path)
    records = [IdentifierRecord(id="lib.a.f", source_path="lib/a", name="f")]

    with pytest.raises(RenderError):
        renderer.render(records, RenderContext(), title="lib/a")


def test_link_entry_formats_reference_and_sidebar_lines() -> None:
    assert link_entry("lib-marketState-Quote") == (
        "* [lib/marketState/Quote](/content/sdk/lib-marketstate-quote)\n"
    )
    assert link_entry("lib-a", indent=True) == "\t* [lib/a](/content/sdk/lib-a)\n"


def test_page_renderer_writes_pages_in_sorted_key_order(tmp_path: Path) -> None:
    records = [
        IdentifierRecord(id="z.f", source_path="lib/zeta", name="f", kind="function"),
        IdentifierRecord(id="hidden", source_path="lib/hidden", ignore=True),
        IdentifierRecord(id="a.g", source_path="lib/Alpha", name="g", kind="function"),
        IdentifierRecord(id="m.h", source_path="lib/mid/Sub", name="h", kind="function"),
    ]
    grouping = GroupingIndexer().group(records)
    context = RenderContext(grouping.path_index)
    sdk_dir = tmp_path / "content" / "sdk"

    fragments = PageRenderer(TemplateRenderer(), sdk_dir).render_all(grouping, context)

    assert fragments.reference.startswith("# API Reference\n")
    assert fragments.reference.endswith(
        "* [lib/Alpha](/content/sdk/lib-alpha)\n"
        "* [lib/mid/Sub](/content/sdk/lib-mid-sub)\n"
        "* [lib/zeta](/content/sdk/lib-zeta)\n"
    )
    assert fragments.sidebar == (
        "<!-- sdk_open -->\n"
        "\t* [lib/Alpha](/content/sdk/lib-alpha)\n"
        "\t* [lib/mid/Sub](/content/sdk/lib-mid-sub)\n"
        "\t* [lib/zeta](/content/sdk/lib-zeta)\n"
        "<!-- sdk_close -->"
    )
    assert fragments.pages == [
        sdk_dir / "lib-alpha.md",
        sdk_dir / "lib-mid-sub.md",
        sdk_dir / "lib-zeta.md",
    ]
    assert sorted(path.name for path in sdk_dir.iterdir()) == [
        "lib-alpha.md",
        "lib-mid-sub.md",
        "lib-zeta.md",
    ]
    assert "lib-hidden" not in fragments.sidebar
    assert "g()" in (sdk_dir / "lib-alpha.md").read_text(encoding="utf-8")


def test_page_renderer_navigation_matches_for_any_arrival_order(tmp_path: Path) -> None:
    records = [
        IdentifierRecord(id=f"id{index}", source_path=f"lib/{name}", name=name)
        for index, name in enumerate(["b", "a", "c", "a", "b"])
    ]
    outputs = []
    for ordering in (records, list(reversed(records))):
        grouping = GroupingIndexer().group(ordering)
        fragments = PageRenderer(TemplateRenderer(), tmp_path / "sdk").render_all(
            grouping, RenderContext(grouping.path_index)
        )
        outputs.append((fragments.reference, fragments.sidebar))
    assert outputs[0] == outputs[1]
