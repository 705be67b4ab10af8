"""Render module pages from grouped identifier records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from jinja2 import Environment, Template, TemplateError

from .indexing import slug
from .logging import get_logger
from .models import GroupingResult, IdentifierRecord, NavigationFragments
from .postproc.lint import MarkdownLinter
from .postproc.markers import MarkerManager
from .templating import create_environment

MODULE_TEMPLATE = "module.md.j2"
REFERENCE_TEMPLATE = "sdk_reference.md.j2"
SIDEBAR_KEY = "sdk"
_ANCHOR_UNSAFE = re.compile(r"[^A-Za-z0-9]+")


class RenderError(RuntimeError):
    """Raised when a module page cannot be rendered."""


@dataclass
class RenderEntry:
    """A record positioned in the page outline."""

    record: IdentifierRecord
    level: int

    @property
    def heading(self) -> str:
        record = self.record
        if record.kind in ("function", "method"):
            return f"{record.display_name}()"
        if record.kind:
            return f"{record.kind.capitalize()}: {record.display_name}"
        return record.display_name


class RenderContext:
    """Per-run rendering state: compiled templates, anchors and the path index.

    The caller owns the lifecycle and calls :meth:`reset` before each run so
    nothing leaks between generations.
    """

    def __init__(self, path_index: Optional[Dict[str, str]] = None) -> None:
        self.path_index: Dict[str, str] = dict(path_index or {})
        self._anchors: Dict[str, str] = {}
        self._taken: Set[str] = set()
        self._templates: Dict[str, Template] = {}

    def reset(self, path_index: Optional[Dict[str, str]] = None) -> None:
        self.path_index = dict(path_index or {})
        self._anchors.clear()
        self._taken.clear()
        self._templates.clear()

    @property
    def cached_templates(self) -> int:
        return len(self._templates)

    def template(self, env: Environment, name: str) -> Template:
        if name not in self._templates:
            self._templates[name] = env.get_template(name)
        return self._templates[name]

    def anchor(self, identifier: str) -> str:
        """Return a stable, run-unique anchor name for ``identifier``."""
        existing = self._anchors.get(identifier)
        if existing is not None:
            return existing
        base = _ANCHOR_UNSAFE.sub("_", identifier).strip("_").lower() or "item"
        candidate = base
        suffix = 1
        while candidate in self._taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        self._taken.add(candidate)
        self._anchors[identifier] = candidate
        return candidate

    def link(self, identifier: str, label: Optional[str] = None) -> str:
        """Return a markdown cross-reference, or plain text for unknown ids."""
        text = label or identifier
        target = self.path_index.get(identifier)
        if target is None:
            return f"`{text}`"
        return f"[{text}]({target}?id={self.anchor(identifier)})"


class TemplateRenderer:
    """Renders a module's records through the jinja2 module template."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        separators: bool = True,
        linter: MarkdownLinter | None = None,
    ) -> None:
        self.env = create_environment(templates_dir)
        self.separators = separators
        self.linter = linter or MarkdownLinter()

    def render(
        self,
        records: Sequence[IdentifierRecord],
        context: RenderContext,
        *,
        title: str,
    ) -> str:
        visible = [record for record in records if not record.ignore]
        if not visible:
            return ""
        entries = self.layout(visible)
        try:
            template = context.template(self.env, MODULE_TEMPLATE)
            output = template.render(
                title=title,
                entries=entries,
                separators=self.separators,
                anchor=context.anchor,
                xref=context.link,
            )
        except TemplateError as exc:
            raise RenderError(f"Failed to render module {title}: {exc}") from exc
        if not output.strip():
            return ""
        return self.linter.lint(output)

    def render_text(self, name: str, context: RenderContext, **values: object) -> str:
        try:
            return context.template(self.env, name).render(**values)
        except TemplateError as exc:
            raise RenderError(f"Failed to render {name}: {exc}") from exc

    @staticmethod
    def layout(records: Sequence[IdentifierRecord]) -> List[RenderEntry]:
        """Order records depth-first by ``memberof`` while keeping source order."""
        ids = {record.id for record in records}
        children: Dict[str, List[IdentifierRecord]] = {}
        roots: List[IdentifierRecord] = []
        for record in records:
            if record.memberof in ids and record.memberof != record.id:
                children.setdefault(record.memberof, []).append(record)
            else:
                roots.append(record)

        entries: List[RenderEntry] = []
        visited: Set[str] = set()

        def _visit(record: IdentifierRecord, level: int) -> None:
            if record.id in visited:
                return
            visited.add(record.id)
            entries.append(RenderEntry(record=record, level=min(level, 6)))
            for child in children.get(record.id, []):
                _visit(child, level + 1)

        for root in roots:
            _visit(root, 2)
        # Records in a memberof cycle have no root; surface them at top level.
        for record in records:
            _visit(record, 2)
        return entries


def link_entry(
    key: str,
    *,
    url_prefix: str = "/content/sdk/",
    delimiter: str = "-",
    indent: bool = False,
) -> str:
    """Return the navigation line for a module page."""
    name = key.replace(delimiter, "/")
    prefix = "\t" if indent else ""
    return f"{prefix}* [{name}]({slug(key, url_prefix)})\n"


class PageRenderer:
    """Writes one page per module and accumulates the navigation entries."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        sdk_dir: Path,
        *,
        url_prefix: str = "/content/sdk/",
        delimiter: str = "-",
        title: str = "API Reference",
    ) -> None:
        self.renderer = renderer
        self.sdk_dir = sdk_dir
        self.url_prefix = url_prefix
        self.delimiter = delimiter
        self.title = title
        self.logger = get_logger("rendering")

    def render_all(self, grouping: GroupingResult, context: RenderContext) -> NavigationFragments:
        reference = self.renderer.render_text(REFERENCE_TEMPLATE, context, title=self.title)
        sidebar = f"{MarkerManager.open_marker(SIDEBAR_KEY)}\n"
        pages: List[Path] = []

        self.sdk_dir.mkdir(parents=True, exist_ok=True)
        for key in grouping.sorted_keys():
            output = self.renderer.render(
                grouping.groups[key], context, title=key.replace(self.delimiter, "/")
            )
            if not output:
                self.logger.debug("Module %s rendered no content; skipping page", key)
                continue

            reference += link_entry(key, url_prefix=self.url_prefix, delimiter=self.delimiter)
            sidebar += link_entry(
                key, url_prefix=self.url_prefix, delimiter=self.delimiter, indent=True
            )
            page = self.sdk_dir / f"{key.lower()}.md"
            page.write_text(output, encoding="utf-8")
            pages.append(page)

        sidebar += MarkerManager.close_marker(SIDEBAR_KEY)
        self.logger.info("Rendered %d module pages into %s", len(pages), self.sdk_dir)
        return NavigationFragments(reference=reference, sidebar=sidebar, pages=pages)


__all__ = [
    "PageRenderer",
    "RenderContext",
    "RenderEntry",
    "RenderError",
    "TemplateRenderer",
    "link_entry",
]
