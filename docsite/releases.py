"""Aggregate version-named release fragments into the release notes page."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence

from packaging.version import Version

from .logging import get_logger
from .models import Diagnostic, ReleaseFragment
from .navigation import NavigationAssembler
from .postproc.markers import MarkerManager

RELEASES_KEY = "releases"
_RELEASE_NAME = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class ReleaseNameError(RuntimeError):
    """Raised in strict mode when a release fragment is not named <major>.<minor>.<patch>.md."""


class ReleaseNotesAggregator:
    """Collects release fragments newest-first and splices them into a document."""

    def __init__(
        self,
        releases_dir: Path,
        target: Path,
        assembler: NavigationAssembler,
        *,
        sidebar_name: str = "_sidebar.md",
        strict: bool = False,
    ) -> None:
        self.releases_dir = releases_dir
        self.target = target
        self.assembler = assembler
        self.sidebar_name = sidebar_name
        self.strict = strict
        self.diagnostics: List[Diagnostic] = []
        self.logger = get_logger("releases")

    def discover(self) -> List[ReleaseFragment]:
        """Return release fragments sorted newest first."""
        try:
            names = [entry.name for entry in self.releases_dir.iterdir() if entry.is_file()]
        except OSError as exc:
            self.logger.warning("Unable to scan directory [ %s ]: %s", self.releases_dir, exc)
            self.diagnostics.append(
                Diagnostic(
                    code="releases-unavailable",
                    message=f"Unable to scan {self.releases_dir}: {exc}",
                    subject=str(self.releases_dir),
                )
            )
            return []

        fragments: List[ReleaseFragment] = []
        for name in names:
            if name == self.sidebar_name or not name.endswith(".md"):
                continue
            stem = name[: -len(".md")]
            if not _RELEASE_NAME.match(stem):
                self._reject(name)
                continue
            path = self.releases_dir / name
            fragments.append(
                ReleaseFragment(
                    version=Version(stem),
                    path=path,
                    body=path.read_text(encoding="utf-8"),
                )
            )

        fragments.sort(key=lambda fragment: fragment.version)
        fragments.reverse()
        return fragments

    def build_block(self, fragments: Sequence[ReleaseFragment]) -> str:
        block = MarkerManager.open_marker(RELEASES_KEY)
        for fragment in fragments:
            if fragment.body:
                block += f"\n## {fragment.label}\n{fragment.body}\n"
        block += f"\n{MarkerManager.close_marker(RELEASES_KEY)}"
        return block

    def aggregate(self) -> List[ReleaseFragment]:
        self.diagnostics = []
        fragments = self.discover()
        block = self.build_block(fragments)
        changed = self.assembler.splice_file(self.target, RELEASES_KEY, block)
        self.logger.info(
            "Aggregated %d release fragments into %s%s",
            len(fragments),
            self.target.name,
            "" if changed else " (unchanged)",
        )
        return fragments

    def _reject(self, name: str) -> None:
        message = f"Release fragment {name} is not named <major>.<minor>.<patch>.md"
        if self.strict:
            raise ReleaseNameError(message)
        self.logger.warning("%s; skipping", message)
        self.diagnostics.append(
            Diagnostic(code="malformed-release", message=message, subject=name)
        )


__all__ = ["RELEASES_KEY", "ReleaseNameError", "ReleaseNotesAggregator"]
