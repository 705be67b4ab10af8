"""Splice generated navigation into marker spans and distribute sidebar copies."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from .logging import get_logger
from .models import NavigationFragments
from .postproc.markers import MarkerManager
from .rendering import SIDEBAR_KEY


class NavigationAssembler:
    """Owns the marker spans of the master sidebar and the sdk reference index."""

    def __init__(
        self,
        sidebar_path: Path,
        targets: Sequence[Path],
        reference_path: Path,
        *,
        marker_manager: MarkerManager | None = None,
    ) -> None:
        self.sidebar_path = sidebar_path
        self.targets = list(targets)
        self.reference_path = reference_path
        self.marker_manager = marker_manager or MarkerManager()
        self.logger = get_logger("navigation")

    def assemble(self, fragments: NavigationFragments) -> List[Path]:
        """Write the reference index and a spliced sidebar copy into every target."""
        self.reference_path.parent.mkdir(parents=True, exist_ok=True)
        self.reference_path.write_text(fragments.reference, encoding="utf-8")

        if not self.sidebar_path.exists():
            self.logger.warning(
                "Sidebar %s not found; skipping navigation update", self.sidebar_path
            )
            return []

        original = self.sidebar_path.read_text(encoding="utf-8")
        updated = self.marker_manager.splice(original, SIDEBAR_KEY, fragments.sidebar)
        if updated == original:
            self.logger.debug("No %s marker span in %s", SIDEBAR_KEY, self.sidebar_path)
        return self.propagate(updated)

    def propagate(self, document: str) -> List[Path]:
        written: List[Path] = []
        for target in self.targets:
            target.mkdir(parents=True, exist_ok=True)
            destination = target / self.sidebar_path.name
            destination.write_text(document, encoding="utf-8")
            written.append(destination)
        self.logger.debug("Copied sidebar into %d directories", len(written))
        return written

    def splice_file(self, path: Path, key: str, replacement: str) -> bool:
        """Splice ``replacement`` into ``path``; return True when the file changed."""
        if not path.exists():
            self.logger.warning("Cannot update %s markers; %s does not exist", key, path)
            return False
        original = path.read_text(encoding="utf-8")
        updated = self.marker_manager.splice(original, key, replacement)
        if updated == original:
            return False
        path.write_text(updated, encoding="utf-8")
        return True


__all__ = ["NavigationAssembler"]
