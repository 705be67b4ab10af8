"""Group identifier records into per-module buckets."""

from __future__ import annotations

from typing import Iterable

from .logging import get_logger
from .models import Diagnostic, GroupingResult, IdentifierRecord


def module_key(source_path: str, root: str = "lib", delimiter: str = "-") -> str:
    """Derive the module key for ``source_path``.

    ``/repo/lib/connection/ws`` becomes ``lib-connection-ws``: everything up to
    and including the first ``<root>/`` segment is dropped and the remaining
    separators are replaced with ``delimiter``.
    """
    normalised = source_path.replace("\\", "/").rstrip("/")
    marker = f"{root}/"
    if normalised.startswith(marker):
        remainder = normalised[len(marker):]
    elif f"/{marker}" in normalised:
        remainder = normalised.split(f"/{marker}", 1)[1]
    elif normalised == root or normalised.endswith(f"/{root}"):
        return root
    else:
        remainder = normalised.lstrip("/")
    return f"{root}{delimiter}{remainder.replace('/', delimiter)}"


def slug(key: str, url_prefix: str = "/content/sdk/") -> str:
    """Return the lower-cased URL of the page generated for ``key``."""
    return f"{url_prefix}{key}".lower()


class GroupingIndexer:
    """Buckets records by module key and builds the id -> URL lookup."""

    def __init__(
        self, *, root: str = "lib", delimiter: str = "-", url_prefix: str = "/content/sdk/"
    ) -> None:
        self.root = root
        self.delimiter = delimiter
        self.url_prefix = url_prefix
        self.logger = get_logger("indexing")

    def key_for(self, source_path: str) -> str:
        return module_key(source_path, self.root, self.delimiter)

    def group(self, records: Iterable[IdentifierRecord]) -> GroupingResult:
        result = GroupingResult()
        for record in records:
            if not record.source_path:
                result.diagnostics.append(
                    Diagnostic(
                        code="missing-source-path",
                        message=f"Identifier {record.id} has no source path and was skipped",
                        subject=record.id,
                    )
                )
                continue

            key = self.key_for(record.source_path)
            result.groups.setdefault(key, []).append(record)
            if not record.ignore:
                result.path_index[record.id] = slug(key, self.url_prefix)

        if result.diagnostics:
            self.logger.warning(
                "Skipped %d identifiers without a source path", len(result.diagnostics)
            )
        self.logger.debug(
            "Grouped identifiers into %d modules (%d linkable ids)",
            len(result.groups),
            len(result.path_index),
        )
        return result


__all__ = ["GroupingIndexer", "module_key", "slug"]
