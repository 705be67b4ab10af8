"""Load identifier records dumped as JSON by an external doc extractor."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..logging import get_logger
from ..models import IdentifierRecord
from .base import ExtractionError, Extractor


class JsonRecordExtractor(Extractor):
    """Reads a jsdoc-style template data array (``id``, ``meta.path``, ``ignore``)."""

    def __init__(self, records_file: Path) -> None:
        self.records_file = records_file
        self.logger = get_logger("extract.json")

    def extract(self, root: Path, patterns: Sequence[str]) -> List[IdentifierRecord]:
        path = self.records_file if self.records_file.is_absolute() else root / self.records_file
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ExtractionError(f"Unable to load identifier records from {path}: {exc}") from exc
        if not isinstance(payload, list):
            raise ExtractionError(f"{path.name} must contain a JSON array of identifiers")

        records = [self._to_record(index, item) for index, item in enumerate(payload)]
        self.logger.debug("Loaded %d identifiers from %s", len(records), path)
        return records

    def _to_record(self, index: int, item: Any) -> IdentifierRecord:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            raise ExtractionError(f"Identifier #{index} is missing a string 'id'")
        meta = item.get("meta")
        source_path: Optional[str] = None
        if isinstance(meta, dict) and isinstance(meta.get("path"), str):
            source_path = meta["path"].replace("\\", "/")
        return IdentifierRecord(
            id=item["id"],
            source_path=source_path,
            ignore=bool(item.get("ignore", False)),
            body=str(item.get("description") or ""),
            name=str(item.get("name") or ""),
            kind=str(item.get("kind") or ""),
            memberof=item.get("memberof") if isinstance(item.get("memberof"), str) else None,
            signature=_signature(item),
        )


def _signature(item: Dict[str, Any]) -> Optional[str]:
    if item.get("kind") not in {"function", "constructor"}:
        return None
    params = item.get("params")
    names: List[str] = []
    if isinstance(params, list):
        for param in params:
            if isinstance(param, dict) and isinstance(param.get("name"), str):
                # Nested option properties (``options.flag``) belong to their parent.
                if "." not in param["name"]:
                    names.append(param["name"])
    return f"{item.get('name') or item['id']}({', '.join(names)})"


__all__ = ["JsonRecordExtractor"]
