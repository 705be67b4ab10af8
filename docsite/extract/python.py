"""Extract documented identifiers from Python sources using the ast module."""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set

from ..logging import get_logger
from ..models import IdentifierRecord
from .base import ExtractionError, Extractor

_IGNORE_TAG = re.compile(r"^\s*:ignore:\s*$", re.MULTILINE)
_CONSTANT_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")
_MAX_CONSTANT_REPR = 60


class PythonExtractor(Extractor):
    """Walks module files and emits one record per public definition."""

    def __init__(self) -> None:
        self.logger = get_logger("extract.python")

    def extract(self, root: Path, patterns: Sequence[str]) -> List[IdentifierRecord]:
        records: List[IdentifierRecord] = []
        for path in self._iter_files(root, patterns):
            records.extend(self.extract_file(root, path))
        self.logger.debug("Extracted %d identifiers from %s", len(records), root)
        return records

    def extract_file(self, root: Path, path: Path) -> List[IdentifierRecord]:
        try:
            source = path.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError) as exc:
            raise ExtractionError(f"Unable to parse {path}: {exc}") from exc

        relative = path.relative_to(root).with_suffix("")
        parts = list(relative.parts)
        if parts and parts[-1] == "__init__":
            parts.pop()
        if not parts:
            return []
        source_path = "/".join(parts)
        module_id = ".".join(parts)

        records: List[IdentifierRecord] = []
        module_doc = ast.get_docstring(tree)
        if module_doc:
            records.append(
                self._record(module_id, source_path, parts[-1], "module", module_doc)
            )

        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                class_id = f"{module_id}.{node.name}"
                bases = ", ".join(ast.unparse(base) for base in node.bases)
                records.append(
                    self._record(
                        class_id,
                        source_path,
                        node.name,
                        "class",
                        ast.get_docstring(node),
                        memberof=module_id,
                        signature=f"class {node.name}({bases})" if bases else f"class {node.name}",
                    )
                )
                for item in node.body:
                    if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)):
                        records.append(
                            self._function_record(item, class_id, source_path, "method")
                        )
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                records.append(self._function_record(node, module_id, source_path, "function"))
            elif isinstance(node, (ast.Assign, ast.AnnAssign)):
                records.extend(self._constant_records(node, module_id, source_path))
        return records

    def _iter_files(self, root: Path, patterns: Sequence[str]) -> Iterator[Path]:
        seen: Set[Path] = set()
        for pattern in patterns:
            for path in sorted(root.glob(pattern)):
                if path.is_file() and path.suffix == ".py" and path not in seen:
                    seen.add(path)
                    yield path

    def _function_record(
        self,
        node: ast.FunctionDef | ast.AsyncFunctionDef,
        parent_id: str,
        source_path: str,
        kind: str,
    ) -> IdentifierRecord:
        prefix = "async " if isinstance(node, ast.AsyncFunctionDef) else ""
        signature = f"{prefix}{node.name}({ast.unparse(node.args)})"
        if node.returns is not None:
            signature += f" -> {ast.unparse(node.returns)}"
        return self._record(
            f"{parent_id}.{node.name}",
            source_path,
            node.name,
            kind,
            ast.get_docstring(node),
            memberof=parent_id,
            signature=signature,
        )

    def _constant_records(
        self, node: ast.Assign | ast.AnnAssign, module_id: str, source_path: str
    ) -> Iterator[IdentifierRecord]:
        targets = node.targets if isinstance(node, ast.Assign) else [node.target]
        for target in targets:
            if not isinstance(target, ast.Name) or not _CONSTANT_NAME.match(target.id):
                continue
            value = ast.unparse(node.value) if node.value is not None else ""
            if len(value) > _MAX_CONSTANT_REPR:
                value = value[: _MAX_CONSTANT_REPR - 3] + "..."
            yield self._record(
                f"{module_id}.{target.id}",
                source_path,
                target.id,
                "constant",
                None,
                memberof=module_id,
                signature=f"{target.id} = {value}" if value else target.id,
            )

    @staticmethod
    def _record(
        record_id: str,
        source_path: str,
        name: str,
        kind: str,
        docstring: Optional[str],
        *,
        memberof: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> IdentifierRecord:
        body = docstring or ""
        ignore = name.startswith("_") or bool(_IGNORE_TAG.search(body))
        body = _IGNORE_TAG.sub("", body).strip()
        return IdentifierRecord(
            id=record_id,
            source_path=source_path,
            ignore=ignore,
            body=body,
            name=name,
            kind=kind,
            memberof=memberof,
            signature=signature,
        )


__all__ = ["PythonExtractor"]
