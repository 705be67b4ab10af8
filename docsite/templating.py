"""Jinja2 environment shared by page rendering and site scaffolding."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return an environment searching ``templates_dir`` before the bundled templates."""
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    if str(DEFAULT_TEMPLATES_DIR) not in directories:
        directories.append(str(DEFAULT_TEMPLATES_DIR))
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


__all__ = ["DEFAULT_TEMPLATES_DIR", "create_environment"]
