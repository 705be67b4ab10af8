"""Post-processing helpers for generated documents."""

from .lint import MarkdownLinter
from .markers import DuplicateMarkerError, MarkedDocument, MarkerManager, MarkerPolicy

__all__ = [
    "DuplicateMarkerError",
    "MarkdownLinter",
    "MarkedDocument",
    "MarkerManager",
    "MarkerPolicy",
]
