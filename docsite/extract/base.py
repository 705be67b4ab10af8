"""Base classes for identifier extractors."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from ..models import IdentifierRecord


class ExtractionError(RuntimeError):
    """Raised when source metadata cannot be extracted."""


class Extractor(ABC):
    """Contract for collaborators that turn sources into identifier records."""

    @abstractmethod
    def extract(self, root: Path, patterns: Sequence[str]) -> List[IdentifierRecord]:
        """Return every documented identifier found under ``root``."""
