"""Core data models shared across docsite components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from packaging.version import Version


@dataclass
class IdentifierRecord:
    """A documented identifier emitted by an extractor."""

    id: str
    source_path: Optional[str]
    ignore: bool = False
    body: str = ""
    name: str = ""
    kind: str = ""
    memberof: Optional[str] = None
    signature: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id.rsplit(".", 1)[-1]


@dataclass
class Diagnostic:
    """Non-fatal condition observed while building the site."""

    code: str
    message: str
    subject: str = ""


@dataclass
class GroupingResult:
    """Records bucketed by module key plus the id -> URL lookup."""

    groups: Dict[str, List[IdentifierRecord]] = field(default_factory=dict)
    path_index: Dict[str, str] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def sorted_keys(self) -> List[str]:
        return sorted(self.groups)


@dataclass
class NavigationFragments:
    """Accumulated reference index and sidebar entries for rendered modules."""

    reference: str
    sidebar: str
    pages: List[Path] = field(default_factory=list)


@dataclass
class ReleaseFragment:
    """A single version's release notes."""

    version: Version
    path: Path
    body: str

    @property
    def label(self) -> str:
        return self.path.stem


@dataclass
class GenerationReport:
    """Outcome of a full site generation run."""

    bootstrapped: bool = False
    pages: List[Path] = field(default_factory=list)
    releases: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
