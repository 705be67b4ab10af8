"""Configuration loading for docsite (.docsite.yml)."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".docsite.yml"
DEFAULT_PATTERNS = ["lib/**/*.py"]
DUPLICATE_POLICIES = {"strict", "greedy"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SourceConfig:
    """Where API identifiers come from and how module keys are derived."""

    patterns: List[str] = field(default_factory=lambda: list(DEFAULT_PATTERNS))
    root_name: str = "lib"
    delimiter: str = "-"
    records_file: Optional[Path] = None


@dataclass
class MarkerConfig:
    """Marker span handling."""

    duplicates: str = "strict"


@dataclass
class ReleaseConfig:
    """Release fragment discovery settings."""

    strict: bool = False
    sidebar_name: str = "_sidebar.md"


@dataclass
class SiteConfig:
    """Represents the settings defined in .docsite.yml."""

    root: Path
    docs_dir: Path = Path("docs")
    title: Optional[str] = None
    package_name: Optional[str] = None
    url_prefix: str = "/content/sdk/"
    version: Optional[str] = None
    templates_dir: Optional[Path] = None
    sources: SourceConfig = field(default_factory=SourceConfig)
    markers: MarkerConfig = field(default_factory=MarkerConfig)
    releases: ReleaseConfig = field(default_factory=ReleaseConfig)

    def __post_init__(self) -> None:
        if not self.docs_dir.is_absolute():
            self.docs_dir = self.root / self.docs_dir

    @property
    def content_dir(self) -> Path:
        return self.docs_dir / "content"

    @property
    def sdk_dir(self) -> Path:
        return self.content_dir / "sdk"

    @property
    def releases_dir(self) -> Path:
        return self.content_dir / "releases"

    @property
    def concepts_dir(self) -> Path:
        return self.content_dir / "concepts"

    @property
    def styles_dir(self) -> Path:
        return self.docs_dir / "styles"

    @property
    def sentinel(self) -> Path:
        return self.docs_dir / "index.html"

    @property
    def sidebar_path(self) -> Path:
        return self.docs_dir / "_sidebar.md"

    @property
    def navigation_targets(self) -> List[Path]:
        """Directories that each carry a local copy of the sidebar."""
        return [self.sdk_dir, self.content_dir, self.concepts_dir, self.releases_dir]

    @property
    def display_title(self) -> str:
        return self.title or self.package_name or self.root.name or "Documentation"


def load_config(config_path: Path) -> SiteConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SiteConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    sources = SourceConfig()
    source_data = _as_dict(data.get("sources"))
    if source_data:
        patterns = _as_str_list(source_data.get("patterns"))
        if patterns:
            sources.patterns = patterns
        sources.root_name = _as_str(source_data.get("root")) or sources.root_name
        sources.delimiter = _as_str(source_data.get("delimiter")) or sources.delimiter
        records = _as_str(source_data.get("records"))
        sources.records_file = root / records if records else None

    markers = MarkerConfig()
    marker_data = _as_dict(data.get("markers"))
    if marker_data:
        policy = (_as_str(marker_data.get("duplicates")) or markers.duplicates).lower()
        if policy not in DUPLICATE_POLICIES:
            raise ConfigError(
                f"markers.duplicates must be one of {sorted(DUPLICATE_POLICIES)}, got {policy!r}"
            )
        markers.duplicates = policy

    releases = ReleaseConfig()
    release_data = _as_dict(data.get("releases"))
    if release_data:
        releases.strict = _as_bool(release_data.get("strict")) or False
        releases.sidebar_name = _as_str(release_data.get("sidebar")) or releases.sidebar_name

    docs_dir = _as_str(data.get("docs_dir"))
    templates_dir = _as_str(data.get("templates_dir"))

    return SiteConfig(
        root=root,
        docs_dir=Path(docs_dir) if docs_dir else Path("docs"),
        title=_as_str(data.get("title")),
        package_name=_as_str(data.get("package")),
        url_prefix=_as_str(data.get("url_prefix")) or "/content/sdk/",
        version=_as_str(data.get("version")),
        templates_dir=root / templates_dir if templates_dir else None,
        sources=sources,
        markers=markers,
        releases=releases,
    )


def read_project_version(root: Path) -> str:
    """Return the project version from pyproject.toml or package.json."""
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Failed to parse {pyproject.name}: {exc}") from exc
        version = _as_str(_as_dict(data.get("project")).get("version"))
        if version:
            return version

    package_json = root / "package.json"
    if package_json.exists():
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {package_json.name}: {exc}") from exc
        version = _as_str(_as_dict(data).get("version"))
        if version:
            return version

    return "0.0.0"


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
