"""Tests for docsite.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.config import ConfigError, SiteConfig, load_config, read_project_version


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, SiteConfig)
    assert config.root == tmp_path.resolve()
    assert config.docs_dir == tmp_path.resolve() / "docs"
    assert config.sources.patterns == ["lib/**/*.py"]
    assert config.sources.root_name == "lib"
    assert config.sources.delimiter == "-"
    assert config.sources.records_file is None
    assert config.markers.duplicates == "strict"
    assert config.releases.strict is False
    assert config.releases.sidebar_name == "_sidebar.md"
    assert config.url_prefix == "/content/sdk/"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text(
        """
title: "Market Data SDK"
package: marketdata
docs_dir: site
version: "2.1.0"
templates_dir: doc_templates
sources:
  root: src
  delimiter: "_"
  patterns:
    - "src/**/*.py"
    - "tools/*.py"
  records: build/api.json
markers:
  duplicates: greedy
releases:
  strict: true
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path / ".docsite.yml")
    root = tmp_path.resolve()

    assert config.title == "Market Data SDK"
    assert config.package_name == "marketdata"
    assert config.docs_dir == root / "site"
    assert config.version == "2.1.0"
    assert config.templates_dir == root / "doc_templates"
    assert config.sources.root_name == "src"
    assert config.sources.delimiter == "_"
    assert config.sources.patterns == ["src/**/*.py", "tools/*.py"]
    assert config.sources.records_file == root / "build" / "api.json"
    assert config.markers.duplicates == "greedy"
    assert config.releases.strict is True


def test_site_paths_follow_docs_dir(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    docs = config.docs_dir

    assert config.sentinel == docs / "index.html"
    assert config.sidebar_path == docs / "_sidebar.md"
    assert config.sdk_dir == docs / "content" / "sdk"
    assert config.navigation_targets == [
        docs / "content" / "sdk",
        docs / "content",
        docs / "content" / "concepts",
        docs / "content" / "releases",
    ]


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_unknown_duplicate_policy(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("markers:\n  duplicates: sometimes\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("title: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_read_project_version_prefers_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\nversion = "3.4.5"\n', encoding="utf-8")
    (tmp_path / "package.json").write_text('{"version": "1.0.0"}', encoding="utf-8")
    assert read_project_version(tmp_path) == "3.4.5"


def test_read_project_version_falls_back_to_package_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{"name": "sdk", "version": "5.2.1"}', encoding="utf-8")
    assert read_project_version(tmp_path) == "5.2.1"


def test_read_project_version_defaults_when_unknown(tmp_path: Path) -> None:
    assert read_project_version(tmp_path) == "0.0.0"
