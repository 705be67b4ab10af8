"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.cli import _build_parser, main
from docsite.logging import configure_logging


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--verbose", "build"]).verbose is True
    assert parser.parse_args(["build", "--verbose"]).verbose is True
    assert parser.parse_args(["build"]).verbose is False


def test_cli_build_options() -> None:
    args = _build_parser().parse_args(
        ["build", "proj", "--source", "lib/*.py", "--source", "src/**/*.py", "--records", "api.json"]
    )
    assert args.command == "build"
    assert args.path == "proj"
    assert args.sources == ["lib/*.py", "src/**/*.py"]
    assert args.records == Path("api.json")


def test_cli_build_generates_site(site_builder, capsys: pytest.CaptureFixture[str]) -> None:
    site_builder.write({"src/pkg/core.py": 'def run():\n    """Run it."""\n'})
    site_builder.write({".docsite.yml": "sources:\n  root: src\n"})

    main(["build", str(site_builder.path()), "--source", "src/**/*.py"])

    out = capsys.readouterr().out
    assert "Site scaffolded and built: 1 pages, 0 releases" in out
    assert site_builder.path("docs/content/sdk/src-pkg-core.md").exists()


def test_cli_init_reports_existing_site(site_builder, capsys: pytest.CaptureFixture[str]) -> None:
    main(["init", str(site_builder.path())])
    main(["init", str(site_builder.path())])

    out = capsys.readouterr().out
    assert "Site scaffolded in" in out
    assert "Site already initialised" in out


def test_cli_releases_command(site_builder, capsys: pytest.CaptureFixture[str]) -> None:
    site_builder.write(
        {
            "docs/content/release_notes.md": "<!-- releases_open -->\n<!-- releases_close -->\n",
            "docs/content/releases/1.0.0.md": "First\n",
        }
    )

    main(["releases", str(site_builder.path())])

    assert "Release notes updated with 1 releases" in capsys.readouterr().out


def test_cli_build_failure_exits_non_zero(site_builder, capsys: pytest.CaptureFixture[str]) -> None:
    site_builder.write({"lib/broken.py": "def broken(:\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(site_builder.path())])

    assert excinfo.value.code == 1
    assert "docsite build failed" in capsys.readouterr().err


def test_cli_log_file_option_writes_records(site_builder, tmp_path: Path) -> None:
    log_path = tmp_path / "docsite.log"
    assert _build_parser().parse_args(["--log-file", str(log_path), "init"]).log_file == log_path

    try:
        main(["--log-file", str(log_path), "init", str(site_builder.path())])
    finally:
        configure_logging()

    assert "Bootstrapping documentation site" in log_path.read_text(encoding="utf-8")
