"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import SitePipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Assemble a static documentation site from API docs and release notes.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Scaffold the site if needed and regenerate pages, navigation and release notes.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--source",
        action="append",
        dest="sources",
        metavar="GLOB",
        help="Source glob relative to the project root (repeatable).",
    )
    build_parser.add_argument(
        "--records",
        type=Path,
        help="JSON identifier dump to use instead of scanning Python sources.",
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Create the site skeleton when it does not exist yet.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    _add_path_argument(init_parser)

    releases_parser = subparsers.add_parser(
        "releases",
        help="Rebuild the release notes page from release fragments.",
    )
    _add_verbose_option(releases_parser, suppress_default=True)
    _add_path_argument(releases_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.path).expanduser().resolve())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "build":
        if args.sources:
            config.sources = replace(config.sources, patterns=list(args.sources))
        if args.records is not None:
            config.sources = replace(config.sources, records_file=args.records.resolve())
        try:
            report = SitePipeline(config).run()
        except Exception as exc:
            parser.exit(1, f"docsite build failed: {exc}\nRun with --verbose for more details.\n")
        prefix = "Site scaffolded and built" if report.bootstrapped else "Site built"
        print(
            f"{prefix}: {len(report.pages)} pages, {len(report.releases)} releases "
            f"in {_relativize(config.docs_dir)}"
        )
        for diagnostic in report.diagnostics:
            print(f"  warning [{diagnostic.code}] {diagnostic.message}")
    elif args.command == "init":
        try:
            created = SitePipeline(config).bootstrap()
        except Exception as exc:
            parser.exit(1, f"docsite init failed: {exc}\n")
        if created:
            print(f"Site scaffolded in {_relativize(config.docs_dir)}")
        else:
            print(f"Site already initialised ({_relativize(config.sentinel)} exists)")
    elif args.command == "releases":
        try:
            fragments = SitePipeline(config).generate_release_notes()
        except Exception as exc:
            parser.exit(1, f"docsite releases failed: {exc}\n")
        print(f"Release notes updated with {len(fragments)} releases")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
