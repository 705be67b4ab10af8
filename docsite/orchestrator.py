"""Pipeline orchestration for site generation."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .bootstrap import SiteBootstrapper
from .config import SiteConfig, load_config, read_project_version
from .extract import Extractor, JsonRecordExtractor, PythonExtractor
from .indexing import GroupingIndexer
from .logging import get_logger
from .models import GenerationReport, ReleaseFragment
from .navigation import NavigationAssembler
from .postproc.markers import MarkerManager
from .releases import ReleaseNotesAggregator
from .rendering import PageRenderer, RenderContext, TemplateRenderer


class SitePipeline:
    """Coordinates bootstrap, page generation, navigation and release notes."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        extractor: Extractor | None = None,
        renderer: TemplateRenderer | None = None,
        bootstrapper: SiteBootstrapper | None = None,
        context: RenderContext | None = None,
    ) -> None:
        self.config = config
        self.extractor = extractor or self._default_extractor(config)
        self.renderer = renderer or TemplateRenderer(config.templates_dir)
        self.bootstrapper = bootstrapper or SiteBootstrapper(config, env=self.renderer.env)
        self.context = context or RenderContext()
        self.indexer = GroupingIndexer(
            root=config.sources.root_name,
            delimiter=config.sources.delimiter,
            url_prefix=config.url_prefix,
        )
        self.assembler = NavigationAssembler(
            config.sidebar_path,
            config.navigation_targets,
            config.content_dir / "sdk_reference.md",
            marker_manager=MarkerManager(config.markers.duplicates),
        )
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_path(cls, path: str | Path) -> "SitePipeline":
        return cls(load_config(Path(path).expanduser().resolve()))

    def run(self) -> GenerationReport:
        """Bootstrap when needed, then regenerate every page and navigation span."""
        report = GenerationReport()
        report.bootstrapped = self.bootstrap()

        records = self.extractor.extract(self.config.root, self.config.sources.patterns)
        self.logger.debug("Extractor returned %d identifiers", len(records))

        grouping = self.indexer.group(records)
        report.diagnostics.extend(grouping.diagnostics)
        self.context.reset(grouping.path_index)

        page_renderer = PageRenderer(
            self.renderer,
            self.config.sdk_dir,
            url_prefix=self.config.url_prefix,
            delimiter=self.config.sources.delimiter,
        )
        fragments = page_renderer.render_all(grouping, self.context)
        report.pages = fragments.pages
        self.assembler.assemble(fragments)

        aggregator = self._release_aggregator()
        releases = aggregator.aggregate()
        report.releases = [fragment.label for fragment in releases]
        report.diagnostics.extend(aggregator.diagnostics)

        self.logger.info(
            "Generated %d pages and %d release entries (%d diagnostics)",
            len(report.pages),
            len(report.releases),
            len(report.diagnostics),
        )
        return report

    def bootstrap(self) -> bool:
        if not self.bootstrapper.needs_bootstrap():
            return False
        version = self.config.version or read_project_version(self.config.root)
        return self.bootstrapper.bootstrap(version)

    def generate_release_notes(self) -> List[ReleaseFragment]:
        return self._release_aggregator().aggregate()

    def _release_aggregator(self) -> ReleaseNotesAggregator:
        return ReleaseNotesAggregator(
            self.config.releases_dir,
            self.config.content_dir / "release_notes.md",
            self.assembler,
            sidebar_name=self.config.releases.sidebar_name,
            strict=self.config.releases.strict,
        )

    @staticmethod
    def _default_extractor(config: SiteConfig) -> Extractor:
        if config.sources.records_file is not None:
            return JsonRecordExtractor(config.sources.records_file)
        return PythonExtractor()


__all__ = ["SitePipeline"]
