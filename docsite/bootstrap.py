"""First-run scaffolding of the documentation site."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List

from jinja2 import Environment

from .config import SiteConfig
from .logging import get_logger
from .templating import create_environment

_DOCSIFY_CONFIG = re.compile(r"window\.\$docsify\s*=\s*\{.*?\n\s*\}", re.DOTALL)
_HEAD_CLOSE = re.compile(r"[ \t]*</head>")


@dataclass(frozen=True)
class Seed:
    """A scaffold file written only when it does not already exist."""

    template: str
    destination: Path


class SiteBootstrapper:
    """Creates the site skeleton when the sentinel index document is absent."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        env: Environment | None = None,
        theme: str = "vue",
    ) -> None:
        self.config = config
        self.env = env or create_environment(config.templates_dir)
        self.theme = theme
        self.logger = get_logger("bootstrap")

    def needs_bootstrap(self) -> bool:
        return not self.config.sentinel.exists()

    def seeds(self) -> List[Seed]:
        docs = self.config.docs_dir
        content = self.config.content_dir
        return [
            Seed("scaffold/override.css.j2", self.config.styles_dir / "override.css"),
            Seed("scaffold/quick_start.md.j2", content / "quick_start.md"),
            Seed("scaffold/product_overview.md.j2", content / "product_overview.md"),
            Seed("scaffold/release_notes.md.j2", content / "release_notes.md"),
            Seed("scaffold/sidebar.md.j2", docs / "_sidebar.md"),
            Seed("scaffold/coverpage.md.j2", docs / "_coverpage.md"),
        ]

    def bootstrap(self, version: str) -> bool:
        """Scaffold the site; return False without touching disk if already initialised."""
        if not self.needs_bootstrap():
            self.logger.debug("Found %s; skipping bootstrap", self.config.sentinel)
            return False

        self.logger.info("Bootstrapping documentation site in %s", self.config.docs_dir)
        for directory in (
            self.config.sdk_dir,
            self.config.releases_dir,
            self.config.concepts_dir,
            self.config.styles_dir,
        ):
            directory.mkdir(parents=True, exist_ok=True)

        values = self._template_values(version)
        self._write_base_index(values)

        tasks: List[Callable[[], None]] = [lambda: self._patch_index(values)]
        for seed in self.seeds():
            tasks.append(lambda seed=seed: self._write_seed(seed, values))
        asyncio.run(self._run_all(tasks))
        return True

    async def _run_all(self, tasks: List[Callable[[], None]]) -> None:
        loop = asyncio.get_running_loop()
        await asyncio.gather(*(loop.run_in_executor(None, task) for task in tasks))

    def _template_values(self, version: str) -> Dict[str, str]:
        title = self.config.display_title
        return {
            "title": title,
            "package": self.config.package_name or title,
            "version": version,
            "theme": self.theme,
        }

    def _write_base_index(self, values: Dict[str, str]) -> None:
        index = self.config.sentinel
        index.write_text(self.env.get_template("scaffold/index.html.j2").render(**values), encoding="utf-8")

    def _patch_index(self, values: Dict[str, str]) -> None:
        index = self.config.sentinel
        html = index.read_text(encoding="utf-8")
        docsify_config = self.env.get_template("scaffold/docsify_config.js.j2").render(**values)
        head = self.env.get_template("scaffold/head.html.j2").render(**values)
        html = _DOCSIFY_CONFIG.sub(lambda _: docsify_config.rstrip("\n"), html, count=1)
        html = _HEAD_CLOSE.sub(lambda _: head.rstrip("\n"), html, count=1)
        index.write_text(html, encoding="utf-8")
        self.logger.debug("Patched %s", index)

    def _write_seed(self, seed: Seed, values: Dict[str, str]) -> None:
        if seed.destination.exists():
            self.logger.debug("Keeping existing %s", seed.destination)
            return
        seed.destination.parent.mkdir(parents=True, exist_ok=True)
        text = self.env.get_template(seed.template).render(**values)
        seed.destination.write_text(text, encoding="utf-8")
        self.logger.debug("Seeded %s", seed.destination)


__all__ = ["Seed", "SiteBootstrapper"]
