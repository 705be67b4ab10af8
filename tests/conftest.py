from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.site_builder import SiteBuilder


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return SiteBuilder(tmp_path)
