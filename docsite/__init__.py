"""Static documentation site assembly for API references and release notes."""

__version__ = "0.1.0"
