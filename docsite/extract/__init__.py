"""Identifier extraction collaborators."""

from .base import ExtractionError, Extractor
from .json_records import JsonRecordExtractor
from .python import PythonExtractor

__all__ = ["ExtractionError", "Extractor", "JsonRecordExtractor", "PythonExtractor"]
