"""filedrop/storage/__init__.py — public API of the storage package."""

from filedrop.storage.base import IngestConfig, IngestOutcome, SingleIngestOutcome, UploadedFile
from filedrop.storage.filesystem import ensure_directory
from filedrop.storage.naming import NameGenerator
from filedrop.storage.sniffer import detect_content_type

__all__ = [
    "IngestConfig",
    "IngestOutcome",
    "NameGenerator",
    "SingleIngestOutcome",
    "UploadedFile",
    "detect_content_type",
    "ensure_directory",
]
