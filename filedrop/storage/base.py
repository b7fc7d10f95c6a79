"""
filedrop/storage/base.py

Shared vocabulary of the upload core.

Design goals:
  - Results are immutable once produced; the caller owns them.
  - Errors travel next to the results instead of replacing them, so a
    failure on part N never discards what parts 0..N-1 already wrote.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, NamedTuple, Optional

from filedrop.core.constants import DEFAULT_MAX_TOTAL_BYTES
from filedrop.core.exceptions import UploadError


# ── Shared data-transfer objects ──────────────────────────────────────────────

@dataclass(frozen=True)
class UploadedFile:
    """
    One part that was fully written to disk.

    Attributes:
        destination_name : File name under the destination directory.
        original_name    : File name declared by the client for the part.
        size_bytes       : Number of bytes copied to disk.
    """

    destination_name: str
    original_name: str
    size_bytes: int


def _media_type(value: str) -> str:
    """'Text/Plain; charset=utf-8' → 'text/plain'."""
    return value.split(";", 1)[0].strip().lower()


@dataclass(frozen=True)
class IngestConfig:
    """
    Caller-supplied limits for one ingest call.

    Attributes:
        max_total_bytes       : Body size ceiling. None means 1 GiB.
        allowed_content_types : Accepted sniffed types. Empty accepts all.
        overwrite             : Replace an existing destination file (True)
                                or fail with FileCreateError (False).
    """

    max_total_bytes: Optional[int] = None
    allowed_content_types: FrozenSet[str] = field(default_factory=frozenset)
    overwrite: bool = True

    @property
    def effective_max_bytes(self) -> int:
        if self.max_total_bytes:
            return self.max_total_bytes
        return DEFAULT_MAX_TOTAL_BYTES

    def is_allowed(self, content_type: str) -> bool:
        """Case-insensitive allow-list check; parameters are ignored."""
        if not self.allowed_content_types:
            return True
        wanted = _media_type(content_type)
        return any(_media_type(allowed) == wanted for allowed in self.allowed_content_types)


class IngestOutcome(NamedTuple):
    """Files stored by an ingest call plus the error that stopped it, if any."""

    files: List[UploadedFile]
    error: Optional[UploadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SingleIngestOutcome(NamedTuple):
    """Result of a single-file ingest call."""

    file: Optional[UploadedFile]
    error: Optional[UploadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
