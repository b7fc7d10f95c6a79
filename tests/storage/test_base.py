"""
tests/storage/test_base.py

Tests for IngestConfig defaults and allow-list matching, and the outcome
tuples.
"""

import dataclasses

import pytest

from filedrop.core.constants import DEFAULT_MAX_TOTAL_BYTES
from filedrop.core.exceptions import NoFilesError
from filedrop.storage.base import IngestConfig, IngestOutcome, SingleIngestOutcome, UploadedFile


class TestIngestConfig:

    def test_default_ceiling_is_one_gib(self) -> None:
        assert IngestConfig().effective_max_bytes == DEFAULT_MAX_TOTAL_BYTES == 1024 ** 3

    def test_explicit_ceiling_wins(self) -> None:
        assert IngestConfig(max_total_bytes=10).effective_max_bytes == 10

    def test_empty_allow_list_allows_everything(self) -> None:
        assert IngestConfig().is_allowed("application/x-anything")

    def test_allow_list_ignores_case_and_parameters(self) -> None:
        config = IngestConfig(allowed_content_types=frozenset({"Text/Plain; charset=utf-8"}))

        assert config.is_allowed("text/plain")
        assert not config.is_allowed("text/html")

    def test_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            IngestConfig().overwrite = False  # type: ignore[misc]


class TestOutcomes:

    def test_ingest_outcome_unpacks(self) -> None:
        stored = UploadedFile("x.png", "a.png", 3)

        files, error = IngestOutcome([stored])

        assert files == [stored]
        assert error is None

    def test_ok_reflects_error(self) -> None:
        assert IngestOutcome([]).ok
        assert not SingleIngestOutcome(None, NoFilesError("none")).ok

    def test_uploaded_file_is_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            UploadedFile("x.png", "a.png", 3).size_bytes = 4  # type: ignore[misc]
