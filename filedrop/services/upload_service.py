"""
filedrop/services/upload_service.py

Turns one multipart request into files on disk:

    Request
      └─ MultiPartParser.parse()      body → FormData (bounded by max size)
           └─ for each file part, in form order
                ├─ detect_content_type()   first 512 bytes → MIME type
                ├─ IngestConfig.is_allowed()
                ├─ NameGenerator.generate() (rename mode) / check_safe_name()
                └─ copy part → destination_dir/name

Failures never raise out of ``ingest``: the first error is returned next
to the files already written, and processing stops there. Earlier files
stay on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncIterator, BinaryIO, Iterator, List

from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser
from starlette.requests import ClientDisconnect, Request

from filedrop.core.constants import COPY_CHUNK_SIZE, RANDOM_NAME_LENGTH, SNIFF_LENGTH
from filedrop.core.exceptions import (
    FileTypeNotAllowedError,
    FileWriteError,
    MalformedRequestError,
    NoFilesError,
    PartOpenError,
    PartReadError,
    RequestTooLargeError,
    UploadError,
)
from filedrop.core.logger import get_logger
from filedrop.storage.base import IngestConfig, IngestOutcome, SingleIngestOutcome, UploadedFile
from filedrop.storage.filesystem import (
    PathLike,
    check_safe_name,
    create_destination,
    discard,
    ensure_directory,
    extension_of,
)
from filedrop.storage.naming import NameGenerator
from filedrop.storage.sniffer import detect_content_type

logger = get_logger(__name__)


# ── Helpers ────────────────────────────────────────────────────────────────────

class _BodyTooLarge(MultiPartException):
    """Raised from inside the parser's stream so the parser closes its spooled parts."""


async def _bounded(stream: AsyncIterator[bytes], limit: int) -> AsyncIterator[bytes]:
    """Pass body chunks through, failing once more than ``limit`` bytes arrive."""
    received = 0
    async for chunk in stream:
        received += len(chunk)
        if received > limit:
            raise _BodyTooLarge(f"Request body exceeds {limit} bytes.")
        yield chunk


def _file_parts(form: FormData) -> Iterator[UploadFile]:
    """File parts grouped by field (first-appearance order), then part order."""
    for key in form.keys():
        for value in form.getlist(key):
            if isinstance(value, UploadFile):
                yield value


class UploadIngestor:
    """
    Validates and persists the file parts of a multipart request.

    Design choices:
    - **Stop on first error**: a rejected or failing part ends the call;
      the outcome carries every file stored before it.
    - **Stateless**: nothing survives between calls, so one instance may
      serve concurrent requests.
    - **Constructor injection**: the name generator is passed in so tests
      can pin generated names.
    """

    def __init__(self, name_generator: NameGenerator | None = None) -> None:
        self._names: NameGenerator = name_generator or NameGenerator()

    # ── Public API ─────────────────────────────────────────────────────────────

    async def ingest(
        self,
        request: Request,
        destination_dir: PathLike,
        config: IngestConfig | None = None,
        rename: bool = True,
    ) -> IngestOutcome:
        """
        Store every file part of ``request`` under ``destination_dir``.

        Args:
            request         : Incoming multipart/form-data request.
            destination_dir : Directory to write into; created if missing.
            config          : Size ceiling, allow-list and overwrite policy.
            rename          : Replace each name with a random stem that
                              keeps the original extension.

        Returns:
            IngestOutcome(files, error) — error is None when every part
            was stored.
        """
        config = config or IngestConfig()

        try:
            directory = ensure_directory(destination_dir)
            form = await self._parse_form(request, config.effective_max_bytes)
        except UploadError as exc:
            logger.warning("Upload rejected before any file was stored: %s", exc)
            return IngestOutcome([], exc)

        stored: List[UploadedFile] = []
        try:
            for upload in _file_parts(form):
                try:
                    stored.append(await self._store_part(upload, directory, config, rename))
                except UploadError as exc:
                    logger.warning(
                        "Upload stopped at '%s' after %d file(s): %s",
                        upload.filename, len(stored), exc,
                    )
                    return IngestOutcome(stored, exc)
        finally:
            await form.close()

        return IngestOutcome(stored)

    async def ingest_one(
        self,
        request: Request,
        destination_dir: PathLike,
        config: IngestConfig | None = None,
        rename: bool = True,
    ) -> SingleIngestOutcome:
        """
        Single-file variant of ``ingest``: returns the first stored file.

        A request without any file part yields NoFilesError.
        """
        files, error = await self.ingest(request, destination_dir, config, rename)
        first = files[0] if files else None
        if error is None and first is None:
            error = NoFilesError("The request contains no file part.")
        return SingleIngestOutcome(first, error)

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _parse_form(self, request: Request, limit: int) -> FormData:
        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith("multipart/form-data"):
            raise MalformedRequestError(
                f"Expected multipart/form-data, got '{content_type or 'nothing'}'."
            )

        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > limit:
            raise RequestTooLargeError(f"Request body exceeds {limit} bytes.")

        parser = MultiPartParser(
            request.headers,
            _bounded(request.stream(), limit),
            max_part_size=limit,
        )
        try:
            return await parser.parse()
        except _BodyTooLarge as exc:
            raise RequestTooLargeError(exc.message) from exc
        except ClientDisconnect as exc:
            raise PartReadError("Client disconnected while sending the body.") from exc
        except (MultiPartException, ValueError) as exc:
            raise MalformedRequestError(f"Invalid multipart body: {exc}") from exc

    async def _store_part(
        self,
        upload: UploadFile,
        directory: Path,
        config: IngestConfig,
        rename: bool,
    ) -> UploadedFile:
        """
        Sniff, validate, name and copy one part.

        The part is closed on every exit path.
        """
        original = upload.filename or ""
        try:
            try:
                await upload.seek(0)
            except (OSError, ValueError) as exc:
                raise PartOpenError(f"Could not open part '{original}': {exc}") from exc

            try:
                head = await upload.read(SNIFF_LENGTH)
                await upload.seek(0)
            except (OSError, ValueError) as exc:
                raise PartReadError(f"Could not read part '{original}': {exc}") from exc

            content_type = detect_content_type(head)
            if not config.is_allowed(content_type):
                raise FileTypeNotAllowedError(content_type, original)

            name = self._destination_name(original, rename)
            size = await self._copy(upload, directory, name, config.overwrite)
        finally:
            await upload.close()

        logger.info("Stored '%s' as '%s' (%d bytes, %s).", original, name, size, content_type)
        return UploadedFile(destination_name=name, original_name=original, size_bytes=size)

    def _destination_name(self, original: str, rename: bool) -> str:
        if rename:
            return self._names.generate(RANDOM_NAME_LENGTH) + extension_of(original)
        return check_safe_name(original)

    async def _copy(self, upload: UploadFile, directory: Path, name: str, overwrite: bool) -> int:
        """Stream the part into ``directory/name``; a failed copy leaves no file behind."""
        target = directory / name
        out = create_destination(directory, name, overwrite)
        try:
            with out:
                return await self._pump(upload, out, name)
        except OSError as exc:
            # raised by flush/close when the with block exits
            discard(target)
            raise FileWriteError(f"Could not write '{name}': {exc}") from exc
        except UploadError:
            discard(target)
            raise

    @staticmethod
    async def _pump(upload: UploadFile, out: BinaryIO, name: str) -> int:
        written = 0
        while True:
            try:
                chunk = await upload.read(COPY_CHUNK_SIZE)
            except (OSError, ValueError) as exc:
                raise PartReadError(f"Could not read part for '{name}': {exc}") from exc
            if not chunk:
                return written
            try:
                out.write(chunk)
            except OSError as exc:
                raise FileWriteError(f"Could not write '{name}': {exc}") from exc
            written += len(chunk)


# ── Module-level singleton ─────────────────────────────────────────────────────
# Controllers import this instance.  Tests construct UploadIngestor directly
# with an injected NameGenerator.

upload_ingestor = UploadIngestor()
