"""
filedrop/api/upload_controller.py

Handles incoming requests to POST /upload/ and POST /upload/one.

This layer is responsible only for HTTP concerns:
  - Resolving the 'rename' query parameter and the upload settings.
  - Delegating the multipart body to UploadIngestor.
  - Translating the returned UploadError into an HTTP status.

Responses:
  200  Every file part was stored.  Body lists the stored files.
  400  The body was not multipart, a kept file name was unsafe, or
       (single-file endpoint) no file part was sent.
  413  The body exceeded the configured size ceiling.
  415  A part's sniffed content type is not in the allow-list.
  500  A filesystem or other unexpected error stopped the upload.

Error bodies carry the files stored before the failure:
  { "error": "...", "files": [...] }
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from filedrop.core.config import settings
from filedrop.core.exceptions import (
    FileTypeNotAllowedError,
    MalformedRequestError,
    NoFilesError,
    RequestTooLargeError,
    UnsafeFileNameError,
    UploadError,
)
from filedrop.core.logger import get_logger
from filedrop.models.upload_models import (
    UploadedFileResponse,
    UploadErrorResponse,
    UploadResponse,
)
from filedrop.services.upload_service import upload_ingestor
from filedrop.storage.base import IngestConfig, UploadedFile

logger = get_logger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

_CLIENT_ERRORS = {
    RequestTooLargeError: 413,
    FileTypeNotAllowedError: 415,
    MalformedRequestError: 400,
    UnsafeFileNameError: 400,
    NoFilesError: 400,
}

# ── Helpers ────────────────────────────────────────────────────────────────────

def _ingest_config() -> IngestConfig:
    """Snapshot the current settings; read once per request."""
    return IngestConfig(
        max_total_bytes=settings.max_upload_bytes,
        allowed_content_types=frozenset(settings.allowed_content_types),
        overwrite=settings.overwrite_existing,
    )


def _err(error: UploadError, stored: List[UploadedFile]) -> JSONResponse:
    """Map an UploadError to a JSON error response."""
    status = _CLIENT_ERRORS.get(type(error), 500)
    if status == 500:
        logger.error("Upload failed: %s", error, exc_info=error)
        message = "Failed to store uploaded file."
    else:
        logger.warning("Upload rejected (%d): %s", status, error)
        message = str(error)

    body = UploadErrorResponse(
        error=message,
        files=[UploadedFileResponse.from_result(f) for f in stored],
    )
    return JSONResponse(status_code=status, content=body.model_dump())


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/", response_model=UploadResponse, summary="Upload one or more files")
async def upload_files(
    request: Request,
    rename: Optional[bool] = Query(default=None, description="Store under random names."),
) -> JSONResponse:
    """
    Accept any number of file parts under any field names:

      curl -F "file=@a.png" -F "file=@b.jpg" "http://host/upload/?rename=true"

    'rename' defaults to the RENAME_UPLOADS setting.
    """
    rename = settings.rename_uploads if rename is None else rename
    logger.info("Upload request received — rename=%s, dir=%s", rename, settings.upload_dir)

    files, error = await upload_ingestor.ingest(
        request, settings.upload_dir, _ingest_config(), rename=rename
    )
    if error is not None:
        return _err(error, files)

    logger.info("Upload complete — %d file(s) stored.", len(files))
    result = UploadResponse(
        message=f"Stored {len(files)} file(s).",
        files=[UploadedFileResponse.from_result(f) for f in files],
    )
    return JSONResponse(status_code=200, content=result.model_dump())


@router.post("/one", response_model=UploadedFileResponse, summary="Upload a single file")
async def upload_one_file(
    request: Request,
    rename: Optional[bool] = Query(default=None, description="Store under a random name."),
) -> JSONResponse:
    """Store the first file part of the request and describe it."""
    rename = settings.rename_uploads if rename is None else rename

    stored, error = await upload_ingestor.ingest_one(
        request, settings.upload_dir, _ingest_config(), rename=rename
    )
    if error is not None:
        return _err(error, [stored] if stored else [])

    result = UploadedFileResponse.from_result(stored)
    return JSONResponse(status_code=200, content=result.model_dump())
