"""
filedrop/models/upload_models.py

Pydantic DTOs for the upload flow.
The request has no DTO — the multipart body is streamed straight into
UploadIngestor; only the response shapes are defined here.
"""

from typing import List

from pydantic import BaseModel

from filedrop.storage.base import UploadedFile


class UploadedFileResponse(BaseModel):
    """
    One stored file.

        {
            "file_name": "aB3_x+9QzK.png",
            "original_file_name": "holiday.png",
            "file_size": 20481
        }
    """

    file_name: str
    original_file_name: str
    file_size: int

    @classmethod
    def from_result(cls, result: UploadedFile) -> "UploadedFileResponse":
        return cls(
            file_name=result.destination_name,
            original_file_name=result.original_name,
            file_size=result.size_bytes,
        )


class UploadResponse(BaseModel):
    """
    Successful response for POST /upload/.

        {
            "message": "Stored 2 file(s).",
            "files": [<UploadedFileResponse>, ...]
        }
    """

    message: str
    files: List[UploadedFileResponse]


class UploadErrorResponse(BaseModel):
    """
    Error body for both upload endpoints.  ``files`` lists what was stored
    before the failing part.
    """

    error: str
    files: List[UploadedFileResponse] = []
