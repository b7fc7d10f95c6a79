"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest — no import needed.
"""

import base64
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from filedrop.core.config import settings
from filedrop.main import app

# (field_name, filename, content) — filename None marks a plain text field.
Part = Tuple[str, Optional[str], bytes]

BOUNDARY = "filedrop-test-boundary"

# 1x1 transparent PNG.
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

# JFIF header is enough for magic-byte detection.
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x00" * 64


# ── Multipart helpers ──────────────────────────────────────────────────────────

def encode_multipart(parts: List[Part], boundary: str = BOUNDARY) -> bytes:
    """Encode parts as a multipart/form-data body."""
    chunks: List[bytes] = []
    for field, filename, content in parts:
        disposition = f'form-data; name="{field}"'
        headers = ""
        if filename is not None:
            disposition += f'; filename="{filename}"'
            headers = "Content-Type: application/octet-stream\r\n"
        chunks.append(
            f"--{boundary}\r\nContent-Disposition: {disposition}\r\n{headers}\r\n".encode()
        )
        chunks.append(content)
        chunks.append(b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


def make_request(
    body: bytes,
    content_type: str = f"multipart/form-data; boundary={BOUNDARY}",
    send_length: bool = True,
) -> Request:
    """Build a Starlette Request whose body is delivered in a single message."""
    headers = [(b"content-type", content_type.encode())]
    if send_length:
        headers.append((b"content-length", str(len(body)).encode()))

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/upload/",
        "query_string": b"",
        "headers": headers,
    }

    async def receive() -> dict:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def make_chunked_request(chunks: List[bytes], disconnect: bool = False) -> Request:
    """
    Build a Request that receives ``chunks`` one message at a time, without
    a Content-Length.  With ``disconnect`` the client drops after the last
    chunk instead of finishing the body.
    """
    messages = [{"type": "http.request", "body": chunk, "more_body": True} for chunk in chunks]
    if disconnect:
        messages.append({"type": "http.disconnect"})
    else:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    pending = iter(messages)

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/upload/",
        "query_string": b"",
        "headers": [(b"content-type", f"multipart/form-data; boundary={BOUNDARY}".encode())],
    }

    async def receive() -> dict:
        return next(pending)

    return Request(scope, receive)


# ── Core client fixture ────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    A synchronous TestClient wrapping the FastAPI app.

    session-scoped so the app is instantiated once per test run.
    The lifespan context (startup/shutdown events) is entered automatically.
    """
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the service's upload settings at a fresh temporary directory."""
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(target))
    monkeypatch.setattr(settings, "allowed_content_types", [])
    monkeypatch.setattr(settings, "max_upload_bytes", None)
    monkeypatch.setattr(settings, "rename_uploads", True)
    monkeypatch.setattr(settings, "overwrite_existing", True)
    return target


# ── Sample file fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def request_factory() -> Callable[..., Request]:
    """
    Build a multipart Request from (field, filename, content) tuples.

    Usage:
        request = request_factory([("file", "a.png", png_bytes)])
    """
    def _factory(parts: List[Part], **kwargs) -> Request:
        return make_request(encode_multipart(parts), **kwargs)

    return _factory


@pytest.fixture
def raw_request() -> Callable[..., Request]:
    """make_request() for tests that need control over the raw body or headers."""
    return make_request


@pytest.fixture
def multipart() -> Callable[..., bytes]:
    """encode_multipart() for tests that need the encoded body itself."""
    return encode_multipart


@pytest.fixture
def chunked_request() -> Callable[..., Request]:
    """make_chunked_request() for tests that stream the body in pieces."""
    return make_chunked_request
