"""
filedrop/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

import string

# ── Size limits ────────────────────────────────────────────────────────────────

#: Ceiling applied to a request body when IngestConfig.max_total_bytes is unset.
DEFAULT_MAX_TOTAL_BYTES: int = 1024 * 1024 * 1024

#: Number of leading bytes inspected to sniff a part's content type.
SNIFF_LENGTH: int = 512

#: Read size used when streaming a part to disk.
COPY_CHUNK_SIZE: int = 64 * 1024

# ── Naming ─────────────────────────────────────────────────────────────────────

#: 64 symbols — each generated character carries exactly 6 bits.
NAME_ALPHABET: str = string.ascii_lowercase + string.ascii_uppercase + string.digits + "_+"

#: Stem length of a generated destination file name.
RANDOM_NAME_LENGTH: int = 10

# ── Filesystem modes ───────────────────────────────────────────────────────────

DIRECTORY_MODE: int = 0o755
FILE_MODE: int = 0o644

# ── Content types ──────────────────────────────────────────────────────────────

TEXT_PLAIN: str = "text/plain"
TEXT_HTML: str = "text/html"
TEXT_XML: str = "text/xml"
OCTET_STREAM: str = "application/octet-stream"
