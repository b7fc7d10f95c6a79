"""
filedrop/storage/sniffer.py

Content-type detection from a file's leading bytes.

The declared file name and the client-sent Content-Type header are never
consulted. Detection runs in WHATWG MIME-sniffing order: markup and
byte-order-mark signatures first, then magic numbers (via the
``filetype`` package), then a binary/text check on the same prefix.
"""

from __future__ import annotations

import filetype

from filedrop.core.constants import OCTET_STREAM, SNIFF_LENGTH, TEXT_HTML, TEXT_PLAIN, TEXT_XML

# Control bytes that mark a resource as binary (WHATWG MIME sniffing).
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)

_WHITESPACE = b"\t\n\x0c\r "

# Matched case-insensitively; must be followed by a space or '>'.
_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
)
_TAG_TERMINATORS = b" >"

_XML_PREFIX = b"<?xml"

_BYTE_ORDER_MARKS = (b"\xfe\xff", b"\xff\xfe", b"\xef\xbb\xbf")


def _looks_binary(head: bytes) -> bool:
    return any(byte in _BINARY_BYTES for byte in head)


def _is_html(text: bytes) -> bool:
    upper = text.upper()
    for tag in _HTML_TAGS:
        following = text[len(tag):len(tag) + 1]
        if upper.startswith(tag) and following and following in _TAG_TERMINATORS:
            return True
    return False


def _markup_type(head: bytes) -> str | None:
    """text/html or text/xml when the prefix (after whitespace) is markup."""
    text = head.lstrip(_WHITESPACE)
    if _is_html(text):
        return TEXT_HTML
    if text.startswith(_XML_PREFIX):
        return TEXT_XML
    return None


def detect_content_type(head: bytes) -> str:
    """
    Return the MIME type sniffed from ``head``.

    Only the first SNIFF_LENGTH bytes are considered. Markup is reported
    as ``text/html`` or ``text/xml``; a byte-order mark, an empty prefix or
    one free of binary control bytes is ``text/plain``; anything else that
    carries no known signature is ``application/octet-stream``.
    """
    head = head[:SNIFF_LENGTH]
    if not head:
        return TEXT_PLAIN

    markup = _markup_type(head)
    if markup is not None:
        return markup

    if head.startswith(_BYTE_ORDER_MARKS):
        return TEXT_PLAIN

    kind = filetype.guess(head)
    if kind is not None:
        return kind.mime

    if _looks_binary(head):
        return OCTET_STREAM
    return TEXT_PLAIN
