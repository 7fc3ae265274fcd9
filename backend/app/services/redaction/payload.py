"""Decode and open uploaded judgment PDFs."""

import base64
import binascii
import re

import fitz  # PyMuPDF

from app.exceptions import DocumentInputError
from app.services.redaction.models import PageSize

_WHITESPACE_RE = re.compile(r"\s+")

DATA_URI_MARKER = "base64,"


def decode_document_payload(payload: str | None) -> bytes:
    """
    Decode a base64 document payload.

    Strips an optional `data:...;base64,` header and any whitespace left by
    line-wrapped encoders before decoding.

    Raises:
        DocumentInputError: If the payload is missing or not valid base64
    """
    if not payload or not payload.strip():
        raise DocumentInputError("No document data was provided")

    if DATA_URI_MARKER in payload:
        payload = payload.split(DATA_URI_MARKER, 1)[1]
    payload = _WHITESPACE_RE.sub("", payload)

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DocumentInputError(f"Document data is not valid base64: {e}") from e

    if not data:
        raise DocumentInputError("Document data is empty")
    return data


def open_pdf(data: bytes) -> fitz.Document:
    """Open PDF bytes, rejecting anything that is not a PDF with pages."""
    try:
        document = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DocumentInputError(f"Document is not a readable PDF: {e}") from e

    if document.page_count == 0:
        document.close()
        raise DocumentInputError("Document has no pages")
    return document


def page_sizes(document: fitz.Document) -> list[PageSize]:
    return [PageSize(width=page.rect.width, height=page.rect.height) for page in document]
