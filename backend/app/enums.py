"""Enums for status and mode values used throughout the application."""

from enum import StrEnum


class FontKind(StrEnum):
    """Which typeface the redaction summary is drawn with."""

    EMBEDDED = "embedded"
    FALLBACK = "fallback"


class MaskKind(StrEnum):
    """Shape of a single masking instruction."""

    FULL_PAGE = "full_page"
    PARTIAL_TOP = "partial_top"


class AnchorMode(StrEnum):
    """How the AI model reports where identifying content ends.

    SINGLE_PAGE_RATIO: ratio of the first page covered by the header block.
    BODY_START: page index and ratio where the judgment body begins.
    """

    SINGLE_PAGE_RATIO = "single_page_ratio"
    BODY_START = "body_start"


class QueueStatus(StrEnum):
    """Status written with a new record in the document queue table."""

    PENDING = "pending"
