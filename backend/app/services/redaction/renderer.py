"""Draw masks and the redaction summary onto a judgment PDF."""

import logging

import fitz  # PyMuPDF

from app.enums import FontKind, MaskKind
from app.services.redaction.layout import WidthFn, layout_field
from app.services.redaction.models import (
    ExtractionResult,
    FontAsset,
    MaskInstruction,
    MaskPlan,
    RenderedField,
)
from app.services.redaction.policy import LabelSet, RedactionPolicy, labels_for

logger = logging.getLogger(__name__)

EMBEDDED_FONT_NAME = "redactfont"
FALLBACK_FONT_NAME = "helv"
FIELD_ERROR_PLACEHOLDER = "***"

WHITE = (1, 1, 1)
BLACK = (0, 0, 0)
TITLE_COLOR = (0, 0.5, 0)

MARGIN_LEFT = 50.0
MARGIN_RIGHT = 50.0
MARGIN_TOP = 50.0
MARGIN_BOTTOM = 50.0
TITLE_SIZE = 16.0
TITLE_GAP = 40.0
FONT_SIZE = 12.0
LINE_HEIGHT = 20.0
PARAGRAPH_GAP = 6.0
LABEL_GAP = 8.0


def ensure_usable_font(font: FontAsset) -> FontAsset:
    """Downgrade to the fallback face if the font bytes cannot be loaded."""
    if font.is_fallback or not font.data:
        return FontAsset.fallback()
    try:
        fitz.Font(fontbuffer=font.data)
    except Exception as e:
        logger.warning(f"Downloaded font is unusable ({e}), using fallback font")
        return FontAsset.fallback()
    return font


def measure_with(font: FontAsset, fontsize: float = FONT_SIZE) -> WidthFn:
    """Width function for a font asset at the given size."""
    if font.kind == FontKind.EMBEDDED and font.data:
        font_obj = fitz.Font(fontbuffer=font.data)
    else:
        font_obj = fitz.Font(fontname=FALLBACK_FONT_NAME)

    def width_fn(text: str) -> float:
        return font_obj.text_length(text, fontsize=fontsize)

    return width_fn


def summary_fields(
    extraction: ExtractionResult, labels: LabelSet, policy: RedactionPolicy
) -> list[tuple[str, str]]:
    """Label/value pairs in display order."""
    fields = [
        (labels.court, extraction.court),
        (labels.case_number, extraction.case_number),
        (labels.parties, extraction.parties),
        (labels.counsel, extraction.counsel),
    ]
    if policy.anonymized_rewriting:
        fields.append((labels.order_summary, extraction.order_summary))
        fields.append((labels.claim_summary, extraction.claim_summary))
    return fields


class RedactionRenderer:
    """Mask identifying regions and overlay a redacted summary.

    Drawing order is fixed: font embedding, masks, then text, so the
    summary always sits on top of the masks. The summary goes on the
    first page only and fields that would run past the bottom margin are
    dropped.
    """

    def __init__(self, policy: RedactionPolicy | None = None):
        self.policy = policy or RedactionPolicy()

    def render(
        self,
        document: fitz.Document,
        extraction: ExtractionResult,
        font: FontAsset,
        plan: MaskPlan,
    ) -> bytes:
        if document.page_count == 0:
            raise ValueError("Cannot render a document with no pages")

        font = ensure_usable_font(font)
        first_page = document[0]
        fontname = self._embed_font(first_page, font)

        for instruction in plan:
            self._apply_mask(document, instruction)

        self._draw_summary(first_page, extraction, font, fontname)

        return document.tobytes(garbage=3, deflate=True)

    def _embed_font(self, page: fitz.Page, font: FontAsset) -> str:
        if font.kind == FontKind.EMBEDDED and font.data:
            page.insert_font(fontname=EMBEDDED_FONT_NAME, fontbuffer=font.data)
            return EMBEDDED_FONT_NAME
        return FALLBACK_FONT_NAME

    def _apply_mask(self, document: fitz.Document, instruction: MaskInstruction) -> None:
        page = document[instruction.page_index]
        if instruction.kind == MaskKind.FULL_PAGE:
            rect = page.rect
        else:
            rect = fitz.Rect(0, 0, page.rect.width, min(instruction.height, page.rect.height))
        page.draw_rect(rect, color=WHITE, fill=WHITE, overlay=True)

    def _draw_summary(
        self,
        page: fitz.Page,
        extraction: ExtractionResult,
        font: FontAsset,
        fontname: str,
    ) -> None:
        labels = labels_for(font.kind)
        width_fn = measure_with(font)
        bottom = page.rect.height - MARGIN_BOTTOM

        y = MARGIN_TOP
        page.insert_text(
            (MARGIN_LEFT, y), labels.title, fontname=fontname, fontsize=TITLE_SIZE, color=TITLE_COLOR
        )
        y += TITLE_GAP

        fields = summary_fields(extraction, labels, self.policy)
        label_width = max(width_fn(f"{label}:") for label, _ in fields)
        content_x = MARGIN_LEFT + label_width + LABEL_GAP
        max_width = max(page.rect.width - content_x - MARGIN_RIGHT, FONT_SIZE)

        for label, value in fields:
            if y > bottom:
                logger.info(f"Summary reached the bottom margin, omitting '{label}' and later fields")
                break
            try:
                rendered = layout_field(label, value, max_width, width_fn, labels.no_data)
                y = self._draw_field(page, rendered, content_x, y, bottom, fontname)
            except Exception as e:
                logger.warning(
                    f"Could not draw field '{label}': {e}",
                    extra={"field": label, "exception_type": type(e).__name__},
                )
                y = self._draw_placeholder(page, label, content_x, y, fontname)
            y += PARAGRAPH_GAP

    def _draw_field(
        self,
        page: fitz.Page,
        rendered: RenderedField,
        content_x: float,
        y: float,
        bottom: float,
        fontname: str,
    ) -> float:
        # Nothing reaches the page until every line of the field was drawn
        shape = page.new_shape()
        shape.insert_text(
            (MARGIN_LEFT, y), f"{rendered.label}:", fontname=fontname, fontsize=FONT_SIZE, color=BLACK
        )
        for line in rendered.lines:
            if y > bottom:
                break
            shape.insert_text((content_x, y), line, fontname=fontname, fontsize=FONT_SIZE, color=BLACK)
            y += LINE_HEIGHT
        shape.commit(overlay=True)
        return y

    def _draw_placeholder(
        self, page: fitz.Page, label: str, content_x: float, y: float, fontname: str
    ) -> float:
        page.insert_text(
            (MARGIN_LEFT, y), f"{label}:", fontname=fontname, fontsize=FONT_SIZE, color=BLACK
        )
        # Built-in face and ASCII so the placeholder cannot hit a missing glyph
        page.insert_text(
            (content_x, y),
            FIELD_ERROR_PLACEHOLDER,
            fontname=FALLBACK_FONT_NAME,
            fontsize=FONT_SIZE,
            color=BLACK,
        )
        return y + LINE_HEIGHT
