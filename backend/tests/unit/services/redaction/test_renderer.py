"""Tests for the redaction renderer."""

from unittest.mock import patch

import fitz  # PyMuPDF
import pytest

from app.enums import FontKind
from app.services.redaction.geometry import compute_mask_plan
from app.services.redaction.models import ExtractionResult, FontAsset, MaskAnchor, MaskPlan
from app.services.redaction.payload import page_sizes
from app.services.redaction.policy import ASCII_LABELS, KOREAN_LABELS, RedactionPolicy
from app.services.redaction.renderer import (
    FIELD_ERROR_PLACEHOLDER,
    RedactionRenderer,
    ensure_usable_font,
    summary_fields,
)


def sample_extraction(**overrides) -> ExtractionResult:
    values = {
        "court": "Seoul District Court",
        "case_number": "2024-1234",
        "parties": "A v. B",
        "counsel": "Firm X",
        "mask_anchor": MaskAnchor(page_index=0, ratio=0.4),
    }
    values.update(overrides)
    return ExtractionResult(**values)


def render(pdf_bytes: bytes, extraction: ExtractionResult, policy=None, font=None) -> fitz.Document:
    document = fitz.open(stream=pdf_bytes, filetype="pdf")
    plan = compute_mask_plan(page_sizes(document), extraction.mask_anchor)
    output = RedactionRenderer(policy).render(
        document, extraction, font or FontAsset.fallback(), plan
    )
    document.close()
    return fitz.open(stream=output, filetype="pdf")


class TestEnsureUsableFont:
    """Tests for font validation."""

    def test_fallback_stays_fallback(self):
        assert ensure_usable_font(FontAsset.fallback()).kind == FontKind.FALLBACK

    def test_corrupt_font_bytes_downgrade(self):
        font = FontAsset(data=b"this is not a font", kind=FontKind.EMBEDDED)

        assert ensure_usable_font(font).kind == FontKind.FALLBACK


class TestRedactionRenderer:
    """Tests for RedactionRenderer.render()."""

    def test_fallback_font_still_produces_pdf(self, make_pdf):
        rendered = render(make_pdf(1), sample_extraction())

        assert rendered.page_count == 1
        text = rendered[0].get_text()
        assert ASCII_LABELS.title in text
        assert "Seoul District Court" in text

    def test_embedded_font_uses_korean_labels(self, make_pdf):
        try:
            font_bytes = fitz.Font("cjk").buffer
        except Exception:
            pytest.skip("PyMuPDF build has no bundled CJK font")

        font = FontAsset(data=font_bytes, kind=FontKind.EMBEDDED)
        rendered = render(make_pdf(1), sample_extraction(court="서울중앙지방법원"), font=font)
        text = rendered[0].get_text()

        assert KOREAN_LABELS.title in text
        assert "서울중앙지방법원" in text

    def test_fields_drawn_in_order_below_title(self, make_pdf):
        rendered = render(make_pdf(1), sample_extraction())
        text = rendered[0].get_text()

        positions = [
            text.index(ASCII_LABELS.title),
            text.index("Court:"),
            text.index("Case No.:"),
            text.index("Parties:"),
            text.index("Counsel:"),
        ]
        assert positions == sorted(positions)
        assert "Order:" not in text

    def test_summaries_drawn_with_anonymized_rewriting(self, make_pdf):
        extraction = sample_extraction(order_summary="Appeal dismissed", claim_summary="Damages")
        rendered = render(make_pdf(1), extraction, policy=RedactionPolicy(anonymized_rewriting=True))
        text = rendered[0].get_text()

        assert "Order:" in text
        assert "Appeal dismissed" in text
        assert "Claims:" in text

    def test_empty_value_renders_placeholder(self, make_pdf):
        rendered = render(make_pdf(1), sample_extraction(counsel=""))

        assert ASCII_LABELS.no_data in rendered[0].get_text()

    def test_masks_cover_anchor_region(self, make_pdf):
        extraction = sample_extraction(mask_anchor=MaskAnchor(page_index=1, ratio=0.1))
        rendered = render(make_pdf(3), extraction)

        drawings = [page.get_drawings() for page in rendered]
        page0_fills = [d["rect"] for d in drawings[0] if d.get("fill") == (1.0, 1.0, 1.0)]
        page1_fills = [d["rect"] for d in drawings[1] if d.get("fill") == (1.0, 1.0, 1.0)]

        assert any(r.height == pytest.approx(842.0, abs=0.5) for r in page0_fills)
        assert any(r.height == pytest.approx(842.0 * 0.15, abs=0.5) for r in page1_fills)
        assert drawings[2] == []

    def test_original_text_remains_on_untouched_page(self, make_pdf):
        extraction = sample_extraction(mask_anchor=MaskAnchor(page_index=0, ratio=0.1))
        rendered = render(make_pdf(2), extraction)

        assert "Page 2" in rendered[1].get_text()

    def test_long_values_are_wrapped(self, make_pdf):
        parties = " ".join(f"Defendant{i}" for i in range(40))
        rendered = render(make_pdf(1), sample_extraction(parties=parties))

        for block in rendered[0].get_text("blocks"):
            x0, _, x1, _ = block[:4]
            assert x1 <= 595.0

    def test_fields_past_bottom_margin_are_omitted(self, make_pdf):
        parties = " ".join(f"Party{i}" for i in range(400))
        pdf = make_pdf(1, size=(595.0, 300.0))
        rendered = render(pdf, sample_extraction(parties=parties, counsel="LastFirm"))

        text = rendered[0].get_text()
        assert "Parties:" in text
        assert "LastFirm" not in text

    def test_field_failure_is_isolated(self, make_pdf):
        original = RedactionRenderer._draw_field
        calls = []

        def flaky(self, page, rendered, *args, **kwargs):
            calls.append(rendered.label)
            if rendered.label == "Parties":
                raise RuntimeError("unsupported glyph")
            return original(self, page, rendered, *args, **kwargs)

        with patch.object(RedactionRenderer, "_draw_field", flaky):
            rendered = render(make_pdf(1), sample_extraction())

        text = rendered[0].get_text()
        assert calls == ["Court", "Case No.", "Parties", "Counsel"]
        assert FIELD_ERROR_PLACEHOLDER in text
        assert "Firm X" in text

    def test_field_failing_midway_leaves_no_partial_lines(self, make_pdf):
        parties = " ".join(f"Party{i}" for i in range(40))
        original = fitz.Shape.insert_text
        party_lines = []

        def fails_on_second_line(self, point, buffer, *args, **kwargs):
            if isinstance(buffer, str) and buffer.startswith("Party"):
                party_lines.append(buffer)
                if len(party_lines) == 2:
                    raise RuntimeError("unsupported glyph")
            return original(self, point, buffer, *args, **kwargs)

        with patch.object(fitz.Shape, "insert_text", fails_on_second_line):
            rendered = render(make_pdf(1), sample_extraction(parties=parties))

        page = rendered[0]
        words = page.get_text("words")
        assert len(party_lines) == 2
        assert not [w for w in words if w[4].startswith("Party")]

        placeholder = [w for w in words if w[4] == FIELD_ERROR_PLACEHOLDER]
        label = [w for w in words if w[4] == "Parties:"]
        counsel = [w for w in words if w[4] == "Counsel:"]
        assert len(placeholder) == 1
        assert len(label) == 1
        assert placeholder[0][3] == pytest.approx(label[0][3], abs=1.0)
        assert counsel[0][1] > placeholder[0][3]
        assert "Firm X" in page.get_text()

    def test_empty_plan_draws_summary_only(self, make_pdf):
        document = fitz.open(stream=make_pdf(1), filetype="pdf")
        output = RedactionRenderer().render(
            document, sample_extraction(), FontAsset.fallback(), MaskPlan()
        )

        assert output.startswith(b"%PDF")

    def test_zero_page_document_is_rejected(self):
        with pytest.raises(ValueError, match="no pages"):
            RedactionRenderer().render(
                fitz.open(), sample_extraction(), FontAsset.fallback(), MaskPlan()
            )


class TestSummaryFields:
    """Tests for field ordering."""

    def test_default_order(self):
        fields = summary_fields(sample_extraction(), ASCII_LABELS, RedactionPolicy())

        assert [label for label, _ in fields] == ["Court", "Case No.", "Parties", "Counsel"]

    def test_rewriting_appends_summaries(self):
        fields = summary_fields(
            sample_extraction(), ASCII_LABELS, RedactionPolicy(anonymized_rewriting=True)
        )

        assert [label for label, _ in fields][-2:] == ["Order", "Claims"]
