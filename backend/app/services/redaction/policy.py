"""Redaction policy and the label sets used in the summary overlay."""

from dataclasses import dataclass

from app.config import settings
from app.enums import AnchorMode, FontKind

# Default ratio when the model's ratio is unusable. Body-start mode already
# narrows the page to the anchor, so it defaults lower.
DEFAULT_RATIOS = {
    AnchorMode.SINGLE_PAGE_RATIO: 0.5,
    AnchorMode.BODY_START: 0.45,
}


@dataclass(frozen=True)
class RedactionPolicy:
    anchor_mode: AnchorMode = AnchorMode.SINGLE_PAGE_RATIO
    mask_margin: float = 0.05
    anonymized_rewriting: bool = False
    anonymize_counsel: bool = False

    @property
    def default_ratio(self) -> float:
        return DEFAULT_RATIOS[self.anchor_mode]

    @classmethod
    def from_settings(cls) -> "RedactionPolicy":
        return cls(
            anchor_mode=AnchorMode(settings.anchor_mode),
            mask_margin=settings.mask_margin,
            anonymized_rewriting=settings.anonymized_rewriting,
            anonymize_counsel=settings.anonymize_counsel,
        )


@dataclass(frozen=True)
class LabelSet:
    title: str
    court: str
    case_number: str
    parties: str
    counsel: str
    order_summary: str
    claim_summary: str
    no_data: str


KOREAN_LABELS = LabelSet(
    title="[보안 처리된 문서]",
    court="법원",
    case_number="사건",
    parties="당사자",
    counsel="대리인",
    order_summary="주문",
    claim_summary="청구취지",
    no_data="정보없음",
)

# The fallback face is Latin-only, so every fixed string must be ASCII.
ASCII_LABELS = LabelSet(
    title="[SECURED DOCUMENT]",
    court="Court",
    case_number="Case No.",
    parties="Parties",
    counsel="Counsel",
    order_summary="Order",
    claim_summary="Claims",
    no_data="N/A",
)


def labels_for(font_kind: FontKind) -> LabelSet:
    if font_kind == FontKind.EMBEDDED:
        return KOREAN_LABELS
    return ASCII_LABELS
