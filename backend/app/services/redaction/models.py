"""Data models for the redaction pipeline."""

from dataclasses import dataclass, field

from app.enums import FontKind, MaskKind

DEFAULT_ANCHOR_PAGE = 0
DEFAULT_ANCHOR_RATIO = 0.5

EXTRACTION_FAILED = "extraction failed"
NO_DATA = "no data"


@dataclass(frozen=True)
class PageSize:
    """Width and height of a page in points."""

    width: float
    height: float


@dataclass
class MaskAnchor:
    """Where identifying content ends, as reported by the model.

    Values come straight from an external text generator, so both fields
    may be missing or malformed. The geometry calculator normalizes them.
    """

    page_index: object = DEFAULT_ANCHOR_PAGE
    ratio: object = DEFAULT_ANCHOR_RATIO


@dataclass
class ExtractionResult:
    """Identifying metadata pulled from a judgment."""

    court: str
    case_number: str
    parties: str
    counsel: str
    mask_anchor: MaskAnchor = field(default_factory=MaskAnchor)
    order_summary: str = ""
    claim_summary: str = ""
    model: str | None = None
    degraded: bool = False

    @classmethod
    def failed(cls) -> "ExtractionResult":
        """Sentinel returned when every provider fails."""
        return cls(
            court=EXTRACTION_FAILED,
            case_number=NO_DATA,
            parties="",
            counsel="",
            mask_anchor=MaskAnchor(DEFAULT_ANCHOR_PAGE, DEFAULT_ANCHOR_RATIO),
            degraded=True,
        )

    def to_response(self, plan: "MaskPlan | None" = None) -> dict:
        """Serialize for the API response.

        When the mask plan is given, the anchor reported is the normalized
        one the document was actually masked with.
        """
        anchor = {"pageIndex": self.mask_anchor.page_index, "ratio": self.mask_anchor.ratio}
        if plan is not None and plan.page_index is not None:
            anchor = {"pageIndex": plan.page_index, "ratio": plan.anchor_ratio}
        return {
            "court": self.court,
            "caseNumber": self.case_number,
            "parties": self.parties,
            "counsel": self.counsel,
            "orderSummary": self.order_summary,
            "claimSummary": self.claim_summary,
            "maskAnchor": anchor,
            "model": self.model,
            "degraded": self.degraded,
        }


@dataclass(frozen=True)
class FontAsset:
    """Font bytes for the summary, or None when the fallback face is used."""

    data: bytes | None
    kind: FontKind

    @classmethod
    def fallback(cls) -> "FontAsset":
        return cls(data=None, kind=FontKind.FALLBACK)

    @property
    def is_fallback(self) -> bool:
        return self.kind == FontKind.FALLBACK


@dataclass(frozen=True)
class MaskInstruction:
    """Opaque rectangle on one page.

    FULL_PAGE covers the whole page. PARTIAL_TOP covers the band from the
    top edge down to `height`.
    """

    page_index: int
    kind: MaskKind
    height: float


@dataclass
class MaskPlan:
    """Ordered per-page masking instructions.

    At most one PARTIAL_TOP entry, and it is always last. `page_index` and
    `anchor_ratio` are the normalized anchor; `ratio` includes the margin.
    """

    instructions: list[MaskInstruction] = field(default_factory=list)
    page_index: int | None = None
    ratio: float | None = None
    anchor_ratio: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.instructions

    def __iter__(self):
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)


@dataclass
class RenderedField:
    """A labelled field broken into lines that fit the page width."""

    label: str
    lines: list[str]


@dataclass
class RedactionOutcome:
    """Result of one redaction job."""

    file_url: str
    object_name: str
    metadata: ExtractionResult
    font_kind: FontKind
    plan: MaskPlan
