"""Turn the model's page/ratio hint into per-page masking rectangles."""

import logging
import math

from app.enums import MaskKind
from app.services.redaction.models import MaskAnchor, MaskInstruction, MaskPlan, PageSize

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 0.05


def normalize_page_index(value: object) -> int:
    """Coerce a reported page index to a non-negative int.

    Missing, negative, fractional or non-numeric values become 0.
    Integer-valued strings ("2") are accepted.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and value >= 0:
            return int(value)
        return 0
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            return int(stripped)
    return 0


def normalize_ratio(value: object, default: float) -> float:
    """Coerce a reported ratio into (0, 1], or return `default`."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)):
        return default

    ratio = float(value)
    if not math.isfinite(ratio) or ratio <= 0.0 or ratio > 1.0:
        return default
    return ratio


def compute_mask_plan(
    page_sizes: list[PageSize],
    anchor: MaskAnchor,
    default_ratio: float = 0.5,
    margin: float = DEFAULT_MARGIN,
) -> MaskPlan:
    """Build the masking plan for a document.

    Pages before the anchor page are masked entirely, the anchor page is
    masked from the top down to `height * (ratio + margin)` and later pages
    are left alone. Never raises on bad anchor values.

    Args:
        page_sizes: Size of every page, in document order
        anchor: Page/ratio hint from the metadata extractor
        default_ratio: Ratio used when the reported one is unusable
        margin: Extra fraction of the page added below the boundary

    Returns:
        MaskPlan, empty when the document has no pages
    """
    if not page_sizes:
        return MaskPlan()

    page_index = normalize_page_index(anchor.page_index)
    last_page = len(page_sizes) - 1
    if page_index > last_page:
        logger.info(f"Anchor page {page_index} beyond document, clamping to {last_page}")
        page_index = last_page

    anchor_ratio = normalize_ratio(anchor.ratio, default_ratio)
    ratio = min(anchor_ratio + margin, 1.0)

    instructions = [
        MaskInstruction(page_index=i, kind=MaskKind.FULL_PAGE, height=page_sizes[i].height)
        for i in range(page_index)
    ]
    instructions.append(
        MaskInstruction(
            page_index=page_index,
            kind=MaskKind.PARTIAL_TOP,
            height=page_sizes[page_index].height * ratio,
        )
    )
    return MaskPlan(
        instructions=instructions, page_index=page_index, ratio=ratio, anchor_ratio=anchor_ratio
    )
