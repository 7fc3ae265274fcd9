"""Judgment redaction services."""

from app.services.redaction.extractor import MetadataExtractor
from app.services.redaction.fonts import FontResolver
from app.services.redaction.geometry import compute_mask_plan
from app.services.redaction.layout import wrap
from app.services.redaction.models import (
    ExtractionResult,
    FontAsset,
    MaskAnchor,
    MaskInstruction,
    MaskPlan,
    PageSize,
    RedactionOutcome,
    RenderedField,
)
from app.services.redaction.pipeline import RedactionPipeline
from app.services.redaction.policy import RedactionPolicy
from app.services.redaction.providers import ClaudeProvider, GeminiProvider, MetadataProvider
from app.services.redaction.renderer import RedactionRenderer

__all__ = [
    "ClaudeProvider",
    "ExtractionResult",
    "FontAsset",
    "FontResolver",
    "GeminiProvider",
    "MaskAnchor",
    "MaskInstruction",
    "MaskPlan",
    "MetadataExtractor",
    "MetadataProvider",
    "PageSize",
    "RedactionOutcome",
    "RedactionPipeline",
    "RedactionPolicy",
    "RedactionRenderer",
    "RenderedField",
    "compute_mask_plan",
    "wrap",
]
