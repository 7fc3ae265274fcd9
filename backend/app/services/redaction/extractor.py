"""Judgment metadata extraction with an ordered provider fallback chain."""

import json
import logging
import re

from app.enums import AnchorMode
from app.exceptions import ProviderError
from app.services.redaction.models import ExtractionResult, MaskAnchor
from app.services.redaction.policy import RedactionPolicy
from app.services.redaction.providers import MetadataProvider

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"

_FENCE_RE = re.compile(r"```[a-zA-Z]*")

BASE_PROMPT = """Read the top of this court judgment and extract its identifying metadata.
Respond with a single JSON object only, no Markdown and no commentary:
{
  "court": "court name",
  "caseNo": "case number",
  "parties": "plaintiff(s) and defendant(s)",
  "lawyer": "counsel of record",
  "maskAnchor": {"pageIndex": 0, "ratio": 0.4}%(extra_keys)s
}
Keep names and numbers in the document's original language.
%(anchor_rule)s%(rewrite_rules)s"""

ANCHOR_RULES = {
    AnchorMode.SINGLE_PAGE_RATIO: (
        "maskAnchor.pageIndex is always 0. maskAnchor.ratio is the fraction of the first "
        "page's height, measured from the top, covered by the caption block (court, case "
        "number, parties, counsel). Use a number between 0 and 1.\n"
    ),
    AnchorMode.BODY_START: (
        "maskAnchor.pageIndex is the 0-based page where the judgment body (the order, "
        "the reasons) begins; the caption may span several pages before it. "
        "maskAnchor.ratio is the fraction of that page's height, measured from the top, "
        "at which the body begins. Use a number between 0 and 1.\n"
    ),
}

SUMMARY_KEYS = ',\n  "orderSummary": "one-sentence summary of the order",\n  "claimSummary": "one-sentence summary of the claims"'


def build_prompt(policy: RedactionPolicy) -> str:
    """Assemble the extraction prompt for a redaction policy."""
    rules = ""
    if policy.anonymized_rewriting:
        rules += (
            "Replace every personal name in \"parties\" with its family name followed by "
            "OO (for example 김OO). Write orderSummary and claimSummary without any "
            "personal names.\n"
        )
    if policy.anonymize_counsel:
        rules += "Anonymize individual lawyer names in \"lawyer\" the same way; keep firm names.\n"
    else:
        rules += "Copy \"lawyer\" exactly as written; do not anonymize counsel.\n"

    return BASE_PROMPT % {
        "extra_keys": SUMMARY_KEYS if policy.anonymized_rewriting else "",
        "anchor_rule": ANCHOR_RULES[policy.anchor_mode],
        "rewrite_rules": rules,
    }


def strip_code_fences(text: str) -> str:
    """Remove ``` / ```json wrappers that models add around JSON."""
    return _FENCE_RE.sub("", text).strip()


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return ", ".join(_as_text(v) for v in value if v is not None and _as_text(v))
    if isinstance(value, dict):
        return ", ".join(f"{k}: {_as_text(v)}" for k, v in value.items())
    return str(value)


def _first(data: dict, *keys: str) -> object:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def parse_extraction(text: str) -> ExtractionResult:
    """
    Parse a model response into an ExtractionResult.

    The response is treated as untrusted input: alternate key names are
    accepted and values are coerced to strings. Anchor values are passed
    through untouched for the geometry calculator to normalize.

    Raises:
        ProviderError: If the response is not a JSON object
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ProviderError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ProviderError(f"Expected a JSON object, got {type(data).__name__}")

    anchor_data = data.get("maskAnchor")
    if not isinstance(anchor_data, dict):
        anchor_data = data

    return ExtractionResult(
        court=_as_text(_first(data, "court")),
        case_number=_as_text(_first(data, "caseNo", "caseNumber", "case_number")),
        parties=_as_text(_first(data, "parties")),
        counsel=_as_text(_first(data, "lawyer", "counsel")),
        mask_anchor=MaskAnchor(
            page_index=_first(anchor_data, "pageIndex", "page_index", "page"),
            ratio=_first(anchor_data, "ratio"),
        ),
        order_summary=_as_text(_first(data, "orderSummary", "order_summary")),
        claim_summary=_as_text(_first(data, "claimSummary", "claim_summary")),
    )


class MetadataExtractor:
    """Try each provider in order until one returns parseable metadata.

    Attempts are sequential and each provider is tried once. If every
    provider fails, the failure sentinel is returned instead of raising.
    """

    def __init__(self, providers: list[MetadataProvider], policy: RedactionPolicy | None = None):
        self.providers = list(providers)
        self.policy = policy or RedactionPolicy()
        self.prompt = build_prompt(self.policy)

    async def extract(self, document: bytes) -> ExtractionResult:
        for provider in self.providers:
            logger.info(f"Extracting metadata with {provider.name}")
            try:
                text = await provider.complete(self.prompt, document, PDF_MIME_TYPE)
                result = parse_extraction(text)
            except Exception as e:
                logger.warning(
                    f"Metadata extraction failed with {provider.name}: {e}",
                    extra={"provider": provider.name, "exception_type": type(e).__name__},
                )
                continue

            result.model = provider.name
            logger.info(f"Metadata extracted with {provider.name}")
            return result

        logger.error(f"All {len(self.providers)} metadata providers failed")
        return ExtractionResult.failed()
