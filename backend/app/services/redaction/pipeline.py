"""End-to-end redaction job: decode, extract, mask, render, publish."""

import asyncio
import logging

from app.services.redaction.extractor import MetadataExtractor
from app.services.redaction.fonts import FontResolver
from app.services.redaction.geometry import compute_mask_plan
from app.services.redaction.models import RedactionOutcome
from app.services.redaction.payload import decode_document_payload, open_pdf, page_sizes
from app.services.redaction.policy import RedactionPolicy
from app.services.redaction.renderer import RedactionRenderer, ensure_usable_font
from app.services.storage import Publisher

logger = logging.getLogger(__name__)


class RedactionPipeline:
    """Runs one redaction job with injected collaborators.

    Metadata extraction and font download run concurrently; neither can
    fail the job. Only bad input and publish failures propagate.
    """

    def __init__(
        self,
        extractor: MetadataExtractor,
        font_resolver: FontResolver,
        renderer: RedactionRenderer,
        publisher: Publisher,
        policy: RedactionPolicy | None = None,
    ):
        self.extractor = extractor
        self.font_resolver = font_resolver
        self.renderer = renderer
        self.publisher = publisher
        self.policy = policy or RedactionPolicy()

    async def run(self, payload: str | None, filename: str) -> RedactionOutcome:
        """
        Redact an uploaded judgment and publish it.

        Args:
            payload: Base64 PDF, optionally with a data-URI header
            filename: Display filename from the client

        Returns:
            RedactionOutcome with the public URL and extracted metadata

        Raises:
            DocumentInputError: If the payload is missing or not a PDF
            PublishError: If the rendered PDF could not be persisted
        """
        data = decode_document_payload(payload)
        document = open_pdf(data)

        try:
            logger.info(f"Redacting {filename} ({document.page_count} pages, {len(data)} bytes)")

            extraction, font = await asyncio.gather(
                self.extractor.extract(data),
                self.font_resolver.resolve(),
            )
            font = ensure_usable_font(font)

            plan = compute_mask_plan(
                page_sizes(document),
                extraction.mask_anchor,
                default_ratio=self.policy.default_ratio,
                margin=self.policy.mask_margin,
            )
            logger.info(
                f"Mask plan for {filename}: {len(plan)} instructions, "
                f"anchor page {plan.page_index}, ratio {plan.ratio:.2f}"
            )

            rendered = self.renderer.render(document, extraction, font, plan)
        finally:
            document.close()

        file_url, object_name = await self.publisher.publish(filename, rendered)
        logger.info(f"Published {filename} as {object_name}")

        return RedactionOutcome(
            file_url=file_url,
            object_name=object_name,
            metadata=extraction,
            font_kind=font.kind,
            plan=plan,
        )
