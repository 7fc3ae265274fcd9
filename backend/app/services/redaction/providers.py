"""AI providers that can read a judgment PDF and answer a prompt.

Every provider exposes the same capability so the extractor can try them
in order without knowing which backend it is talking to.
"""

import base64
import logging
from typing import Protocol, cast

import anthropic
from anthropic import AsyncAnthropic
from anthropic.types import DocumentBlockParam, TextBlockParam
from anthropic.types import TextBlock as AnthropicTextBlock

from app.exceptions import ProviderError
from app.services.gemini import GeminiClient

logger = logging.getLogger(__name__)


class MetadataProvider(Protocol):
    """One model that can answer a prompt about a document."""

    name: str

    async def complete(self, prompt: str, document: bytes, mime_type: str) -> str: ...


class GeminiProvider:
    """A single Gemini model."""

    def __init__(self, client: GeminiClient, model: str):
        self.client = client
        self.model = model
        self.name = f"gemini:{model}"

    async def complete(self, prompt: str, document: bytes, mime_type: str) -> str:
        return await self.client.generate_content(
            model=self.model,
            prompt=prompt,
            document=document,
            mime_type=mime_type,
        )


class ClaudeProvider:
    """A Claude model reading the PDF as a document block."""

    def __init__(self, client: AsyncAnthropic, model: str, max_tokens: int = 1500):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.name = f"claude:{model}"

    async def complete(self, prompt: str, document: bytes, mime_type: str) -> str:
        document_block: DocumentBlockParam = {
            "type": "document",
            "source": {
                "type": "base64",
                "media_type": mime_type,  # type: ignore[typeddict-item]
                "data": base64.b64encode(document).decode("utf-8"),
            },
        }
        text_block: TextBlockParam = {"type": "text", "text": prompt}

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [document_block, text_block],
                    }
                ],
            )
        except anthropic.APIError as e:
            raise ProviderError(f"Claude request failed for {self.model}: {e}") from e

        if not response.content:
            raise ProviderError(f"Claude returned no content for {self.model}")
        response_block = cast(AnthropicTextBlock, response.content[0])
        return response_block.text
