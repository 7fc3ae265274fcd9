"""Google Gemini REST client over httpx.

Only `generateContent` with inline document parts is needed here, so the
REST API is called directly instead of through an SDK.
"""

import base64
import logging

import httpx

from app.config import settings
from app.exceptions import ProviderError

logger = logging.getLogger(__name__)


def _extract_text(data: dict) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback", {})
        raise ProviderError(f"Gemini returned no candidates (feedback: {feedback})")
    parts = candidates[0].get("content", {}).get("parts", [])
    text = "".join(part.get("text", "") for part in parts)
    if not text.strip():
        raise ProviderError("Gemini returned an empty response")
    return text


class GeminiClient:
    """Thin wrapper around the Gemini `generateContent` endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
    ):
        self.http_client = http_client
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.temperature = temperature if temperature is not None else settings.gemini_temperature
        self.timeout = timeout if timeout is not None else settings.gemini_timeout_seconds

    def _endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    async def generate_content(
        self,
        model: str,
        prompt: str,
        document: bytes,
        mime_type: str = "application/pdf",
    ) -> str:
        """
        Send a prompt plus an inline document to one model.

        Args:
            model: Gemini model identifier
            prompt: Instruction text
            document: Raw document bytes
            mime_type: MIME type declared for the document

        Returns:
            Raw response text

        Raises:
            ProviderError: On transport errors, non-200 status or empty output
        """
        if not self.api_key:
            raise ProviderError("GEMINI_API_KEY is not configured")

        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": prompt},
                        {
                            "inlineData": {
                                "mimeType": mime_type,
                                "data": base64.b64encode(document).decode("utf-8"),
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {"temperature": self.temperature},
        }

        try:
            resp = await self.http_client.post(
                self._endpoint(model),
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini request failed for {model}: {e}") from e

        if resp.status_code != 200:
            raise ProviderError(
                f"Gemini API failed with status {resp.status_code}: {resp.text[:500]}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"Gemini returned a non-JSON body for {model}") from e

        return _extract_text(data)
