"""Fetch the summary typeface, falling back to a built-in face on failure."""

import logging

import httpx

from app.config import settings
from app.enums import FontKind
from app.services.redaction.models import FontAsset

logger = logging.getLogger(__name__)


class FontResolver:
    """Download an embeddable font. Never raises."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str | None = None,
        timeout: float | None = None,
    ):
        self.http_client = http_client
        self.url = url or settings.font_url
        self.timeout = timeout if timeout is not None else settings.font_timeout_seconds

    async def resolve(self) -> FontAsset:
        try:
            response = await self.http_client.get(
                self.url, timeout=self.timeout, follow_redirects=True
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Font download failed ({e.response.status_code}), using fallback font",
                extra={"font_url": self.url, "status_code": e.response.status_code},
            )
            return FontAsset.fallback()
        except httpx.HTTPError as e:
            logger.warning(
                f"Font download failed ({e}), using fallback font",
                extra={"font_url": self.url},
            )
            return FontAsset.fallback()

        if not response.content:
            logger.warning("Font download returned an empty body, using fallback font")
            return FontAsset.fallback()

        logger.info(f"Downloaded font ({len(response.content)} bytes)")
        return FontAsset(data=response.content, kind=FontKind.EMBEDDED)
