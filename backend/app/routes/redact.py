import logging
from collections.abc import AsyncGenerator

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from app.exceptions import DocumentInputError, PublishError
from app.services.anthropic import close_client, create_client
from app.services.gemini import GeminiClient
from app.services.redaction import (
    ClaudeProvider,
    FontResolver,
    GeminiProvider,
    MetadataExtractor,
    MetadataProvider,
    RedactionPipeline,
    RedactionPolicy,
    RedactionRenderer,
)
from app.services.storage import SupabasePublisher, create_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter()


class RedactRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_base64: str | None = Field(default=None, alias="fileBase64")
    file_name: str = Field(default="document.pdf", alias="fileName")


class RedactResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    file_url: str = Field(alias="fileUrl")
    extracted_meta: dict = Field(alias="extractedMeta")
    font_kind: str = Field(alias="fontKind")


class LazyPublisher:
    """Creates the Supabase client only once there is something to publish."""

    async def publish(self, filename: str, data: bytes) -> tuple[str, str]:
        publisher = SupabasePublisher(create_supabase_client())
        return await publisher.publish(filename, data)


async def get_pipeline() -> AsyncGenerator[RedactionPipeline, None]:
    """Build the collaborators for one job and release them afterwards."""
    policy = RedactionPolicy.from_settings()

    async with httpx.AsyncClient() as http_client:
        gemini = GeminiClient(http_client)
        providers: list[MetadataProvider] = [
            GeminiProvider(gemini, model) for model in settings.gemini_models
        ]
        claude = create_client()
        if claude is not None:
            providers.append(ClaudeProvider(claude, settings.claude_fallback_model))

        try:
            yield RedactionPipeline(
                extractor=MetadataExtractor(providers, policy),
                font_resolver=FontResolver(http_client),
                renderer=RedactionRenderer(policy),
                publisher=LazyPublisher(),
                policy=policy,
            )
        finally:
            await close_client(claude)


@router.post("/redact-document", response_model=RedactResponse, response_model_by_alias=True)
async def redact_document(
    request: RedactRequest,
    pipeline: RedactionPipeline = Depends(get_pipeline),
):
    """Redact a judgment PDF and queue it for review."""
    try:
        outcome = await pipeline.run(request.file_base64, request.file_name)
    except DocumentInputError as e:
        logger.warning(f"Rejected upload {request.file_name}: {e}")
        return JSONResponse(status_code=400, content={"error": str(e)})
    except PublishError as e:
        logger.error(f"Publishing {request.file_name} failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    except Exception as e:
        logger.exception(f"Redaction of {request.file_name} failed")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return RedactResponse(
        success=True,
        message="Redaction complete",
        file_url=outcome.file_url,
        extracted_meta=outcome.metadata.to_response(outcome.plan),
        font_kind=outcome.font_kind.value,
    )
