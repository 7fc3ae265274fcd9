"""Anthropic Claude SDK wrapper service.

Clients are created per redaction job and closed when the job ends.
"""

from anthropic import AsyncAnthropic

from app.config import settings


def create_client(api_key: str | None = None) -> AsyncAnthropic | None:
    """
    Create an AsyncAnthropic client, or None when no key is configured.

    Args:
        api_key: Overrides settings.anthropic_api_key.

    Returns:
        A new client owned by the caller.
    """
    key = api_key if api_key is not None else settings.anthropic_api_key
    if not key:
        return None
    return AsyncAnthropic(api_key=key)


async def close_client(client: AsyncAnthropic | None) -> None:
    """Close a client created by create_client."""
    if client is not None:
        await client.close()
