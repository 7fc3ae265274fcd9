"""Shared fixtures for redaction tests."""

import base64
import os
from collections.abc import Callable

import fitz  # PyMuPDF
import pytest

# Override settings before importing app modules
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["SUPABASE_URL"] = "https://project.supabase.co"
os.environ["SUPABASE_KEY"] = "test-supabase-key"
os.environ["FONT_URL"] = "https://fonts.example.com/NotoSansKR-Bold.otf"

from app.services.redaction.models import FontAsset  # noqa: E402

A4 = (595.0, 842.0)


def build_pdf(page_count: int = 1, size: tuple[float, float] = A4, text: str = "") -> bytes:
    """Create an in-memory PDF with the given number of pages."""
    doc = fitz.open()
    for i in range(page_count):
        page = doc.new_page(width=size[0], height=size[1])
        page.insert_text((72, 72), text or f"Page {i + 1} plaintiff Hong Gildong")
    data = doc.tobytes()
    doc.close()
    return data


class FakeProvider:
    """MetadataProvider that returns a canned response or raises."""

    def __init__(self, name: str, response: str | None = None, error: Exception | None = None):
        self.name = name
        self.response = response
        self.error = error
        self.calls = 0

    async def complete(self, prompt: str, document: bytes, mime_type: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.response or ""


class FakeFontResolver:
    def __init__(self, font: FontAsset | None = None):
        self.font = font or FontAsset.fallback()
        self.calls = 0

    async def resolve(self) -> FontAsset:
        self.calls += 1
        return self.font


class FakePublisher:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.published: list[tuple[str, bytes]] = []

    async def publish(self, filename: str, data: bytes) -> tuple[str, str]:
        if self.error is not None:
            raise self.error
        self.published.append((filename, data))
        object_name = f"SECURE_1_{filename}"
        return f"https://storage.test/{object_name}", object_name


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture
def pdf_base64() -> str:
    return base64.b64encode(build_pdf()).decode("ascii")


@pytest.fixture
def fallback_font() -> FontAsset:
    return FontAsset.fallback()


@pytest.fixture
def fake_provider() -> type[FakeProvider]:
    return FakeProvider


@pytest.fixture
def fake_font_resolver() -> type[FakeFontResolver]:
    return FakeFontResolver


@pytest.fixture
def fake_publisher() -> type[FakePublisher]:
    return FakePublisher
