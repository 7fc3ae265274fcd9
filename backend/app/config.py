from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Gemini
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_models: list[str] = [
        "gemini-1.5-flash",
        "gemini-1.5-flash-latest",
        "gemini-1.5-flash-001",
        "gemini-1.5-pro",
        "gemini-pro",
    ]
    gemini_temperature: float = 0.1  # Low temperature keeps the JSON shape stable
    gemini_timeout_seconds: float = 60.0

    # Claude is appended as the last fallback when a key is configured
    anthropic_api_key: str = ""
    claude_fallback_model: str = "claude-haiku-4-5-20251001"

    # Font used for the redaction summary
    font_url: str = (
        "https://raw.githubusercontent.com/google/fonts/main/ofl/notosanskr/NotoSansKR-Bold.otf"
    )
    font_timeout_seconds: float = 20.0

    # Supabase storage + queue
    supabase_url: str = ""
    supabase_key: str = ""
    storage_bucket: str = "legal-docs"
    queue_table: str = "document_queue"

    @field_validator("supabase_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Public URLs are built by appending paths to the project URL."""
        return v.rstrip("/") if isinstance(v, str) else v

    # Redaction policy
    anchor_mode: str = "single_page_ratio"  # or "body_start"
    mask_margin: float = 0.05
    anonymized_rewriting: bool = False  # Rewrite parties and add order/claim summaries
    anonymize_counsel: bool = False  # Counsel names are kept verbatim unless enabled

    # HTTP
    cors_origins: list[str] = ["http://localhost:3000"]
    max_request_size_bytes: int = 10 * 1024 * 1024  # 10MB

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
