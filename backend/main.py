import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware import RequestSizeLimitMiddleware
from app.routes import health, redact

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


app = FastAPI(
    title="Judgment Redactor API",
    description="Masks identifying headers on court judgments and queues them for review",
    version="0.1.0",
)

# Request size limit middleware (base64 PDFs can be large)
app.add_middleware(RequestSizeLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(redact.router, prefix="/api", tags=["redaction"])
app.include_router(health.router, prefix="/api/health", tags=["health"])
