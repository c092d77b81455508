"""FastAPI application — Proposal Drafter API.

Relays proposal generation, revision and image-prompt requests from the
browser form to the configured LLM provider and streams the text back.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import __version__
from src.config.settings import get_settings

from .routers import proposals

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Proposal Drafter API",
    version=__version__,
    description="Streams LLM-generated proposal drafts from uploaded RFP documents",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(proposals.router, prefix="/api", tags=["proposals"])

logger.info(
    "Proposal Drafter API %s: provider=%s model=%s",
    __version__, settings.llm_provider, settings.model_id,
)


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "version": __version__,
        "provider": settings.llm_provider,
        "model": settings.model_id,
    }


@app.get("/")
async def root():
    return {"message": "Proposal Drafter API", "docs": "/docs"}


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
