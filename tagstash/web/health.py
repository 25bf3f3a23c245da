"""Health check endpoints for tagstash.

Provides health status, metrics, and non-secret configuration for monitoring
and operational visibility.
"""

import logging
import os
import platform
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest

from ..ingest.caption_cache import CaptionCache
from ..metrics.registry import REGISTRY
from ..runtime.config import AppConfig
from ..storage.local_store import LocalStore

logger = logging.getLogger("tagstash.health")

VERSION = "0.1.0"


def create_app(
    config: AppConfig,
    store: LocalStore,
    captions: Optional[CaptionCache] = None,
) -> FastAPI:
    """Build the health API bound to the running service's components."""
    app = FastAPI(title="Tagstash Health API", version=VERSION)

    @app.get("/healthz")
    async def health_check() -> Dict[str, Any]:
        """Basic health check endpoint."""
        health_status: Dict[str, Any] = {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "environment": {
                "python_version": platform.python_version(),
                "platform": os.name,
            },
        }

        try:
            store.check_writable()
            health_status["storage"] = {"status": "healthy", "target_dir": str(store.root)}
        except OSError as e:
            health_status["storage"] = {"status": "unhealthy", "error": str(e)}
            health_status["status"] = "degraded"

        if captions is not None:
            health_status["caption_cache"] = {
                "entries": len(captions),
                "capacity": captions.capacity,
            }
        return health_status

    @app.get("/metrics")
    async def metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        try:
            metrics_data = generate_latest(REGISTRY)
            return PlainTextResponse(content=metrics_data.decode("utf-8"))
        except Exception as e:
            logger.exception("Metrics generation failed")
            raise HTTPException(status_code=500, detail=f"Metrics generation failed: {str(e)}")

    @app.get("/status")
    async def detailed_status() -> Dict[str, Any]:
        """Detailed system status including configuration and health."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "system": {
                "config": {
                    "target_dir": config.target_dir,
                    "image_tags": list(config.image_tags),
                    "sticker_tags": list(config.sticker_tags),
                    "allowed_users": len(config.allowed_usernames),
                    "caption_cache_size": config.caption_cache_size,
                },
            },
            "health": await health_check(),
        }

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "service": "Tagstash Health API",
            "version": VERSION,
            "endpoints": {
                "health": "/healthz",
                "metrics": "/metrics",
                "status": "/status",
            },
        }

    return app
