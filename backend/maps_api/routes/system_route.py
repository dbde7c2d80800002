from datetime import datetime, timezone

from fastapi import APIRouter, Request

from maps_api.core.config import settings
from maps_api.core.logger import mask_secret

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# --- Root Endpoint ---
@router.get("/")
async def root():
    return {
        "success": True,
        "message": "Welcome to LLM Maps API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "search": "/api/maps/search",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }


# --- Health Check ---
@router.get("/health")
async def health_check():
    return {
        "success": True,
        "status": "OK",
        "service": "LLM Maps API",
        "timestamp": _now(),
        "port": settings.PORT,
        "cors": "COMPLETELY OPEN - ALL ORIGINS ALLOWED",
        "api_key_loaded": bool(settings.GOOGLE_MAPS_API_KEY)
    }


@router.get("/api/cors-test")
async def cors_test(request: Request):
    return {
        "success": True,
        "message": "CORS IS WORKING!",
        "origin": request.headers.get("origin"),
        "timestamp": _now(),
        "cors": "COMPLETELY OPEN",
        "api_key_loaded": bool(settings.GOOGLE_MAPS_API_KEY)
    }


@router.get("/api/debug-env")
async def debug_env():
    key = settings.GOOGLE_MAPS_API_KEY
    return {
        "success": True,
        "google_maps_api_key": {
            "loaded": bool(key),
            "length": len(key),
            "prefix": mask_secret(key)
        },
        "port": settings.PORT,
        "environment": settings.ENVIRONMENT,
        "timestamp": _now()
    }
