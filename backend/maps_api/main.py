import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from maps_api.core.config import settings
from maps_api.core.errors import ConfigurationError
from maps_api.core.logger import logs, mask_secret
from maps_api.core.security import (
    log_requests_middleware,
    security_headers_middleware,
    setup_error_handlers,
)
from maps_api.repos.cache_repo import InMemoryCache
from maps_api.routes.maps_route import router as maps_router
from maps_api.routes.system_route import router as system_router
from maps_api.services.Places_service import PlacesService


def build_places_service() -> PlacesService:
    """Constructs the single service instance from settings. Fails without a key."""
    logs.log(logging.INFO, "Environment check", {
        "google_maps_api_key": mask_secret(settings.GOOGLE_MAPS_API_KEY),
        "port": settings.PORT,
        "environment": settings.ENVIRONMENT,
    })
    if not settings.GOOGLE_MAPS_API_KEY:
        raise ConfigurationError("GOOGLE_MAPS_API_KEY is not set in environment variables")

    return PlacesService(
        api_key=settings.GOOGLE_MAPS_API_KEY,
        cache=InMemoryCache(ttl=settings.CACHE_TTL_SECONDS),
        base_url=settings.GOOGLE_MAPS_BASE_URL,
        search_timeout=settings.SEARCH_TIMEOUT,
        detail_timeout=settings.DETAIL_TIMEOUT,
        max_results=settings.MAX_SEARCH_RESULTS,
    )


async def _check_api_key_on_startup(service: PlacesService):
    if await service.test_api_key():
        logs.log(logging.INFO, "Google Maps API key is valid and working")
    else:
        logs.log(
            logging.WARNING,
            "Google Maps API key is invalid or not working. Check that the Places and "
            "Maps Static APIs are enabled and billing is set up."
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    key_check = None
    if getattr(app.state, "places_service", None) is None:
        app.state.places_service = build_places_service()
        key_check = asyncio.create_task(_check_api_key_on_startup(app.state.places_service))

    logs.log(logging.INFO, f"LLM Maps API running on port {settings.PORT}")
    yield

    if key_check is not None and not key_check.done():
        key_check.cancel()


def create_app(places_service: Optional[PlacesService] = None) -> FastAPI:
    app = FastAPI(title="LLM Maps API", version="1.0.0", lifespan=lifespan)
    app.state.places_service = places_service

    # Completely open CORS for the embeddable widget
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(log_requests_middleware)
    setup_error_handlers(app)

    app.include_router(system_router)
    app.include_router(maps_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("maps_api.main:app", host=settings.HOST, port=settings.PORT)
