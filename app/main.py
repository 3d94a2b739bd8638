"""Entry point for the FastAPI-powered taste profiler."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import settings
from .models import TasteRequest
from .services.inference import InferenceClient
from .services.profile_service import ProfileService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    inference_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.openrouter_api_url),
            timeout=httpx.Timeout(settings.inference_timeout_seconds, connect=10.0),
        )
    )
    if not settings.openrouter_api_key:
        logger.warning("OPENROUTER_API_KEY is not set; profiles will use fallbacks")

    client = InferenceClient(settings, inference_http_client)
    fastapi_app.state.profile_service = ProfileService.from_client(settings, client)

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Personality profiles derived from entertainment taste",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_profile_service(app: FastAPI) -> ProfileService:
    service = getattr(app.state, "profile_service", None)
    if not isinstance(service, ProfileService):
        raise RuntimeError("Profile service not initialised")
    return service


def register_routes(fastapi_app: FastAPI) -> None:
    async def _parse_taste(request: Request) -> TasteRequest:
        try:
            payload: Any = await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")
        try:
            return TasteRequest.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_url=False)
            ) from exc

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.post("/api/profile")
    async def profile_endpoint(request: Request) -> JSONResponse:
        service = get_profile_service(fastapi_app)
        taste = await _parse_taste(request)
        profile = await service.resolve_profile(taste.movies, taste.music, taste.shows)
        return JSONResponse(profile.to_payload())

    @fastapi_app.post("/api/profile/embedding-text")
    async def embedding_text_endpoint(request: Request) -> dict[str, str]:
        service = get_profile_service(fastapi_app)
        taste = await _parse_taste(request)
        text = await service.build_embedding_text(
            taste.movies, taste.music, taste.shows
        )
        return {"text": text}


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
