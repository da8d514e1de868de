"""FastAPI surface for the chat handler."""

import logging
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings
from .generation import GeminiClient
from .handler import METHOD_NOT_ALLOWED_MESSAGE, ChatHandler
from .logging import JSONLLogger
from .memory import FileMemoryBackend, MemoryStore

GENERATE_PATH = "/api/generate"
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


logger = logging.getLogger(__name__)


def build_handler(settings: Settings) -> ChatHandler:
    """Wire storage, generation and logging from settings."""
    events = JSONLLogger(log_dir=settings.log_dir)
    store = MemoryStore(
        FileMemoryBackend(settings.memory_dir),
        persona=settings.persona,
        max_turns=settings.max_turns,
        pin_system=settings.pin_system,
        events=events,
    )
    generator = GeminiClient(
        settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_api_url,
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
    )
    return ChatHandler(
        store,
        generator,
        serialize_users=settings.serialize_users,
        events=events,
    )


async def _read_json(request: Request) -> Any:
    """Decode the request body, or None if it is empty or not JSON."""
    try:
        return await request.json()
    except ValueError:
        return None


def create_app(
    settings: Settings | None = None,
    handler: ChatHandler | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Settings to build the handler from; read from the
            environment when omitted.
        handler: Prebuilt handler. Takes precedence over settings.
    """
    if handler is None:
        handler = build_handler(settings or Settings.from_env())

    app = FastAPI(title="Max CodeGen AI", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.state.handler = handler

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = METHOD_NOT_ALLOWED_MESSAGE if exc.status_code == 405 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=exc.headers,
        )

    @app.api_route(GENERATE_PATH, methods=ROUTE_METHODS)
    async def generate(request: Request) -> Response:
        body = await _read_json(request) if request.method == "POST" else None
        result = await handler.handle(request.method, body)
        if result.body is None:
            return Response(status_code=result.status_code, media_type="application/json")
        return JSONResponse(status_code=result.status_code, content=result.body)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Serving %s", GENERATE_PATH)
    return app
