"""
HTTP API adapter for the prompt manager.

Architectural role:
- Expose JSON endpoints for categories, phrases, saved prompts, history,
  settings, backup, file export, join/split preview, and the LLM proxy.
- Enforce adapter-level input validation through pydantic request schemas.
- Delegate persistence to `prompt_manager.storage` and text work to
  `prompt_manager.prompting.join_engine`.

Request lifecycle:
1. Parse and validate the JSON body against the route's schema.
2. Resolve an omitted `join_mode` from stored settings.
3. Call the storage/export/LLM function with explicit arguments.
4. Return the resulting record(s) as JSON.

Error handling strategy:
- `HttpError` -> `{"error": message}` with its status code.
- Request validation failures -> HTTP 400 with joined messages.
- Unexpected exceptions are logged and returned as HTTP 500.

Side effects:
- Opens the SQLite database lazily on first request.
- Emits request debug logs only when `DEBUG == "true"`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from prompt_manager.api.routes import backup, builder, categories, history, lm, phrases, prompts, settings
from prompt_manager.config import DB_PATH, DEBUG
from prompt_manager.core.errors import HttpError
from prompt_manager.storage.database import Database


logger = logging.getLogger(__name__)


# ============================================================
# Error Rendering
# ============================================================

async def handle_http_error(request: Request, exc: HttpError):
    if DEBUG:
        logger.debug("HttpError %s on %s: %s", exc.status_code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Render schema failures as a single 400 message, like other client errors."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": ", ".join(messages)})


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# ============================================================
# App Factory
# ============================================================

def create_app(db_path: str | None = None) -> FastAPI:
    """
    Build the FastAPI application bound to one SQLite database.

    Args:
        db_path: Database file path or `":memory:"`; defaults to `DB_PATH`.

    Returns:
        Configured `FastAPI` instance with `app.state.db` set.
    """
    database = Database(db_path or DB_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting prompt manager API (db=%s)", database.path)
        yield
        database.close()
        logger.info("Prompt manager API stopped")

    app = FastAPI(title="Prompt Manager", lifespan=lifespan)
    app.state.db = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HttpError, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/api/health")
    def health():
        return {"ok": True}

    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(phrases.router, prefix="/api/phrases", tags=["phrases"])
    app.include_router(prompts.router, prefix="/api/prompts", tags=["prompts"])
    app.include_router(history.router, prefix="/api/history", tags=["history"])
    app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
    app.include_router(backup.router, prefix="/api/backup", tags=["backup"])
    app.include_router(lm.router, prefix="/api/lm", tags=["lm"])
    app.include_router(builder.router, prefix="/api", tags=["builder"])

    if DEBUG:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            logger.debug("%s %s -> %s", request.method, request.url.path, response.status_code)
            return response

    return app


app = create_app()
