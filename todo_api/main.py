import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api.config import Settings, settings as default_settings
from todo_api.database import Database, StartupError, provision
from todo_api.routers.todos import router as todos_router

logger = logging.getLogger(__name__)

PROCESS_STARTED = time.monotonic()


def create_app(database: Database | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Imported by gunicorn/uvicorn directly: provision here and refuse to boot on failure
        owned = None
        if getattr(app.state, "database", None) is None:
            result = await provision(settings)
            if not result.ok:
                raise StartupError(f"Database provisioning failed: {result.error}") from result.error
            owned = app.state.database = result.database

        yield

        if owned is not None:
            await owned.dispose()

    app = FastAPI(
        lifespan=lifespan,
        title="Todo API",
        description="Per-user todo list with soft delete",
        version="1.0.0",
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex="https?://.*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Every error leaves as a single-field JSON object
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        loc = [str(part) for part in (errors[0].get("loc", ()) if errors else ()) if not isinstance(part, int)]
        field = loc[-1] if loc else "request"
        return JSONResponse(status_code=400, content={"error": f"{field} is invalid"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    app.include_router(todos_router)

    @app.get("/")
    def root():
        return {"status": "ok", "uptime": time.monotonic() - PROCESS_STARTED}

    return app


app = create_app()
