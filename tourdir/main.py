import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tourdir.api.routers import (
    bookings,
    businesses,
    categories,
    claims,
    days,
    items,
    itineraries,
    system,
    users,
)
from tourdir.core.config import Settings
from tourdir.core.database import Base, build_engine, build_session_factory
from tourdir.core.errors import DirectoryError, ValidationFailed

logger = logging.getLogger("tourdir")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level)
    logger.setLevel(settings.log_level)
    if not settings.log_file:
        return
    # create_app may run more than once per process (tests)
    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return
    handler = RotatingFileHandler(
        settings.log_file, maxBytes=5 * 1024 * 1024, backupCount=3
    )
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _field_errors(errors) -> list:
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({"field": ".".join(loc), "message": error.get("msg", "")})
    return fields


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized.")
        yield
        engine.dispose()

    app = FastAPI(title="Tourism Directory API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        content = {"message": exc.message}
        if isinstance(exc, ValidationFailed):
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", "errors": _field_errors(exc.errors())},
        )

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", "errors": _field_errors(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    app.include_router(categories.router)
    app.include_router(businesses.router)
    app.include_router(users.router)
    app.include_router(claims.router)
    app.include_router(itineraries.router)
    app.include_router(days.router)
    app.include_router(items.router)
    app.include_router(bookings.router)
    app.include_router(system.router)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
