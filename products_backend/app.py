"""
FastAPI application entry point for the products backend.

Run with:
    uvicorn products_backend.app:app
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from products_backend.config import Settings, get_settings
from products_backend.dependencies import Backends, build_backends
from products_backend.errors import ApiError, ValidationError
from products_backend.routes import router


def _error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error.message})


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _error_response(exc)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(ValidationError(_describe_validation_error(exc)))


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems: list[str] = []
    for error in exc.errors():
        parts = [part for part in error.get("loc", ()) if part != "body"]
        if error.get("type") == "json_invalid":
            # The location of a decode error is a character offset.
            parts = [part for part in parts if not isinstance(part, int)]
        # Report the request field only, not the union member that rejected it.
        location = str(parts[0]) if parts else ""
        message = error.get("msg", "invalid value")
        problem = f"{location}: {message}" if location else message
        if problem not in problems:
            problems.append(problem)
    return "; ".join(problems) or "Invalid request"


def create_app(
    settings: Settings | None = None, backends: Backends | None = None
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Products Backend (FastAPI)", version="0.1.0")
    app.state.backends = backends or build_backends(settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
