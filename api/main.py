"""
api/main.py — punkt wejścia FastAPI.

Aplikacja jest bezstanowa: każde żądanie niesie własne pliki (FileNode),
z których budowany jest osobny InMemoryContext. W app.state są tylko
ustawienia.

Mapowanie błędów:
  ReflectionError                 → 422 (nieznana klasa/funkcja, nierozwiązywalna referencja)
  ArithmeticError, TypeError      → 422 (błąd semantyki PHP, np. dzielenie przez zero)
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routers import reflect
from api.schemas import HealthResponse
from config import Settings
from contracts import ReflectionError

logger = logging.getLogger("static_reflection.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("StaticReflection API ready (PHP %s).", settings.php_version)
    yield
    logger.info("Shutting down.")


def create_app() -> FastAPI:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(reflect.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(
            status="ok",
            version=settings.app_version,
            php_version=settings.php_version,
        )

    # Globalne handlery błędów
    @app.exception_handler(ReflectionError)
    async def reflection_error_handler(request: Request, exc: ReflectionError):
        logger.info("Reflection failed for %s: %s", request.url.path, exc)
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ArithmeticError)
    async def arithmetic_error_handler(request: Request, exc: ArithmeticError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(TypeError)
    async def type_error_handler(request: Request, exc: TypeError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


app = create_app()
