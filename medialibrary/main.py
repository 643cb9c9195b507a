"""Main FastAPI application"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import admin, games, hltb, movies, next_up, series, sort_order, system, tmdb
from .config import settings
from .database import engine, init_db
from .services.hltb_service import HLTBService
from .services.log_service import log_service
from .services.tmdb_service import TMDBService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    await init_db()
    app.state.hltb = HLTBService()
    app.state.tmdb = TMDBService(settings.TMDB_API_KEY)
    if not app.state.tmdb.configured:
        log_service.info("TMDB_API_KEY not set, movie and series metadata disabled")
    log_service.info(f"Media library {__version__} started")
    try:
        yield
    except asyncio.CancelledError:
        pass  # Suppress CancelledError during shutdown
    finally:
        # Shutdown - cleanup runs in finally block
        await app.state.hltb.close()
        await app.state.tmdb.close()
        await engine.dispose()


app = FastAPI(
    title="Media Library",
    description="Personal tracker for games, movies and series with HLTB and TMDB metadata",
    version=__version__,
    lifespan=lifespan,
)

# If ALLOWED_ORIGINS is not set, default to ["*"] without credentials
allowed_origins = settings.allowed_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and out-of-range values are client errors (400)"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages)})


# Include API routers
app.include_router(games.router)
app.include_router(movies.router)
app.include_router(series.router)
app.include_router(hltb.router)
app.include_router(tmdb.router)
app.include_router(sort_order.router)
app.include_router(next_up.router)
app.include_router(admin.router)
app.include_router(system.router)


@app.get("/api")
async def api_root():
    """API root"""
    return {
        "name": "Media Library API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Built frontend, mounted last so it never shadows /api
if settings.STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=str(settings.STATIC_DIR), html=True), name="static")
