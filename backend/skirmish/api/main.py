"""
Grid Skirmish HTTP service: game sessions under /api/games, one-off searches
and AI matches under /api/ai. Errors come back as {"error", "status_code"}.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from .. import __version__
from .routes import games, ai

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Grid Skirmish API %s up, search limit %d nodes",
                __version__, ai.MAX_SEARCH_TREE)
    yield
    logger.info("Grid Skirmish API down, %d games in memory", len(games.games_store))


app = FastAPI(
    title="Grid Skirmish API",
    description="Footmen hunt archers on a grid; both sides can be played by "
                "a MinMax agent with Alpha-Beta pruning.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(games.router, prefix="/api/games", tags=["Games"])
app.include_router(ai.router, prefix="/api/ai", tags=["AI"])


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to Grid Skirmish API",
        "version": __version__,
        "documentation": "/api/docs",
        "endpoints": {
            "games": "/api/games",
            "ai": "/api/ai",
        },
        "search_limits": {
            "max_tree_nodes": ai.MAX_SEARCH_TREE,
            "max_snapshot_units": ai.MAX_SNAPSHOT_UNITS,
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "service": "grid-skirmish-api",
        "version": __version__,
        "games": len(games.games_store)
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "status_code": 500}
    )
