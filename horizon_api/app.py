"""FastAPI application for the horizon graph backend."""

import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from horizon.errors import HorizonError
from horizon_api import config, db
from horizon_api.entity_routes import router as entity_router
from horizon_api.logging_setup import configure_logging
from horizon_api.node_routes import router as node_router
from horizon_api.workspace_routes import router as workspace_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create tables on startup."""
    configure_logging(config.LOG_LEVEL)
    db.init_all()
    logger.info("horizon api started, database at %s", db.DB_PATH)
    yield


app = FastAPI(
    title="Horizon API",
    description="Node graph backend for the pipeline builder",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HorizonError)
async def horizon_error_handler(request: Request, exc: HorizonError) -> JSONResponse:
    """Translate domain errors into the same shape HTTPException produces."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(sqlite3.Error)
async def store_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    """The transaction was rolled back; the next repair pass converges."""
    logger.exception("%s %s failed in the store", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


# include routes
app.include_router(workspace_router, prefix="/api")
app.include_router(node_router, prefix="/api")
app.include_router(entity_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "0.1.0",
        "db": str(db.DB_PATH),
        "endpoints": {
            "horizons": "/api/horizons",
            "nodes": "/api/nodes",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
