"""PushTrack Service - FastAPI server for pushup counting, yoga pose scoring and leaderboards."""

import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from pushtrack.shared.auth.database import init_db
from pushtrack.shared.auth.routes import router as auth_router
from pushtrack.shared.errors import FrameSourceError, PersistenceError, PoseScorerError
from pushtrack.shared.leaderboard.routes import router as leaderboard_router
from pushtrack.pushups.rep_counter.errors import InvalidConfiguration
from pushtrack.pushups.routes import load_default_thresholds, router as pushups_router
from pushtrack.yoga.routes import router as yoga_router

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", ",".join(DEFAULT_CORS_ORIGINS)).split(",")
    if origin.strip()
]

app = FastAPI(
    title="PushTrack Service",
    description="Pushup rep counting, yoga pose feedback and workout leaderboards",
    version="0.1.0"
)


# Validate configuration and initialize database on startup
@app.on_event("startup")
async def startup_event():
    try:
        load_default_thresholds()
    except InvalidConfiguration as e:
        logging.error(f"Invalid pushup threshold configuration: {str(e)}")
        raise
    init_db()
    logging.info("Database initialization completed on startup")


app.include_router(auth_router)
app.include_router(pushups_router)
app.include_router(leaderboard_router)
app.include_router(yoga_router)

# CORS configuration - must be added before exception handlers
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


def _cors_headers(request: Request) -> dict:
    """CORS headers for error responses, which bypass the middleware."""
    headers = {}
    origin = request.headers.get("origin")
    if origin in CORS_ORIGINS:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
        headers["Access-Control-Allow-Methods"] = "*"
        headers["Access-Control-Allow-Headers"] = "*"
    return headers


def _error_content(detail) -> dict:
    # Handle both string and dict detail formats
    if isinstance(detail, dict):
        return detail
    if isinstance(detail, str):
        return {"detail": detail}
    return {"detail": str(detail)}


# Global exception handlers to ensure CORS headers are always added
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.detail),
        headers={**(exc.headers or {}), **_cors_headers(request)}
    )


@app.exception_handler(StarletteHTTPException)
async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.detail),
        headers=_cors_headers(request)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
        headers=_cors_headers(request)
    )


@app.exception_handler(FrameSourceError)
async def frame_source_exception_handler(request: Request, exc: FrameSourceError):
    logging.error(f"Frame source error: {str(exc)}")
    return JSONResponse(
        status_code=502,
        content={"error": "frame_source_unavailable", "detail": str(exc)},
        headers=_cors_headers(request)
    )


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError):
    logging.error(f"Persistence error: {str(exc)}")
    return JSONResponse(
        status_code=503,
        content={"error": "storage_unavailable", "detail": str(exc)},
        headers=_cors_headers(request)
    )


@app.exception_handler(PoseScorerError)
async def pose_scorer_exception_handler(request: Request, exc: PoseScorerError):
    logging.error(f"Pose scoring error: {str(exc)} (upstream status {exc.status_code})")
    return JSONResponse(
        status_code=502,
        content={"error": "pose_scoring_failed", "detail": str(exc)},
        headers=_cors_headers(request)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logging.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
        headers=_cors_headers(request)
    )


@app.get("/")
async def root():
    return {"message": "PushTrack Service API is running", "status": "ok"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
