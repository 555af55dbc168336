"""FastAPI app, CORS, store error handling, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

# Configure logging in the worker process (uvicorn --reload spawns a fresh one)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from albumlog.api.state import AppState, get_state
from albumlog.config import WEB_ORIGIN, ensure_data_dir

# Import routes after state to avoid circular imports
from albumlog.api.routes import albums, metadata, notes, ratings, users

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)

_state = get_state()


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    _state.init_db()
    logger.info("Store ready at %s", _state.database_url)

    yield

    _state.dispose()


app = FastAPI(
    title="Album Log API",
    description="Shared album catalog with ratings, notes and auto-filled release metadata",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[WEB_ORIGIN] if WEB_ORIGIN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "STORE_ERROR", "message": str(exc)})


@app.get("/api/health")
def health():
    return {"ok": True}


app.include_router(albums.router, prefix="/api/albums", tags=["albums"])
app.include_router(metadata.router, prefix="/api/metadata", tags=["metadata"])
app.include_router(notes.router, prefix="/api/notes", tags=["notes"])
app.include_router(ratings.router, prefix="/api/ratings", tags=["ratings"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
