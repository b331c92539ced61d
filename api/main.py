import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db
from core.logging import configure_logging
from songs import dependencies as song_dependencies
from songs import router as songs_router
from songs.errors import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Initialize the DB pool and the catalog once per process.
    await db.init_pool()
    app.state.catalog = song_dependencies.build_catalog()
    logger.info("startup_complete")
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Song catalog", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
        for err in exc.errors()
    ]


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed method=%s path=%s error=%s", request.method, request.url.path, exc)
    else:
        logger.info(
            "request_rejected method=%s path=%s status=%s error=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Bad ids, missing body fields and negative pagination are client errors (400).
    logger.info("request_invalid method=%s path=%s errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_errors(exc)})


app.include_router(songs_router.router, tags=["songs"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "song catalog api"}
