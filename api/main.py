import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assets import router as assets_router
from auth import router as auth_router
from core import config
from core.db import RecordStore
from core.errors import RecordValidationError, StorageError
from products import router as products_router
from sync import router as sync_router
from users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One store per process; it holds paths only, no cached documents.
    store = RecordStore(config.data_dir())
    store.ensure_layout()
    for directory in (config.uploads_dir(), config.assets_dir(), config.product_images_dir()):
        directory.mkdir(parents=True, exist_ok=True)
    app.state.store = store
    logger.info("store_ready data_dir=%s", store.data_dir)
    try:
        yield
    finally:
        app.state.store = None


config.configure_logging()

app = FastAPI(title="storefront-api", lifespan=lifespan)

# Allow the storefront dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("storage_failure method=%s path=%s error=%s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Storage failure", "detail": str(exc)})


@app.exception_handler(RecordValidationError)
async def validation_error_handler(_: Request, exc: RecordValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": str(exc)})


app.include_router(products_router.router, tags=["products"])
app.include_router(users_router.router, tags=["users"])
app.include_router(sync_router.router, tags=["sync"])
app.include_router(assets_router.router, tags=["assets"])
app.include_router(auth_router.router, tags=["auth"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "storefront api"}
