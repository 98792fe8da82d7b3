from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nivra.core.config import settings
from nivra.core.logger import setup_logging
from nivra.db.base import SessionLocal, init_db
from nivra.routers import journal as journal_router
from nivra.services.save_pipeline import build_widget
from nivra.services.storage import SqlSlotStorage
from nivra.core.errors import (
    NivraException,
    nivra_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Persisted state is read once, here. Tests may pre-install a widget.
    if getattr(app.state, "widget", None) is None:
        init_db()
        app.state.storage = SqlSlotStorage(SessionLocal)
        app.state.widget = build_widget(
            app.state.storage,
            slot_prefix=settings.SLOT_PREFIX,
            entry_limit=settings.ENTRY_LIMIT,
            series_limit=settings.SERIES_LIMIT,
            chart_window=settings.CHART_WINDOW,
        )
    yield


app = FastAPI(
    title="Nivra Journal API",
    description=(
        "**Mood journaling widget**\n\n"
        "Pick a mood, write a short note, watch the trend line and keep the daily streak going. "
        "Local, single-user state.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(NivraException, nivra_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(journal_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(request: Request):
    """
    Returns `{"status": "ok", "storage": "ok"}` when the slot storage answers.
    Returns HTTP 503 if it does not.
    """
    storage = getattr(request.app.state, "storage", None)
    if storage is None or storage.ping():
        storage_status = "ok"
    else:
        storage_status = "unreachable"

    if storage_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "storage": storage_status},
        )
    return {"status": "ok", "storage": "ok", "env": settings.APP_ENV}
