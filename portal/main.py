import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.core import config
from portal.core.database import SessionLocal, engine
from portal.core.errors import register_error_handlers
from portal.core.logging_setup import configure_logging
from portal.core.startup_checks import initialize_database
from portal.middleware.observability import ObservabilityMiddleware
import portal.models  # noqa: F401  models must be registered before create_all
import portal.services.event_handlers  # noqa: F401  subscribes event bus handlers

from portal.routers.admin_submissions import router as admin_submissions_router
from portal.routers.auth import router as auth_router
from portal.routers.internal_metrics import router as internal_metrics_router
from portal.routers.submissions import router as submissions_router
from portal.services.admin_bootstrap import bootstrap_initial_admin

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


def _bootstrap_initial_admin() -> None:
    password = os.getenv("DEV_ADMIN_PASSWORD", "").strip()
    if not password:
        logger.info("%s admin bootstrap skipped: DEV_ADMIN_PASSWORD not set", STARTUP_PREFIX)
        return

    db = SessionLocal()
    try:
        bootstrap_initial_admin(
            db,
            username=os.getenv("DEV_ADMIN_USERNAME", "admin").strip() or "admin",
            email=os.getenv("DEV_ADMIN_EMAIL", "").strip() or None,
            password=password,
            role=os.getenv("DEV_ADMIN_ROLE", "SUPER_ADMIN").strip() or "SUPER_ADMIN",
        )
    finally:
        db.close()


def _startup_tasks() -> None:
    try:
        initialize_database(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        _bootstrap_initial_admin()
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield
    engine.dispose()


app = FastAPI(
    title="Layanan Portal API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)

# Routers
app.include_router(submissions_router)
app.include_router(admin_submissions_router)
app.include_router(auth_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
