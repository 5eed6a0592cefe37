"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from band_dynamics.config import settings
from band_dynamics.core.presets import preset_catalog
from band_dynamics.db.database import engine, Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Fail fast on a broken catalog rather than on the first trigger
    logger.info("Loaded %d drama presets", len(preset_catalog))

    # Startup: create tables (dev only; use Alembic in production)
    import band_dynamics.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown: close connections
    await engine.dispose()


app = FastAPI(
    title="Band Dynamics API",
    description="Band relationship dynamics: chemistry state, gameplay modifiers and drama events",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
from band_dynamics.api.routes import bands, presets  # noqa: E402

app.include_router(bands.router, prefix="/api/bands", tags=["bands"])
app.include_router(presets.router, prefix="/api/presets", tags=["presets"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}
