"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fathom.config import settings
from fathom.db.database import engine, Base

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (dev only; use Alembic in production)
    import fathom.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Fathom Signals started (env=%s)", settings.APP_ENV)
    yield
    await engine.dispose()


app = FastAPI(
    title="Fathom Signals API",
    description="Read-only relationship intelligence over the partnership event store",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
from fathom.api.routes import (  # noqa: E402
    commitments,
    cultural,
    introductions,
    momentum,
    proof_points,
    stall_risks,
)

app.include_router(stall_risks.router, prefix="/api/stall-risks", tags=["stall-risks"])
app.include_router(momentum.router, prefix="/api/momentum", tags=["momentum"])
app.include_router(commitments.router, prefix="/api/commitments", tags=["commitments"])
app.include_router(introductions.router, prefix="/api/introductions", tags=["introductions"])
app.include_router(proof_points.router, prefix="/api/proof-points", tags=["proof-points"])
app.include_router(cultural.router, prefix="/api/cultural", tags=["cultural"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}
