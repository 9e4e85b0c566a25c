"""
zodgen: Zod schema generator
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import zodgen
from zodgen.api import health, patterns, schema
from zodgen.config import settings

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("zodgen")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("zodgen starting up…")
    yield
    logger.info("zodgen shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="zodgen Zod Schema Generator",
    description="Zod validation schemas derived from PostgreSQL column metadata.",
    version=zodgen.__version__,
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router,   prefix="/api")
app.include_router(patterns.router, prefix="/api")
app.include_router(schema.router,   prefix="/api")
