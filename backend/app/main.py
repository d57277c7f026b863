import logging
import sys
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.config import settings
from app.database import Base, async_session, engine
from app.migrations import backfill_derived_fields, run_migrations
from app.models import calculation_log, user_profile  # noqa: F401  (registers the tables)


def _setup_logging() -> None:
    """Configure application logging."""
    log_format = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
    date_format = "%H:%M:%S"
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stderr,
        force=True,
    )

    # Third-party loggers at WARNING, app loggers in detail
    logging.getLogger().setLevel(logging.WARNING)
    logging.getLogger("app").setLevel(level)

    # aiosqlite logs every statement at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


_setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: create tables, then bring older tables up to date
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session() as session:
        await run_migrations(session)
        await backfill_derived_fields(session)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Prime Estate Property Calculator",
    description="Calculates the taxes and fees of buying a property in Spain and keeps a log of saved calculations.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")
