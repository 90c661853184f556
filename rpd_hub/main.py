from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from rpd_hub import __version__
from rpd_hub.config.database import run_migrations
from rpd_hub.config.logging import setup_logging
from rpd_hub.config.settings import settings
from rpd_hub.diagnostics.router import router as diagnostics_router
from rpd_hub.events.routers import router as events_router
from rpd_hub.exception_handlers import register_exception_handlers
from rpd_hub.healthz.router import router as healthz_router

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await run_migrations()
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="RPD Hub API",
    description="API for posting random play dance events and collecting RSVPs",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(events_router, tags=["Events"])
app.include_router(diagnostics_router, tags=["Diagnostics"])


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the RPD Hub API"}
