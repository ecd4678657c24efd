from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowoffice.api.deps import get_context
from flowoffice.api.middleware import RequestTimingMiddleware
from flowoffice.api.v1.router import v1_router
from flowoffice.common.logging import get_logger, setup_logging
from flowoffice.config import settings
from flowoffice.integrations.base import BaseIntegration
from flowoffice.transport.context import ExecutionContext

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("FlowOffice adapter starting (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="FlowOffice Integration API",
    description="Workflow-automation adapter for the FlowOffice project platform",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestTimingMiddleware)

# API routes
app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check(context: ExecutionContext = Depends(get_context)):
    integrations = [await context.probe()] if isinstance(context, BaseIntegration) else []
    return {
        "status": "healthy",
        "service": "flowoffice",
        "version": "1.0.0",
        "env": settings.APP_ENV,
        "integrations": integrations,
    }
