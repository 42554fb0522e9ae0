import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_error_handlers
from app.core.config import get_settings
from app.core.logging import configure_logging

settings = get_settings()

configure_logging()

from app.models import Base
from app.db.session import engine
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.project_name,
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API router
from app.api.v1 import api_router
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": settings.project_name,
        "docs": "/docs",
    }


@app.on_event("startup")
async def startup_event():
    """Make sure the exchange rate row exists before the first posting."""
    from app.db.session import SessionLocal
    from app.domain.accounting.exchange_rate_service import get_exchange_rate

    db = SessionLocal()
    try:
        rate = get_exchange_rate(db)
        logging.getLogger(__name__).info(f"Starting with USDT->JOD rate {rate.rate}")
    finally:
        db.close()
