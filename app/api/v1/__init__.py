from fastapi import APIRouter

from .endpoints import accounts, exchange_rate, health, journal

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
api_router.include_router(journal.router, prefix="/journal", tags=["journal"])
api_router.include_router(exchange_rate.router, prefix="/exchange-rate", tags=["exchange-rate"])
