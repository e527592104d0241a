"""API v1 router aggregation."""

from fastapi import APIRouter

from portal.api.v1.endpoints import accounts, auth, credentials, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
api_router.include_router(credentials.router, prefix="/credentials", tags=["credentials"])
