"""Routes API / API routes."""

from fastapi import APIRouter

from diesel_log.api import records

api_router = APIRouter(prefix="/api")

api_router.include_router(records.router, prefix="/records", tags=["records"])
