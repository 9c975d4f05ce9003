"""HTTP routes for the RRULE decoder."""

from fastapi import APIRouter

from . import handlers


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(handlers.router, prefix="/api", tags=["rrule"])
    return router
