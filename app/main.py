from fastapi import Depends, FastAPI

from app.api import get_api_router
from core.config import Settings, get_settings
from core.logging import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(title="RRULE Decoder", version="0.1.0")

# Include API routes
app.include_router(get_api_router())


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "status": "ok",
        "duplicate_part_behavior": settings.decoder_options().duplicate_part_behavior.value,
    }
