from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.config import Settings, get_settings
from core.errors import FormatError
from core.logging import get_logger
from core.models import DecoderOptions, DuplicatePartBehavior
from services.rrule_decoder import RecurrenceRuleDecoder

logger = get_logger(__name__)

router = APIRouter()


class DecodeRequest(BaseModel):
    rrule: str
    # Falls back to the configured behavior when omitted
    duplicate_part_behavior: DuplicatePartBehavior | None = None


@router.get("/rrule/options")
async def get_decoder_options(
    settings: Settings = Depends(get_settings),
) -> dict:
    """List the duplicate-part behaviors and the configured default."""
    return {
        "status": "ok",
        "duplicate_part_behaviors": [behavior.value for behavior in DuplicatePartBehavior],
        "default": settings.decoder_options().duplicate_part_behavior.value,
    }


@router.post("/rrule/decode")
async def decode_rrule(
    payload: DecodeRequest,
    settings: Settings = Depends(get_settings),
):
    """Decode one RRULE content line into its structured form."""
    if payload.duplicate_part_behavior is not None:
        options = DecoderOptions(duplicate_part_behavior=payload.duplicate_part_behavior)
    else:
        options = settings.decoder_options()

    try:
        rule = RecurrenceRuleDecoder(options).decode(payload.rrule)
    except FormatError as exc:
        logger.info(f"Rejected RRULE {payload.rrule!r}: {exc}")
        return JSONResponse(
            status_code=422,
            content={"status": "error", "error": exc.to_dict()},
        )

    return {"status": "ok", "rule": rule.model_dump(mode="json")}
