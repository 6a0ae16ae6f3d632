import json
import logging

from fastapi import APIRouter, Request

from stk_relay.schemas.responses import CallbackAck

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/callback/{provider}", response_model=CallbackAck)
async def provider_callback(provider: str, request: Request):
    """
    Acknowledge an asynchronous provider notification.

    The payload is only logged: no signature check, no lookup of the stored
    transaction and no status change. Settlement handling plugs in here.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except ValueError:
        payload = raw.decode("utf-8", errors="replace")

    logger.info("%s callback received: %s", provider, json.dumps(payload, indent=2, default=str))
    return CallbackAck(message="Callback processed successfully")
