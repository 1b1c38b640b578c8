"""
SMS gateway webhook.
POST /sms: no auth, the sender's phone number identifies the driver.
Always returns HTTP 200, gateways retry on anything else.
"""
import json
import logging
from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.services.code_map import CodeMap, get_code_map
from app.services.sms_service import handle_sms

router = APIRouter()
logger = logging.getLogger(__name__)


async def _read_payload(request: Request) -> dict:
    """JSON or form body, whichever the gateway sent"""
    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        form = await request.form()
        return dict(form)

    raw_body = await request.body()
    if not raw_body:
        return {}
    try:
        payload = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError):
        logger.warning(f"Unparseable SMS body ({content_type}): {raw_body[:200]!r}")
        return {}
    return payload if isinstance(payload, dict) else {}


@router.post("/sms", summary="SMS gateway webhook")
async def receive_sms(
    request: Request,
    code_map: CodeMap = Depends(get_code_map),
    db: Session = Depends(get_db)
):
    try:
        payload = await _read_payload(request)
        logger.info(f"Incoming SMS payload: {payload}")
        return handle_sms(db, payload, code_map)
    except Exception as e:
        logger.error(f"SMS processing error: {e}", exc_info=True)
        return {"error": "Processing failed"}  # Still return 200
