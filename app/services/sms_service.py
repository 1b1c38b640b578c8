"""
SMS gateway ingress.

The gateway (Twilio, or an Android forwarding app) posts the sender and the
message body, but the field names vary between gateways. Candidate keys are
an ordered table from settings and the first non-empty value wins.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Dict
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import RideBoardError, StoreFailure
from app.services.code_map import CodeMap
from app.services.status_service import apply_update
from app.utils.phone import normalize_phone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMSFields:
    phone_keys: Sequence[str]
    message_keys: Sequence[str]


def default_sms_fields() -> SMSFields:
    return SMSFields(
        phone_keys=tuple(settings.SMS_PHONE_FIELDS),
        message_keys=tuple(settings.SMS_MESSAGE_FIELDS),
    )


def first_present(payload: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    """Value of the first key in `keys` that is present and non-empty"""
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return None


def extract_sms(payload: Mapping[str, Any], fields: Optional[SMSFields] = None):
    """Return (phone, code) normalised, either may be None"""
    fields = fields or default_sms_fields()

    raw_phone = first_present(payload, fields.phone_keys)
    code = first_present(payload, fields.message_keys)

    phone = normalize_phone(raw_phone) if raw_phone else None
    return phone or None, code


def handle_sms(db: Session, payload: Mapping[str, Any], code_map: CodeMap,
               fields: Optional[SMSFields] = None) -> Dict[str, Any]:
    """
    Process one inbound SMS and build the acknowledgement body.

    Never raises for driver or code problems. The gateway retries on
    anything but a 200 so the outcome is reported in the body.
    Store failures come back as {"error": ...}.
    """
    phone, code = extract_sms(payload, fields)
    if not phone or not code:
        logger.warning(f"SMS missing phone or code: {dict(payload)}")
        return {"error": "Missing data"}

    try:
        result = apply_update(db, phone, code, code_map)
    except StoreFailure as e:
        logger.error(f"SMS from {phone} code={code!r} not saved: {e.message}")
        return {"error": e.message}
    except RideBoardError as e:
        logger.info(f"SMS from {phone} code={code!r} rejected: {e.message}")
        return {"success": False, "message": e.message}

    logger.info(f"SMS from {phone} code={code!r}: {result.message}")
    return {"success": True, "message": result.message}
