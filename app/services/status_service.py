"""
Status Update Engine
Shared by the web app and the SMS gateway. Given a phone and a code, moves
the driver between OFFLINE, BUSY and AVAILABLE.
"""
from dataclasses import dataclass
from datetime import datetime
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import DriverNotFound, InvalidCode, StoreFailure
from app.models.driver import Driver, DriverStatus
from app.services.code_map import CodeMap, CodeActionType
from app.services.driver_service import get_driver_by_phone

logger = logging.getLogger(__name__)


@dataclass
class StatusUpdateResult:
    message: str
    driver: Driver


def apply_update(db: Session, phone: str, code: str, code_map: CodeMap) -> StatusUpdateResult:
    """
    Apply a status code to the driver registered under `phone`.

    Raises DriverNotFound when nobody is registered with that phone and
    InvalidCode when the code is not in the table. Neither writes anything.
    Success commits once and refreshes `last_updated`.
    """
    driver = get_driver_by_phone(db, phone)
    if driver is None:
        raise DriverNotFound()

    code = "" if code is None else str(code).strip()
    action = code_map.resolve(code)
    if action is None:
        logger.info(f"Rejected code {code!r} from {phone}")
        raise InvalidCode(driver=driver)

    if action.action == CodeActionType.OFFLINE:
        driver.status = DriverStatus.OFFLINE
        driver.location = None
        message = "You are Offline."
    elif action.action == CodeActionType.BUSY:
        # location kept as last known location
        driver.status = DriverStatus.BUSY
        message = "Status: Busy."
    else:
        driver.status = DriverStatus.AVAILABLE
        driver.location = action.location
        message = f"Updated: {action.location}"

    driver.last_updated = datetime.utcnow()

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save status for {phone}: {e}", exc_info=True)
        raise StoreFailure() from e
    db.refresh(driver)

    logger.info(f"Driver {phone} -> {driver.status.value} ({driver.location})")
    return StatusUpdateResult(message=message, driver=driver)
