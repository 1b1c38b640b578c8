from typing import List, Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.exceptions import DriverNotFound, DuplicatePhone, CredentialMismatch, StoreFailure
from app.models.driver import Driver, DriverStatus
from app.schemas.driver import DriverRegister, ProfileUpdate
from app.utils.phone import require_phone
from app.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


def get_driver_by_phone(db: Session, phone: str) -> Optional[Driver]:
    try:
        return db.query(Driver).filter(Driver.phone == phone).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Driver lookup for {phone} failed: {e}", exc_info=True)
        raise StoreFailure("Server error while reading drivers.") from e


def list_available_drivers(db: Session) -> List[Driver]:
    """Drivers riders can call right now, freshest first"""
    try:
        return (
            db.query(Driver)
            .filter(Driver.status == DriverStatus.AVAILABLE)
            .order_by(Driver.last_updated.desc())
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Listing available drivers failed: {e}", exc_info=True)
        raise StoreFailure("Server error while reading drivers.") from e


def _commit(db: Session, action: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{action} failed: {e}", exc_info=True)
        raise StoreFailure() from e


def register_driver(db: Session, data: DriverRegister) -> Driver:
    """Register a new driver. Starts OFFLINE with no location."""
    phone = require_phone(data.phone)

    if get_driver_by_phone(db, phone) is not None:
        raise DuplicatePhone()

    driver = Driver(
        name=data.name,
        phone=phone,
        password_hash=get_password_hash(data.password),
        vehicle_type=data.vehicle_type,
        vehicle_number=data.vehicle_number,
        status=DriverStatus.OFFLINE,
        location=None,
    )
    db.add(driver)
    try:
        _commit(db, "Registration")
    except IntegrityError:
        # Lost a race with a concurrent registration for the same phone
        raise DuplicatePhone()
    db.refresh(driver)

    logger.info(f"Registered driver {driver.phone}")
    return driver


def authenticate_driver(db: Session, phone: str, password: str) -> Driver:
    """Check a driver's password, raising DriverNotFound or CredentialMismatch"""
    driver = get_driver_by_phone(db, require_phone(phone))
    if driver is None:
        raise DriverNotFound("User not found")

    if not verify_password(password, driver.password_hash):
        raise CredentialMismatch()

    return driver


def update_profile(db: Session, phone: str, data: ProfileUpdate) -> Driver:
    """Edit name and vehicle details. Phone, status and location are left alone."""
    driver = get_driver_by_phone(db, phone)
    if driver is None:
        raise DriverNotFound("Driver not found.")

    driver.name = data.name
    driver.vehicle_type = data.vehicle_type
    driver.vehicle_number = data.vehicle_number

    try:
        _commit(db, "Profile update")
    except IntegrityError as e:
        raise StoreFailure() from e
    db.refresh(driver)
    return driver
