"""
Driver Endpoints
Status updates from the web app, profile lookup and editing.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_driver_phone
from app.exceptions import Forbidden
from app.schemas.common import ResponseModel, DriverLookupResponse
from app.schemas.driver import StatusUpdate, ProfileUpdate
from app.services.code_map import CodeMap, get_code_map
from app.services.driver_service import get_driver_by_phone, update_profile
from app.services.status_service import apply_update
from app.utils.phone import normalize_phone, require_phone

router = APIRouter()


@router.post("/update", response_model=ResponseModel)
def update_status(
    body: StatusUpdate,
    phone: str = Depends(get_current_driver_phone),
    code_map: CodeMap = Depends(get_code_map),
    db: Session = Depends(get_db)
):
    """Change the caller's status. The phone comes from the token, never the body."""
    result = apply_update(db, phone, body.code, code_map)
    return ResponseModel(success=True, message=result.message)


@router.get("/driver/{phone}", response_model=DriverLookupResponse)
def get_driver(phone: str, db: Session = Depends(get_db)):
    """Check whether a phone is registered"""
    driver = get_driver_by_phone(db, require_phone(phone))
    if driver is None:
        return DriverLookupResponse(exists=False)
    return DriverLookupResponse(exists=True, driver=driver.to_dict())


@router.put("/driver/profile", response_model=ResponseModel)
def edit_profile(
    body: ProfileUpdate,
    phone: str = Depends(get_current_driver_phone),
    db: Session = Depends(get_db)
):
    """Update name and vehicle details of the logged-in driver"""
    if body.phone and normalize_phone(body.phone) != phone:
        raise Forbidden("You can only edit your own profile.")

    driver = update_profile(db, phone, body)
    return ResponseModel(
        success=True,
        message="Profile Updated Successfully!",
        driver=driver.to_dict()
    )
