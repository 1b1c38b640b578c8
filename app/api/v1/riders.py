"""
Rider board endpoints, polled by the rider dashboard.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.services.code_map import CodeMap, get_code_map
from app.services.driver_service import list_available_drivers

router = APIRouter()


@router.get("/riders", response_model=List[Dict[str, Any]])
def available_drivers(db: Session = Depends(get_db)):
    """Drivers currently AVAILABLE"""
    return [driver.to_dict() for driver in list_available_drivers(db)]


@router.get("/codes")
def code_sheet(code_map: CodeMap = Depends(get_code_map)):
    """Codes drivers can send, for the cheat sheet in the apps"""
    return code_map.as_dict()
