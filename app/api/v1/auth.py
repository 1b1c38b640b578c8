"""
Driver Authentication Endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import AuthResponse
from app.schemas.driver import DriverRegister, DriverLogin
from app.services.driver_service import register_driver, authenticate_driver
from app.utils.security import create_driver_token

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: DriverRegister, db: Session = Depends(get_db)):
    """Register a driver and log them straight in"""
    driver = register_driver(db, data)
    token = create_driver_token(driver)

    return AuthResponse(
        success=True,
        message="Welcome!",
        token=token,
        driver={"name": driver.name, "phone": driver.phone}
    )


@router.post("/login", response_model=AuthResponse)
def login(credentials: DriverLogin, db: Session = Depends(get_db)):
    """Driver login, token valid for 24 hours"""
    driver = authenticate_driver(db, credentials.phone, credentials.password)
    token = create_driver_token(driver)

    return AuthResponse(
        success=True,
        message="Login successful",
        token=token,
        driver=driver.to_dict()
    )
