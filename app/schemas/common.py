from typing import Optional, Any, Dict
from pydantic import BaseModel


class ResponseModel(BaseModel):
    """Standard API response model"""
    success: bool
    message: Optional[str] = None
    driver: Optional[Dict[str, Any]] = None


class AuthResponse(ResponseModel):
    """Register / login response, token is sent as Bearer on later calls"""
    token: str


class DriverLookupResponse(BaseModel):
    exists: bool
    driver: Optional[Dict[str, Any]] = None
