from pydantic import BaseModel, Field, AliasChoices, field_validator
from typing import Optional
from app.models.driver import VehicleType


class DriverRegister(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    vehicle_type: VehicleType = Field(
        default=VehicleType.AUTO, validation_alias=AliasChoices("vehicleType", "vehicle_type")
    )
    vehicle_number: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("vehicleNumber", "vehicle_number")
    )

    @field_validator("name", "vehicle_number")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class DriverLogin(BaseModel):
    phone: str
    password: str


class StatusUpdate(BaseModel):
    # Some clients send the code as a number
    code: str

    @field_validator("code", mode="before")
    @classmethod
    def _coerce(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        return v.strip() if isinstance(v, str) else v


class ProfileUpdate(BaseModel):
    # phone is optional, the token decides which record is edited
    phone: Optional[str] = None
    name: str = Field(..., min_length=1)
    vehicle_type: VehicleType = Field(validation_alias=AliasChoices("vehicleType", "vehicle_type"))
    vehicle_number: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("vehicleNumber", "vehicle_number")
    )

    @field_validator("name", "vehicle_number")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v
