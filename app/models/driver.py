"""
Driver Model
One row per registered driver: profile plus live status on the ride board
"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
import uuid
import enum
from datetime import datetime
from app.database import Base


class DriverStatus(str, enum.Enum):
    OFFLINE = "OFFLINE"
    BUSY = "BUSY"
    AVAILABLE = "AVAILABLE"


class VehicleType(str, enum.Enum):
    AUTO = "Auto"
    RICKSHAW = "Rickshaw"


class Driver(Base):
    """
    Driver record keyed by phone number.

    `location` is only meaningful while AVAILABLE. Going OFFLINE clears it,
    going BUSY keeps it as the last known location.
    """
    __tablename__ = "drivers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, nullable=False, index=True)  # never changes after registration
    password_hash = Column(String(255), nullable=False)

    vehicle_type = Column(
        SQLEnum(VehicleType, values_callable=lambda e: [m.value for m in e]),
        default=VehicleType.AUTO,
        nullable=False
    )
    vehicle_number = Column(String(50), nullable=False)

    # Status
    status = Column(SQLEnum(DriverStatus), default=DriverStatus.OFFLINE, nullable=False, index=True)
    location = Column(String(100), nullable=True)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        """Public representation, never includes the password hash"""
        vehicle_type = self.vehicle_type.value if hasattr(self.vehicle_type, "value") else self.vehicle_type
        status = self.status.value if hasattr(self.status, "value") else self.status
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "vehicleType": vehicle_type,
            "vehicleNumber": self.vehicle_number,
            "status": status,
            "location": self.location,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
        }

    def __repr__(self):
        return f"<Driver {self.name} ({self.phone}) {self.status}>"
