from app.models.driver import Driver, DriverStatus, VehicleType

__all__ = [
    "Driver",
    "DriverStatus",
    "VehicleType"
]
