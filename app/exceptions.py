"""
Domain errors. Rendered as {"success": false, "message": ...} by the
handler registered in app.main.
"""
from typing import Optional
from fastapi import status


class RideBoardError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DriverNotFound(RideBoardError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Driver not registered."


class Unauthorized(RideBoardError):
    """Token absent or malformed"""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"


class Forbidden(RideBoardError):
    """Token failed verification, or targets another driver"""
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid or expired token"


class InvalidInput(RideBoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class InvalidCode(InvalidInput):
    message = "Invalid Code."

    def __init__(self, driver=None, message: Optional[str] = None):
        # The untouched record travels with the error
        self.driver = driver
        super().__init__(message)


class DuplicatePhone(InvalidInput):
    status_code = status.HTTP_409_CONFLICT
    message = "Driver already registered with this phone."


class CredentialMismatch(RideBoardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid Password"


class StoreFailure(RideBoardError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error while saving driver."
