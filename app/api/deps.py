from fastapi import Request
from app.exceptions import Unauthorized, Forbidden
from app.utils.security import decode_token


async def get_current_driver_phone(request: Request) -> str:
    """
    Phone number of the driver holding the bearer token.

    Missing or malformed header -> 401. A token that fails signature or
    expiry checks, or has no phone claim -> 403.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise Unauthorized()

    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized()

    payload = decode_token(token)
    if payload is None:
        raise Forbidden()

    phone = payload.get("phone")
    if not phone:
        raise Forbidden()

    return phone
