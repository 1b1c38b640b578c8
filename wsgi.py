"""
ASGI entry point for the ride board API.

Process managers load `wsgi:application`, e.g.
    uvicorn wsgi:application --host 0.0.0.0 --port 5001
Running this file directly starts uvicorn with HOST/PORT from settings.
"""
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(__file__))

from app.main import app

application = app

if __name__ == "__main__":
    import uvicorn
    from app.config import settings
    uvicorn.run(
        "wsgi:application",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG and settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower() if not settings.DEBUG else "debug"
    )
