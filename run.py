"""
ClassBeyond Badge Engine Entry Point
- Launches the API server.
"""

import uvicorn

from classbeyond.config import settings

if __name__ == "__main__":
    print("🚀 Starting ClassBeyond Badge Engine")
    print(f"📍 Server will run at http://{settings.HOST}:{settings.PORT}")
    print(f"📋 Application log level: {settings.LOG_LEVEL.upper()}")

    # Application logging is configured in classbeyond.main when the module loads,
    # log_level here only controls uvicorn's own logging
    uvicorn.run(
        "classbeyond.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level="info" if settings.DEBUG else "warning",
    )
