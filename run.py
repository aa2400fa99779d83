#!/usr/bin/env python3
"""
Run the Vendor Discovery API server
"""
import uvicorn

from apps.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "apps.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
