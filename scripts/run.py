#!/usr/bin/env python3
"""
Run the Arrangement Sync API server.

Usage:
    python scripts/run.py
"""

import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from app.core.config import get_settings


def main():
    """Run the server with settings from the environment (.env supported)."""
    settings = get_settings()

    print(f"Starting {settings.app_name} ({settings.environment})")
    storage = "in-memory" if settings.use_memory_persistence else "postgres"
    print(f"   Storage: {storage}")
    print(f"   API docs: http://{settings.host}:{settings.port}/docs")
    print(f"   Health: http://{settings.host}:{settings.port}/health")

    import uvicorn

    uvicorn.run(
        "app.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
