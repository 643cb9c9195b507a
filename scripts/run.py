#!/usr/bin/env python3
"""
Media Library startup script
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))


async def run_server():
    """Run the API server (serves the built frontend too when present)"""
    import uvicorn
    from medialibrary.config import settings

    print(f"Media Library starting on http://{settings.HOST}:{settings.PORT}")
    if not settings.TMDB_API_KEY:
        print("Warning: TMDB_API_KEY is not set, movie and series metadata is disabled")

    config = uvicorn.Config(
        "medialibrary.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level="info",
        access_log=True,
    )
    server = uvicorn.Server(config)
    await server.serve()


async def main():
    from medialibrary.database import init_db

    # Initialize database before accepting requests
    print("Initializing database...")
    await init_db()
    print("Database initialized successfully.")

    await run_server()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
