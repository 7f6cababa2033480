"""
Bilarn Blog Backend — Server Entry Point
==========================================

Runs the API under uvicorn on HOST:PORT from the environment (default
0.0.0.0:5000):

    python -m app
    bilarn-blog          # console script installed with the package
"""

import uvicorn

from app.config import settings


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
