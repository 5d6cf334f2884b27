"""Run the DAU tracker under uvicorn."""

import sys

import uvicorn

from dautracker.core.config import settings


def main() -> None:
    try:
        uvicorn.run(
            "dautracker.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=False,
            log_level="info",
            access_log=True,
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
