"""
Process entry point: `python -m people_api` or the `people-api` script.

Runs uvicorn on HOST:PORT (default 0.0.0.0:8080) until terminated.
"""

import uvicorn

from people_api.config import settings


def main() -> None:
    uvicorn.run(
        "people_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
