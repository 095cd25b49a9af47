"""
Command-line entry point: ``python -m greetme``.

Configures logging and serves the API with uvicorn on the configured port.
"""

import logging

import uvicorn

from greetme.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    uvicorn.run("greetme.api.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
