"""Entry point for running the FastAPI application with Uvicorn."""

import uvicorn

from rolesapi.config import settings
from rolesapi.main import app


def main():
    """Launch the FastAPI app using Uvicorn."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
