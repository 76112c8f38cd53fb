#!/usr/bin/env python
"""CLI entry point that starts the HTTP server.

Usage:
    python -m src.cli.serve

Listens on PORT (default 3000). Database and signing key come from
DB_URL, DB_NAME and JWT_KEY.
"""

import uvicorn

from src.core.config import get_settings
from src.core.logging import configure_logging


def main():
    """Main entry point for CLI."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
