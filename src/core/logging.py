"""Logging setup, called once on startup."""

import logging

HANDLER_NAME = "shorturl"


def configure_logging(level: str = "INFO") -> None:
    """Attach the service stream handler to the root logger once."""
    root = logging.getLogger()
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
