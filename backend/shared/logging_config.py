"""
Logging setup for the RentHub backend.

Modules log through ``logging.getLogger(__name__)``; this only configures the
root handler once per process.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the RentHub format (idempotent)."""
    global _configured

    if _configured:
        logging.getLogger().setLevel(level.upper())
        return

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
