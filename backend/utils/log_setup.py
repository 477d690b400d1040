# backend/utils/log_setup.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Single stream handler on the root logger; uvicorn keeps its own."""
    root = logging.getLogger()
    if not any(getattr(h, "_inventory_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._inventory_handler = True
        root.addHandler(handler)
    root.setLevel(level.upper())
