"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only decides where
records go. Access lines from the request middleware use the "app.access"
logger so they can be routed or silenced separately.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# The stdout handler installed by configure_logging(), once per process
_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Install a stdout handler on the root logger once per process."""
    global _handler

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in root.handlers:
        root.addHandler(_handler)
    return _handler
