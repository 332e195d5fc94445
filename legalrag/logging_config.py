"""
legalrag/logging_config.py
--------------------------
Centralized logging configuration for the legal document RAG toolkit.

All modules import `get_logger(__name__)` to obtain a named logger.
Output is plain, human-readable text on stdout.

Log levels:
    DEBUG   — sentence counts, per-chunk sizes, clamped targets, previews
    INFO    — document processed, chunk totals, request handled
    WARNING — degraded results (e.g. no context chunks found)
    ERROR   — rejected input, collaborator failures

To see chunk-level detail at runtime:
    import logging
    logging.getLogger("legalrag").setLevel(logging.DEBUG)
"""

import logging
import sys


# ── Configuration ──────────────────────────────────────────────────────────────

_LOG_FORMAT  = "%(asctime)s [%(levelname)-8s] %(name)s — %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME   = "legalrag"   # parent logger for every chunking/ingestion module


def configure_logging(level: int = logging.INFO) -> None:
    """
    Attaches a stdout StreamHandler to the 'legalrag' logger.

    Repeated calls are no-ops once a handler is installed.

    Args:
        level: Logging level for the legalrag namespace (default: INFO).
    """
    root = logging.getLogger(_ROOT_NAME)

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger under the 'legalrag' namespace, configuring it on first use.

    Names outside the namespace (e.g. "validator.json_validator") are nested
    under it, so every module shares the one handler and format.

    Args:
        name: Typically __name__ of the calling module.
    """
    configure_logging()
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)
