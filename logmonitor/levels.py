"""Level mapping — collapses logging severities into the four wire levels."""

import logging

_LEVEL_NAMES = {
    logging.CRITICAL: "error",
    logging.ERROR: "error",
    logging.WARNING: "warn",
    logging.INFO: "info",
}


def map_log_level(levelno: int) -> str:
    """Map a ``logging`` level number to ``error``, ``warn``, ``info`` or ``log``.

    Only the standard tiers get a dedicated name; DEBUG, NOTSET and any
    custom level map to ``log``.
    """
    return _LEVEL_NAMES.get(levelno, "log")
