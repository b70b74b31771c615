"""Runtime configuration read from ``PLYCHESS_*`` environment variables.

Values are resolved once at import time; anything overridden from the
environment is recorded in ``overridden_params`` so it can be logged at
startup.
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional, Tuple


logger = logging.getLogger(__name__)

_PREFIX = "PLYCHESS_"

# (name, default, value) for every setting taken from the environment
overridden_params: List[Tuple[str, Any, Any]] = []


def _env_int(key: str, default: int) -> int:
    val = os.environ.get(_PREFIX + key)
    if val is None:
        return default
    result = int(val)
    overridden_params.append((key, default, result))
    return result


def _env_optional_int(key: str, default: Optional[int]) -> Optional[int]:
    val = os.environ.get(_PREFIX + key)
    if val is None or val == "":
        return default
    result = int(val)
    overridden_params.append((key, default, result))
    return result


def _env_str(key: str, default: str) -> str:
    val = os.environ.get(_PREFIX + key)
    if val is None:
        return default
    overridden_params.append((key, default, val))
    return val


def _env_bool(key: str, default: bool) -> bool:
    """Accepts true/false/1/0/yes/no/on/off."""
    val = os.environ.get(_PREFIX + key)
    if val is None:
        return default
    result = val.lower() in ("true", "1", "yes", "on")
    overridden_params.append((key, default, result))
    return result


# -------- SEARCH --------
# Deepest iterative-deepening limit; depths 0..MAX_DEPTH are searched
MAX_DEPTH = _env_int("MAX_DEPTH", 1)
# Seed for tie-breaking; unset means a fresh unseeded source per service
SEED = _env_optional_int("SEED", None)

# -------- HTTP --------
HOST = _env_str("HOST", "0.0.0.0")
PORT = _env_int("PORT", 8000)
RELOAD = _env_bool("RELOAD", False)
MAX_SESSIONS = _env_int("MAX_SESSIONS", 1024)
# Cap on the depth a client may request; cost grows with branching^depth
MAX_API_DEPTH = _env_int("MAX_API_DEPTH", 2)
# Wall-clock budget for API searches that do not set movetime_ms
API_MOVETIME_MS = _env_int("API_MOVETIME_MS", 5000)

# -------- LOGGING --------
LOG_LEVEL = _env_str("LOG_LEVEL", "INFO").upper()


def log_overrides() -> None:
    for key, default, value in overridden_params:
        logger.info("config override %s%s=%r (default %r)", _PREFIX, key, value, default)
