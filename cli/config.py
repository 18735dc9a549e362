from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0

_BASE_URL_ENV = "BRIDGE_BASE_URL"
_SECRET_ENV = "BRIDGE_NODE_SECRET"
_TIMEOUT_ENV = "BRIDGE_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    node_secret: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


def _pick(explicit: Optional[str], env_name: str) -> Optional[str]:
    """Prefer a command-line value over the environment; blanks count as unset."""
    value = explicit if explicit is not None else os.getenv(env_name)
    value = (value or "").strip()
    return value or None


def _timeout_from_env() -> float:
    try:
        seconds = float(_pick(None, _TIMEOUT_ENV) or DEFAULT_TIMEOUT)
    except ValueError:
        return DEFAULT_TIMEOUT
    return seconds if math.isfinite(seconds) and seconds > 0 else DEFAULT_TIMEOUT


def load_config(
    base_url: Optional[str] = None,
    node_secret: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CLIConfig:
    url = _pick(base_url, _BASE_URL_ENV) or DEFAULT_BASE_URL
    return CLIConfig(
        base_url=url.rstrip("/"),
        node_secret=_pick(node_secret, _SECRET_ENV),
        timeout=timeout if timeout is not None else _timeout_from_env(),
    )
