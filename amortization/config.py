"""Runtime configuration.

Database locations may be given as a plain file path (turned into a SQLite
URL) or as any SQLAlchemy URL. The log level is read from the
``AMORTIZATION_LOG_LEVEL`` environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

ENV_LOG_LEVEL = "AMORTIZATION_LOG_LEVEL"


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or default


def database_url(target: str) -> str:
    """Return the SQLAlchemy URL for ``target``.

    ``target`` may be a full URL (``sqlite:///...``, ``postgresql://...``) or
    a filesystem path.
    """
    if "://" in target:
        return target
    return f"sqlite:///{Path(target).expanduser()}"
