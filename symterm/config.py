from __future__ import annotations
import logging
import os
from typing import Optional


_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Defaults
_DEFAULT_SNAPSHOT_INDENT = 2


def get_log_level() -> Optional[str]:
    raw = os.environ.get('SYMTERM_LOG_LEVEL')
    if not raw or not raw.strip():
        return None
    return raw.strip().upper()


def get_snapshot_indent() -> Optional[int]:
    raw = os.environ.get('SYMTERM_SNAPSHOT_INDENT')
    if not raw:
        return _DEFAULT_SNAPSHOT_INDENT
    raw = raw.strip().lower()
    if raw in ('none', 'compact', ''):
        return None
    try:
        return max(0, int(raw))
    except ValueError:
        return _DEFAULT_SNAPSHOT_INDENT


def setup_logging(level: str = "INFO") -> None:
    """Setup logging for symterm."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FORMAT
    )
