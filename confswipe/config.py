"""
Runtime settings.

Everything is configurable through environment variables so the same
install can point at a different conference sheet:

    CONFSWIPE_SOURCE      URL or path of the event sheet (CSV or HTML table)
    CONFSWIPE_STATE       path of the JSON file holding the swipe decisions
    CONFSWIPE_LOG_LEVEL   logging level name (default WARNING)

CLI flags override these.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PACKAGE_DIR = Path(__file__).resolve().parent


def _default_source() -> str:
    """
    Bundled sample sheet, so the app works out of the box.
    """
    return str(PACKAGE_DIR / "data" / "events.csv")


def _default_state_path() -> Path:
    """
    Keep user state outside the package so reinstalling does not wipe it.

    Using a function instead of a constant makes testing easier,
    because tests can override HOME.
    """
    return Path.home() / ".confswipe" / "selection.json"


@dataclass(frozen=True)
class Settings:
    source: str
    state_path: Path
    log_level: int


def _parse_level(name: Optional[str]) -> int:
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env

    source = (env.get("CONFSWIPE_SOURCE") or "").strip() or _default_source()
    state = (env.get("CONFSWIPE_STATE") or "").strip()
    state_path = Path(state).expanduser() if state else _default_state_path()

    return Settings(
        source=source,
        state_path=state_path,
        log_level=_parse_level(env.get("CONFSWIPE_LOG_LEVEL")),
    )
