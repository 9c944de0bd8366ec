"""Runtime configuration for extraction and import tools."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping


DEFAULT_DB_PATH = ".pyqbank.db"
DEFAULT_LOG_LEVEL = "INFO"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    lowered = raw_value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of: {', '.join(sorted(_TRUE_VALUES | _FALSE_VALUES))}")


@dataclass(frozen=True, slots=True)
class Settings:
    """Validated settings shared by the command-line tools."""

    db_path: Path = Path(DEFAULT_DB_PATH)
    skip_duplicates: bool = True
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        db_path_raw = source.get("PYQBANK_DB_PATH", DEFAULT_DB_PATH).strip()
        if not db_path_raw:
            raise ValueError("PYQBANK_DB_PATH cannot be empty")

        skip_raw = source.get("PYQBANK_SKIP_DUPLICATES", "true").strip()
        if not skip_raw:
            raise ValueError("PYQBANK_SKIP_DUPLICATES cannot be empty")

        log_level = source.get("PYQBANK_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"PYQBANK_LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")

        return cls(
            db_path=Path(db_path_raw),
            skip_duplicates=_parse_bool(name="PYQBANK_SKIP_DUPLICATES", raw_value=skip_raw),
            log_level=log_level,
        )

    def configure_logging(self) -> None:
        logging.basicConfig(level=self.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
