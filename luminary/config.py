"""Runtime settings for the show engine service."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Service configuration."""

    # Write coordination
    debounce_interval: float = Field(default=0.1, ge=0.0)  # seconds
    write_timeout: Optional[float] = Field(default=5.0, gt=0.0)  # seconds, None disables

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5001)

    # Debug output of controller writes
    debug_writes: bool = Field(default=False)
    debug_file: Optional[Path] = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(default=None)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        timeout_raw = os.getenv("LUMINARY_WRITE_TIMEOUT", "5").strip()
        debug_file = os.getenv("LUMINARY_DEBUG_FILE") or None
        log_file = os.getenv("LUMINARY_LOG_FILE") or None
        return cls(
            debounce_interval=float(os.getenv("LUMINARY_DEBOUNCE_MS", "100")) / 1000.0,
            write_timeout=float(timeout_raw) if timeout_raw and float(timeout_raw) > 0 else None,
            host=os.getenv("LUMINARY_HOST", "0.0.0.0"),
            port=int(os.getenv("LUMINARY_PORT", "5001")),
            debug_writes=_env_flag("LUMINARY_DEBUG_WRITES"),
            debug_file=Path(debug_file) if debug_file else None,
            log_level=os.getenv("LUMINARY_LOG_LEVEL", "INFO").upper(),
            log_file=Path(log_file) if log_file else None,
        )
