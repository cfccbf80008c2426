"""Runtime settings for the clinical records web service.

Values come from environment variables; the command line may override them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        raw_port = env.get("PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ValueError(f"PORT must be an integer, got {raw_port!r}") from exc
        return cls(
            host=env.get("CLINIC_HOST", DEFAULT_HOST),
            port=port,
            log_level=env.get("CLINIC_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            debug=env.get("CLINIC_DEBUG", "").strip().lower() in _TRUTHY,
        )
