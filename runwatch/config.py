from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_PREFIX = "RUNWATCH_"
# Variable used by the web deployment; honoured so both clients share one setting.
LEGACY_BASE_URL_VAR = "NEXT_PUBLIC_API_BASE_URL"


@dataclass(frozen=True)
class Settings:
    api_base_url: Optional[str] = None
    poll_active_s: float = 1.0
    poll_idle_s: float = 4.0
    run_list_poll_s: float = 5.0
    live_window: int = 120
    events_limit: int = 300
    runs_limit: int = 100
    request_timeout_s: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.poll_active_s <= 0 or self.poll_idle_s <= 0 or self.run_list_poll_s <= 0:
            raise ValueError("poll intervals must be > 0")
        if self.live_window < 1:
            raise ValueError(f"live_window must be >= 1, got {self.live_window}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from ``RUNWATCH_*`` environment variables.

        A missing base URL is allowed here; network calls fail with
        ``ConfigurationError`` when they are attempted.

        Raises ``ValueError`` with a clear message on non-numeric values.
        """
        env = os.environ if environ is None else environ

        def _get(name: str) -> Optional[str]:
            v = env.get(ENV_PREFIX + name)
            return v.strip() if v is not None and v.strip() else None

        def _float(name: str, default: float) -> float:
            raw = _get(name)
            if raw is None:
                return default
            try:
                return float(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{name} is not numeric: {raw!r}") from exc

        def _int(name: str, default: int) -> int:
            raw = _get(name)
            if raw is None:
                return default
            try:
                return int(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{name} is not an integer: {raw!r}") from exc

        base = _get("API_BASE_URL") or (env.get(LEGACY_BASE_URL_VAR) or "").strip() or None

        return cls(
            api_base_url=base,
            poll_active_s=_float("POLL_ACTIVE_S", 1.0),
            poll_idle_s=_float("POLL_IDLE_S", 4.0),
            run_list_poll_s=_float("RUN_LIST_POLL_S", 5.0),
            live_window=_int("LIVE_WINDOW", 120),
            events_limit=_int("EVENTS_LIMIT", 300),
            runs_limit=_int("RUNS_LIMIT", 100),
            request_timeout_s=_float("REQUEST_TIMEOUT_S", 10.0),
            log_level=_get("LOG_LEVEL") or "INFO",
        )
