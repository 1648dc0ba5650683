from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .errors import InvalidQuantum

DEFAULT_QUANTUM = 2
DEFAULT_COMPARE_POLICIES = ["fcfs", "sjf", "rr", "srtn"]
DEFAULT_LOG_LEVEL = "WARNING"

QUANTUM_ENV = "SCHEDSIM_QUANTUM"
LOG_LEVEL_ENV = "SCHEDSIM_LOG_LEVEL"


@dataclass
class Settings:
    quantum: int = DEFAULT_QUANTUM
    log_level: str = DEFAULT_LOG_LEVEL
    compare_policies: List[str] = field(default_factory=lambda: list(DEFAULT_COMPARE_POLICIES))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from ``SCHEDSIM_*`` environment variables, falling back
        to the module defaults for anything unset.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        raw_quantum = env.get(QUANTUM_ENV, "").strip()
        if raw_quantum:
            try:
                settings.quantum = int(raw_quantum)
            except ValueError as exc:
                raise InvalidQuantum(f"{QUANTUM_ENV} must be an integer (got {raw_quantum!r})") from exc
            if settings.quantum <= 0:
                raise InvalidQuantum(f"{QUANTUM_ENV} must be positive (got {settings.quantum})")

        raw_level = env.get(LOG_LEVEL_ENV, "").strip()
        if raw_level:
            settings.log_level = raw_level.upper()

        return settings
