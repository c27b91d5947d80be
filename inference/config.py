"""Konfiguracja wnioskowania — wartości domyślne i zmienne środowiskowe PGR_*."""

from __future__ import annotations

import os
from dataclasses import dataclass

_FALSE_VALUES = {"0", "false", "no", "off", "nie"}


@dataclass(slots=True)
class InferenceConfig:
    """
    - max_restarts:           limit powrotów do warstwy 0 w jednym przebiegu
    - persist_satisfiability: czy werdykty spełnialności zapisywać też jako łuki w bazie
    """
    max_restarts:           int  = 1000
    persist_satisfiability: bool = True

    def __post_init__(self) -> None:
        if self.max_restarts < 0:
            raise ValueError(f"max_restarts musi być nieujemne, jest {self.max_restarts}")

    @classmethod
    def from_env(cls) -> InferenceConfig:
        """Czyta PGR_MAX_RESTARTS i PGR_PERSIST_SATISFIABILITY (brak → wartość domyślna)."""
        config = cls()
        raw = os.getenv("PGR_MAX_RESTARTS")
        if raw is not None and raw.strip():
            try:
                config.max_restarts = int(raw)
            except ValueError as e:
                raise ValueError(f"PGR_MAX_RESTARTS musi być liczbą całkowitą, jest {raw!r}") from e
            if config.max_restarts < 0:
                raise ValueError(f"PGR_MAX_RESTARTS musi być nieujemne, jest {raw!r}")
        raw = os.getenv("PGR_PERSIST_SATISFIABILITY")
        if raw is not None and raw.strip():
            config.persist_satisfiability = raw.strip().lower() not in _FALSE_VALUES
        return config
