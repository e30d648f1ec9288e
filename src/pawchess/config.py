from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_PREFIX = "PAWCHESS_"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the server and the pet opponent.

    Attributes:
        host (str): Bind address for the HTTP server.
        port (int): Bind port for the HTTP server.
        log_level (str): Root logging level name.
        opponent_delay_ms (int): Artificial "thinking" delay before the pet
            moves; 0 plays the reply synchronously.
        pet_name (str): Name used in status messages.
        seed (Optional[int]): Seed for the opponent RNG; unset means random.
    """

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    opponent_delay_ms: int = 400
    pet_name: str = "Your pet"
    seed: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``PAWCHESS_*`` environment variables.

        Raises:
            ValueError: If a numeric variable does not parse or is negative.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def _get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        def _int(name: str) -> Optional[int]:
            raw = _get(name)
            if raw is None:
                return None
            try:
                value = int(raw)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
            if value < 0:
                raise ValueError(f"{ENV_PREFIX}{name} must be >= 0")
            return value

        port = _int("PORT")
        delay = _int("OPPONENT_DELAY_MS")
        return cls(
            host=_get("HOST") or defaults.host,
            port=defaults.port if port is None else port,
            log_level=(_get("LOG_LEVEL") or defaults.log_level).upper(),
            opponent_delay_ms=defaults.opponent_delay_ms if delay is None else delay,
            pet_name=_get("PET_NAME") or defaults.pet_name,
            seed=_int("SEED"),
        )
