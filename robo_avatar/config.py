"""Runtime configuration.

``AvatarConfig`` is read once from the environment when the default generator
is first built. An unset ``ROBO_AVATAR_ATLAS`` selects the built-in atlas
drawn by :mod:`robo_avatar.sprites`.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_ATLAS = "ROBO_AVATAR_ATLAS"
ENV_LOG_LEVEL = "ROBO_AVATAR_LOG_LEVEL"
ENV_CACHE_MAX_AGE = "ROBO_AVATAR_CACHE_MAX_AGE"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_CACHE_MAX_AGE = 31536000  # one year


@dataclass(frozen=True)
class AvatarConfig:
    """Process-wide settings.

    Attributes:
        atlas_path: PNG sprite sheet to load, or ``None`` for the built-in one.
        log_level: Level name passed to :func:`robo_avatar.log.setup_logging`.
        cache_max_age: Seconds advertised in ``Cache-Control`` of PNG responses.
    """

    atlas_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AvatarConfig":
        env: Mapping[str, str] = os.environ if environ is None else environ
        raw_max_age = env.get(ENV_CACHE_MAX_AGE)
        if raw_max_age is None or raw_max_age == "":
            cache_max_age = DEFAULT_CACHE_MAX_AGE
        else:
            try:
                cache_max_age = int(raw_max_age)
            except ValueError:
                raise ValueError(
                    f"{ENV_CACHE_MAX_AGE} must be an integer, got {raw_max_age!r}"
                ) from None
            if cache_max_age < 0:
                raise ValueError(f"{ENV_CACHE_MAX_AGE} must be non-negative")
        return cls(
            atlas_path=env.get(ENV_ATLAS) or None,
            log_level=env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL,
            cache_max_age=cache_max_age,
        )
