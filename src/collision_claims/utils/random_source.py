"""Seedable random source shared by the mock analysis and pricing services."""

import random
import uuid
from typing import Protocol

from collision_claims.config.settings import get_random_seed


class RandomSource(Protocol):
    """Anything with a ``random()`` returning a float in [0, 1)."""

    def random(self) -> float: ...


_default: random.Random | None = None


def get_random(rng: RandomSource | None = None) -> RandomSource:
    """Return rng, or the process-wide default seeded from COLLISION_CLAIMS_RANDOM_SEED."""
    global _default
    if rng is not None:
        return rng
    if _default is None:
        _default = random.Random(get_random_seed())
    return _default


def reset_random(seed: int | None = None) -> None:
    """Replace the default random source (tests)."""
    global _default
    _default = random.Random(seed) if seed is not None else None


def short_id() -> str:
    """Nine-character lowercase ID for records nested inside a claim."""
    return uuid.uuid4().hex[:9]
