"""Simulated service latency for the mock analysis and pricing calls."""

import time

from collision_claims.config.settings import get_latency_scale


def simulate_latency(milliseconds: float) -> None:
    """Sleep for milliseconds scaled by MOCK_LATENCY_SCALE. No-op at the default scale of 0."""
    scale = get_latency_scale()
    if scale <= 0 or milliseconds <= 0:
        return
    time.sleep(milliseconds * scale / 1000.0)
