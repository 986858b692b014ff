"""
Fixed-step time animation. Each step issues a fresh synchronous render.
"""
from dataclasses import replace

import numpy as np


def advance_hour(hour, delta):
    """Move a decimal hour by delta, wrapping into [0, 24) in either direction."""
    return float((hour + delta) % 24.0)


def iter_hours(start=0.0, end=24.0, step=0.5):
    """
    Hours from start to end inclusive at a fixed step.

    Raises:
        ValueError: Non-positive step or end before start
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if end < start:
        raise ValueError(f"end ({end}) must not precede start ({start})")
    count = int(np.floor((end - start) / step + 1e-9)) + 1
    for i in range(count):
        yield float(min(start + i * step, end))


def animate(renderer, request, step=0.5, start=0.0, end=24.0):
    """
    Render a request repeatedly across the day.

    Yields:
        Frame for each hour of iter_hours(start, end, step)
    """
    for hour in iter_hours(start, end, step):
        yield renderer.render(replace(request, hour=hour))
