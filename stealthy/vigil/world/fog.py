# vigil/world/fog.py
from __future__ import annotations
import math
from vigil import settings

RGB = tuple[int, int, int]

def staleness(timestamp: float, now: float, max_age: float = settings.DEBUG_MAX_AGE) -> float:
    """0 = just stamped, 1 = max_age or older. Never-stamped is always 1."""
    if math.isinf(timestamp) and timestamp < 0:
        return 1.0
    if max_age <= 0:
        return 0.0 if now <= timestamp else 1.0
    return min(max((now - timestamp) / max_age, 0.0), 1.0)

def lerp_rgb(a: RGB, b: RGB, t: float) -> RGB:
    t = min(max(t, 0.0), 1.0)
    return (
        int(round(a[0] + (b[0] - a[0]) * t)),
        int(round(a[1] + (b[1] - a[1]) * t)),
        int(round(a[2] + (b[2] - a[2]) * t)),
    )

def visited_color(last_visited: float, now: float, max_age: float = settings.DEBUG_MAX_AGE) -> RGB:
    # green -> red
    return lerp_rgb(settings.VISITED_FRESH_RGB, settings.VISITED_STALE_RGB, staleness(last_visited, now, max_age))

def seen_color(last_seen: float, now: float, max_age: float = settings.DEBUG_MAX_AGE) -> RGB:
    # blue -> yellow
    return lerp_rgb(settings.SEEN_FRESH_RGB, settings.SEEN_STALE_RGB, staleness(last_seen, now, max_age))
