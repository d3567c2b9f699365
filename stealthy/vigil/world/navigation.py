# vigil/world/navigation.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol
from vigil.core.vec import Vec3, length_sq, sub

INF = math.inf

class NavQuery(Protocol):
    def nearest_walkable(self, point: Vec3, radius: float) -> Optional[Vec3]: ...

@dataclass(frozen=True, slots=True)
class WalkablePatch:
    """Flat, axis-aligned walkable rectangle at height y. Unbounded by default."""
    y: float = 0.0
    min_x: float = -INF
    min_z: float = -INF
    max_x: float = INF
    max_z: float = INF

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_z > self.max_z:
            raise ValueError("patch min corner must not exceed max corner")

    def closest_point(self, point: Vec3) -> Vec3:
        x, _, z = point
        return (
            min(max(x, self.min_x), self.max_x),
            self.y,
            min(max(z, self.min_z), self.max_z),
        )

@dataclass(slots=True)
class NavSurface:
    """Walkable surface made of flat patches.

    Stands in for a baked navigation mesh: nearest_walkable() answers the
    same question a navmesh sample does, bounded by radius.
    """
    patches: list[WalkablePatch] = field(default_factory=list)

    @classmethod
    def plane(cls, y: float = 0.0) -> "NavSurface":
        return cls([WalkablePatch(y=y)])

    @classmethod
    def from_rects(cls, rects: Iterable[tuple[float, float, float, float]], y: float = 0.0) -> "NavSurface":
        return cls([WalkablePatch(y, x0, z0, x1, z1) for (x0, z0, x1, z1) in rects])

    def nearest_walkable(self, point: Vec3, radius: float) -> Optional[Vec3]:
        best: Optional[Vec3] = None
        best_d2 = radius * radius
        for patch in self.patches:
            p = patch.closest_point(point)
            d2 = length_sq(sub(p, point))
            if d2 <= best_d2:
                best, best_d2 = p, d2
        return best
