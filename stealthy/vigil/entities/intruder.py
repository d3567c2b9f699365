# vigil/entities/intruder.py
from __future__ import annotations
import math
from dataclasses import dataclass
from vigil import settings
from vigil.core.vec import Vec3

@dataclass(slots=True)
class Intruder:
    """Tracked target. Its visible profile depends on stance."""
    position: Vec3 = (0.0, 0.0, 0.0)     # feet
    sneaking: bool = False
    standing_height: float = settings.STANDING_ANCHOR_HEIGHT
    crouched_height: float = settings.CROUCHED_ANCHOR_HEIGHT
    move_speed: float = settings.INTRUDER_MOVE_SPEED

    def anchor(self) -> Vec3:
        """Point the sentry must see: low while sneaking, head height otherwise."""
        x, y, z = self.position
        h = self.crouched_height if self.sneaking else self.standing_height
        return x, y + h, z

    def toggle_sneak(self) -> None:
        self.sneaking = not self.sneaking

    def move(self, dx: float, dz: float, dt: float) -> None:
        length = math.hypot(dx, dz)
        if length == 0.0:
            return
        speed = self.move_speed * (settings.INTRUDER_SNEAK_MULT if self.sneaking else 1.0)
        x, y, z = self.position
        self.position = (x + dx / length * speed * dt, y, z + dz / length * speed * dt)
