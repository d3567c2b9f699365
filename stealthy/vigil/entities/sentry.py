# vigil/entities/sentry.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Optional
from vigil import settings
from vigil.core.clock import GameClock
from vigil.core.vec import Vec3, forward_to_yaw, yaw_to_forward
from vigil.perception.scanner import ScanConfig, TargetProvider, VisibilityScanner
from vigil.world.grid import ChunkGrid, GridConfig
from vigil.world.navigation import NavQuery
from vigil.world.occlusion import Raycaster

logger = logging.getLogger(__name__)

@dataclass(slots=True)
class Sentry:
    """The perceiving agent. Owns its spatial memory and the scan task bound to it."""
    position: Vec3 = (0.0, 0.0, 0.0)
    yaw: float = 0.0                     # degrees, 0 faces +Z
    grid: Optional[ChunkGrid] = field(default=None, init=False)
    scanner: Optional[VisibilityScanner] = field(default=None, init=False)

    # movement state
    move_speed: float = settings.SENTRY_MOVE_SPEED
    turn_speed: float = settings.SENTRY_TURN_SPEED
    _destination: Optional[Vec3] = field(default=None, init=False)

    @classmethod
    def spawn(
        cls,
        position: Vec3,
        yaw: float,
        nav: NavQuery,
        raycaster: Raycaster,
        target: Optional[TargetProvider],
        clock: GameClock,
        grid_config: Optional[GridConfig] = None,
        scan_config: Optional[ScanConfig] = None,
    ) -> "Sentry":
        """Build the grid around the spawn transform, then wire the scanner.

        Scanning does not begin until activate() is called on a running loop.
        """
        sentry = cls(position=position, yaw=yaw)
        sentry.grid = ChunkGrid.build(grid_config or GridConfig(), nav, clock, spawn_position=position)
        sentry.scanner = VisibilityScanner(sentry.grid, sentry, target, raycaster, clock, scan_config)
        sentry.grid.mark_visited(position)
        logger.info("sentry spawned at (%.1f, %.1f, %.1f) yaw=%.0f", *position, yaw)
        return sentry

    # --- transform source ---
    @property
    def forward(self) -> Vec3:
        return yaw_to_forward(self.yaw)

    def face(self, direction: Vec3) -> None:
        if direction[0] == 0.0 and direction[2] == 0.0:
            return
        self.yaw = forward_to_yaw(direction)

    def move_to(self, position: Vec3) -> None:
        self.position = position
        if self.grid is not None:
            self.grid.mark_visited(position)

    # --- lifetime ---
    def activate(self) -> None:
        if self.scanner is not None:
            self.scanner.start()

    def teardown(self) -> None:
        if self.scanner is not None:
            self.scanner.stop()

    async def aclose(self) -> None:
        if self.scanner is not None:
            await self.scanner.aclose()

    # --- simple kinematic travel ---
    def is_moving(self) -> bool:
        return self._destination is not None

    def set_destination(self, point: Optional[Vec3]) -> None:
        self._destination = point

    def update(self, dt: float) -> None:
        if self._destination is None:
            return
        px, py, pz = self.position
        tx, _, tz = self._destination
        dx, dz = tx - px, tz - pz
        dist = math.hypot(dx, dz)
        if dist <= settings.SENTRY_ARRIVE_RADIUS:
            self._destination = None
            return

        # turn toward the destination, capped per step
        want = math.degrees(math.atan2(dx, dz))
        diff = (want - self.yaw + 180.0) % 360.0 - 180.0
        max_turn = self.turn_speed * dt
        self.yaw += max(-max_turn, min(max_turn, diff))

        step = min(self.move_speed * dt, dist)
        self.move_to((px + dx / dist * step, py, pz + dz / dist * step))
