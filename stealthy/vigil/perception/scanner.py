# vigil/perception/scanner.py
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol
from vigil import settings
from vigil.core.clock import GameClock
from vigil.core.vec import Vec3, sub
from vigil.world.grid import ChunkGrid, Coord
from vigil.world.los import ViewCone, in_view
from vigil.world.occlusion import Raycaster

logger = logging.getLogger(__name__)

class ScannerConfigError(ValueError):
    """A collaborator the scanner cannot run without is missing."""

class TransformSource(Protocol):
    @property
    def position(self) -> Vec3: ...
    @property
    def forward(self) -> Vec3: ...

class TargetProvider(Protocol):
    @property
    def position(self) -> Vec3: ...
    @property
    def sneaking(self) -> bool: ...
    def anchor(self) -> Vec3: ...

@dataclass(frozen=True, slots=True)
class ScanConfig:
    close_view_distance: float = settings.CLOSE_VIEW_DISTANCE
    close_view_angle: float = settings.CLOSE_VIEW_ANGLE
    far_view_distance: float = settings.FAR_VIEW_DISTANCE
    far_view_angle: float = settings.FAR_VIEW_ANGLE
    obstacle_mask: int = settings.OBSTACLE_MASK
    scan_interval: float = settings.SCAN_INTERVAL
    eye_height: float = settings.EYE_HEIGHT

    def __post_init__(self) -> None:
        if self.close_view_distance < 0 or self.far_view_distance < 0:
            raise ValueError("view distances must be >= 0")
        for name in ("close_view_angle", "far_view_angle"):
            if not 0.0 <= getattr(self, name) <= 360.0:
                raise ValueError(f"{name} must be in [0, 360]")
        if self.scan_interval <= 0:
            raise ValueError("scan_interval must be > 0")

    @property
    def close(self) -> ViewCone:
        return ViewCone(self.close_view_distance, self.close_view_angle)

    @property
    def far(self) -> ViewCone:
        return ViewCone(self.far_view_distance, self.far_view_angle)

    @property
    def reach(self) -> float:
        return max(self.close_view_distance, self.far_view_distance)

@dataclass(frozen=True, slots=True)
class ScanResult:
    timestamp: float
    candidates: int
    seen_close: tuple[Coord, ...]
    seen_far: tuple[Coord, ...]
    target_visible: bool
    target_coord: Optional[Coord]

    @property
    def seen(self) -> tuple[Coord, ...]:
        return self.seen_close + self.seen_far

class VisibilityScanner:
    """Dual-cone field-of-view scan over a ChunkGrid, on a fixed real-time interval.

    Each cycle stamps last_seen on chunks inside either cone, then checks the
    tracked target with the same predicate and stamps last_target_seen on the
    chunk under it. A cycle never awaits, so readers see whole cycles only.
    """

    def __init__(
        self,
        grid: Optional[ChunkGrid],
        transform: Optional[TransformSource],
        target: Optional[TargetProvider],
        raycaster: Optional[Raycaster],
        clock: GameClock,
        config: Optional[ScanConfig] = None,
    ) -> None:
        self.grid = grid
        self.transform = transform
        self.target = target
        self.raycaster = raycaster
        self.clock = clock
        self.config = config or ScanConfig()
        self.last_result: Optional[ScanResult] = None
        self._task: Optional[asyncio.Task[None]] = None
        self.disabled_reason: Optional[str] = None
        try:
            self._check_collaborators()
        except ScannerConfigError as e:
            self.disabled_reason = str(e)
            logger.error("visibility scanner disabled: %s", e)

    def _check_collaborators(self) -> None:
        missing = [
            name for name, ref in (
                ("grid", self.grid),
                ("transform source", self.transform),
                ("target provider", self.target),
                ("raycaster", self.raycaster),
            ) if ref is None
        ]
        if missing:
            raise ScannerConfigError("missing " + ", ".join(missing))

    @property
    def enabled(self) -> bool:
        return self.disabled_reason is None

    # --- predicate ---
    def is_visible(self, offset: Vec3, position: Optional[Vec3] = None, forward: Optional[Vec3] = None) -> bool:
        """Close cone, then far cone, against an offset from the agent."""
        if self.transform is None or self.raycaster is None:
            return False
        pos = self.transform.position if position is None else position
        fwd = self.transform.forward if forward is None else forward
        cfg = self.config
        return (
            in_view(self.raycaster, pos, fwd, offset, cfg.close, cfg.obstacle_mask, cfg.eye_height)
            or in_view(self.raycaster, pos, fwd, offset, cfg.far, cfg.obstacle_mask, cfg.eye_height)
        )

    # --- one cycle ---
    def scan_chunks(self) -> Optional[ScanResult]:
        grid, transform, target, rc = self.grid, self.transform, self.target, self.raycaster
        if not self.enabled or grid is None or transform is None or target is None or rc is None:
            return None
        cfg = self.config
        now = self.clock.now()
        position = transform.position
        forward = transform.forward
        close, far = cfg.close, cfg.far

        (min_x, min_z), (max_x, max_z) = grid.window(position, cfg.reach)
        candidates = 0
        seen_close: list[Coord] = []
        seen_far: list[Coord] = []
        for x in range(min_x, max_x + 1):
            for z in range(min_z, max_z + 1):
                chunk = grid.chunk_at((x, z))
                if chunk is None:
                    continue
                candidates += 1
                to_center = sub(chunk.world_center, position)
                if in_view(rc, position, forward, to_center, close, cfg.obstacle_mask, cfg.eye_height):
                    grid.stamp_seen((x, z), now)
                    seen_close.append((x, z))
                    continue
                if in_view(rc, position, forward, to_center, far, cfg.obstacle_mask, cfg.eye_height):
                    grid.stamp_seen((x, z), now)
                    seen_far.append((x, z))

        # target: anchor picked by stance, chunk picked by where it stands
        to_target = sub(target.anchor(), position)
        target_visible = self.is_visible(to_target, position, forward)
        target_coord: Optional[Coord] = None
        if target_visible:
            coord = grid.coord_of(target.position)
            if grid.stamp_target_seen(coord, now) is not None:
                target_coord = coord

        result = ScanResult(
            timestamp=now,
            candidates=candidates,
            seen_close=tuple(seen_close),
            seen_far=tuple(seen_far),
            target_visible=target_visible,
            target_coord=target_coord,
        )
        self.last_result = result
        logger.debug(
            "scan t=%.2f candidates=%d close=%d far=%d target=%s",
            now, candidates, len(seen_close), len(seen_far),
            target_coord if target_visible else "-",
        )
        return result

    # --- periodic task ---
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> Optional[asyncio.Task[None]]:
        """Schedule the scan loop on the running event loop. Idempotent."""
        if not self.enabled:
            logger.warning("not starting disabled scanner: %s", self.disabled_reason)
            return None
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run(), name="visibility-scan")
        self._task.add_done_callback(_log_task_exit)
        logger.info("scanner started, interval=%.3fs", self.config.scan_interval)
        return self._task

    def stop(self) -> None:
        """Cancel the loop and forget it, so a start() in the same turn begins a fresh one."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("scanner stopped")

    async def aclose(self) -> None:
        """Cancel and wait until the loop has exited."""
        task = self._task
        self.stop()
        if task is None or task.done():
            # a loop that died has already been logged by _log_task_exit
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        interval = self.config.scan_interval
        while True:
            await asyncio.sleep(interval)
            self.scan_chunks()

def _log_task_exit(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("scan task died", exc_info=exc)
