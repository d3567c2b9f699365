# vigil/world/grid.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, Optional
from vigil import settings
from vigil.core.clock import GameClock
from vigil.core.vec import Vec3
from vigil.world.navigation import NavQuery

logger = logging.getLogger(__name__)

Coord = tuple[int, int]

@dataclass(frozen=True, slots=True)
class GridConfig:
    cell_size: float = settings.CELL_SIZE
    width: int = settings.GRID_WIDTH
    height: int = settings.GRID_HEIGHT
    origin: Optional[tuple[float, float]] = None   # (x, z); None = centered on spawn
    sample_height: float = settings.GRID_SAMPLE_HEIGHT
    sample_tolerance: float = settings.NAV_SAMPLE_TOLERANCE

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError("cell_size must be > 0")
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must be >= 0")
        if self.sample_tolerance <= 0:
            raise ValueError("sample_tolerance must be > 0")

    @property
    def sample_radius(self) -> float:
        return self.cell_size * self.sample_tolerance

def origin_for(config: GridConfig, spawn_position: Optional[Vec3] = None) -> tuple[float, float]:
    """Explicit origin if configured, else the bottom-left corner that centres the grid on spawn."""
    if config.origin is not None:
        return config.origin
    if spawn_position is None:
        raise ValueError("a centred grid needs the agent's spawn position")
    px, _, pz = spawn_position
    return (
        px - config.width * config.cell_size * 0.5,
        pz - config.height * config.cell_size * 0.5,
    )

@dataclass(frozen=True, slots=True)
class Chunk:
    """Read-only snapshot of one grid cell."""
    coord: Coord
    world_center: Vec3
    last_visited: float = settings.NEVER
    last_seen: float = settings.NEVER
    last_target_seen: float = settings.NEVER
    interest: float = settings.INTEREST_UNSET

@dataclass(slots=True)
class _ChunkRecord:
    world_center: Vec3
    last_visited: float = settings.NEVER
    last_seen: float = settings.NEVER
    last_target_seen: float = settings.NEVER
    interest: float = settings.INTEREST_UNSET

@dataclass(slots=True)
class ChunkGrid:
    """Sparse spatial memory over the XZ plane.

    Only cells whose centre snaps onto the walkable surface exist. Misses on
    lookups and marks are normal: they are off-grid or unwalkable space.
    Chunks leave the grid as snapshots; every write goes through a method here.
    """
    config: GridConfig
    origin: tuple[float, float]
    clock: GameClock
    _chunks: dict[Coord, _ChunkRecord] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def build(
        cls,
        config: GridConfig,
        nav: NavQuery,
        clock: GameClock,
        spawn_position: Optional[Vec3] = None,
    ) -> "ChunkGrid":
        grid = cls(config, origin_for(config, spawn_position), clock)
        radius = config.sample_radius
        for x in range(config.width):
            for z in range(config.height):
                hit = nav.nearest_walkable(grid.cell_center(x, z), radius)
                if hit is not None:
                    grid._chunks[(x, z)] = _ChunkRecord(world_center=hit)
        logger.info(
            "built chunk grid: %d/%d cells walkable, origin=(%.2f, %.2f) cell=%.2f",
            len(grid._chunks), config.width * config.height,
            grid.origin[0], grid.origin[1], config.cell_size,
        )
        return grid

    # --- math ---
    @property
    def cell_size(self) -> float:
        return self.config.cell_size

    def cell_center(self, x: int, z: int) -> Vec3:
        """Unsnapped centre of cell (x, z)."""
        ox, oz = self.origin
        cs = self.config.cell_size
        return ox + (x + 0.5) * cs, self.config.sample_height, oz + (z + 0.5) * cs

    def coord_of(self, world_pos: Vec3) -> Coord:
        ox, oz = self.origin
        cs = self.config.cell_size
        return math.floor((world_pos[0] - ox) / cs), math.floor((world_pos[2] - oz) / cs)

    def window(self, center: Vec3, half_extent: float) -> tuple[Coord, Coord]:
        """Inclusive (min, max) coords covering the square of half_extent around center."""
        cx, cy, cz = center
        lo = self.coord_of((cx - half_extent, cy, cz - half_extent))
        hi = self.coord_of((cx + half_extent, cy, cz + half_extent))
        return lo, hi

    # --- reads ---
    def __len__(self) -> int:
        return len(self._chunks)

    def __contains__(self, coord: object) -> bool:
        return coord in self._chunks

    def chunk_at(self, coord: Coord) -> Optional[Chunk]:
        rec = self._chunks.get(coord)
        return None if rec is None else _snapshot(coord, rec)

    def chunk_at_world(self, world_pos: Vec3) -> Optional[Chunk]:
        return self.chunk_at(self.coord_of(world_pos))

    def coords(self) -> list[Coord]:
        return sorted(self._chunks)

    def chunks(self) -> Iterator[Chunk]:
        for coord in sorted(self._chunks):
            yield _snapshot(coord, self._chunks[coord])

    def least_recently_visited(self) -> Optional[Chunk]:
        """Chunk with the smallest last_visited. O(n); not for per-scan use.

        Ties go to the lowest coordinate (x first, then z).
        """
        best: Optional[Coord] = None
        best_time = math.inf
        for coord in sorted(self._chunks):
            t = self._chunks[coord].last_visited
            if best is None or t < best_time:
                best, best_time = coord, t
        return None if best is None else self.chunk_at(best)

    def latest_target_sighting(self) -> Optional[Chunk]:
        best: Optional[Coord] = None
        best_time = settings.NEVER
        for coord in sorted(self._chunks):
            t = self._chunks[coord].last_target_seen
            if t > best_time:
                best, best_time = coord, t
        return None if best is None else self.chunk_at(best)

    # --- writes ---
    def mark_visited(self, world_pos: Vec3) -> Optional[Chunk]:
        """Visiting counts as seeing: stamps last_visited and last_seen."""
        coord = self.coord_of(world_pos)
        rec = self._chunks.get(coord)
        if rec is None:
            return None
        now = self.clock.now()
        if _fresh(coord, "last_visited", rec.last_visited, now):
            rec.last_visited = now
        if _fresh(coord, "last_seen", rec.last_seen, now):
            rec.last_seen = now
        return _snapshot(coord, rec)

    def mark_seen(self, world_pos: Vec3) -> Optional[Chunk]:
        return self.stamp_seen(self.coord_of(world_pos), self.clock.now())

    def stamp_seen(self, coord: Coord, now: float) -> Optional[Chunk]:
        rec = self._chunks.get(coord)
        if rec is None:
            return None
        if _fresh(coord, "last_seen", rec.last_seen, now):
            rec.last_seen = now
        return _snapshot(coord, rec)

    def stamp_target_seen(self, coord: Coord, now: float) -> Optional[Chunk]:
        rec = self._chunks.get(coord)
        if rec is None:
            return None
        if _fresh(coord, "last_target_seen", rec.last_target_seen, now):
            rec.last_target_seen = now
        return _snapshot(coord, rec)

    def set_interest(self, coord: Coord, interest: float) -> Optional[Chunk]:
        """Write path for externally scored interest. Not computed here."""
        rec = self._chunks.get(coord)
        if rec is None:
            return None
        rec.interest = interest
        return _snapshot(coord, rec)

def _fresh(coord: Coord, name: str, current: float, now: float) -> bool:
    # timestamps never move backwards
    if now < current:
        logger.debug("ignored stale %s stamp on %s: %.3f < %.3f", name, coord, now, current)
        return False
    return True

def _snapshot(coord: Coord, rec: _ChunkRecord) -> Chunk:
    return Chunk(
        coord=coord,
        world_center=rec.world_center,
        last_visited=rec.last_visited,
        last_seen=rec.last_seen,
        last_target_seen=rec.last_target_seen,
        interest=rec.interest,
    )
