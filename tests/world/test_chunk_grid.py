"""Tests for vigil.world.grid."""

from __future__ import annotations

import dataclasses
import logging
import math

import pytest

from vigil.core.clock import ManualClock
from vigil.core.vec import length, sub
from vigil.world.grid import ChunkGrid, GridConfig, origin_for
from vigil.world.navigation import NavSurface


def build(clock: ManualClock, nav: NavSurface | None = None, **kw) -> ChunkGrid:
    kw.setdefault("origin", (0.0, 0.0))
    return ChunkGrid.build(GridConfig(**kw), nav or NavSurface.plane(0.0), clock)


class TestGridBuild:
    def test_single_cell_on_flat_ground(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=5.0, width=1, height=1)
        assert len(grid) == 1
        chunk = grid.chunk_at((0, 0))
        assert chunk is not None
        assert chunk.world_center == pytest.approx((2.5, 0.0, 2.5))

    def test_fresh_chunk_defaults(self, clock: ManualClock) -> None:
        chunk = build(clock, width=1, height=1).chunk_at((0, 0))
        assert chunk is not None
        assert chunk.last_visited == -math.inf
        assert chunk.last_seen == -math.inf
        assert chunk.last_target_seen == -math.inf
        assert chunk.interest == -1

    def test_all_cells_present_on_plane(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=2.0, width=4, height=3)
        assert len(grid) == 12
        assert grid.coords()[0] == (0, 0)
        assert grid.coords()[-1] == (3, 2)

    def test_unwalkable_cells_are_absent(self, clock: ManualClock) -> None:
        nav = NavSurface.from_rects([(0.0, 0.0, 5.0, 5.0)])
        grid = build(clock, nav, cell_size=5.0, width=3, height=1)
        assert (0, 0) in grid
        assert (1, 0) in grid       # edge within 0.7 * cell of the centre
        assert (2, 0) not in grid
        snapped = grid.chunk_at((1, 0))
        assert snapped is not None
        assert snapped.world_center == pytest.approx((5.0, 0.0, 2.5))

    def test_snapped_centres_within_tolerance(self, clock: ManualClock) -> None:
        nav = NavSurface.from_rects([(0.0, 0.0, 7.0, 12.0)], y=1.0)
        grid = build(clock, nav, cell_size=5.0, width=4, height=4)
        assert len(grid) > 0
        radius = grid.config.sample_radius
        for chunk in grid.chunks():
            x, z = chunk.coord
            assert length(sub(chunk.world_center, grid.cell_center(x, z))) <= radius + 1e-9
            assert nav.nearest_walkable(grid.cell_center(x, z), radius) is not None

    def test_surface_out_of_vertical_reach(self, clock: ManualClock) -> None:
        assert len(build(clock, NavSurface.plane(2.0), cell_size=5.0, width=2, height=2)) == 4
        assert len(build(clock, NavSurface.plane(4.0), cell_size=5.0, width=2, height=2)) == 0

    def test_build_logs_summary(self, clock: ManualClock, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="vigil.world.grid"):
            build(clock, width=2, height=2)
        assert "4/4 cells walkable" in caplog.text


class TestGridOrigin:
    def test_explicit_origin(self) -> None:
        assert origin_for(GridConfig(origin=(3.0, -4.0)), (100.0, 0.0, 100.0)) == (3.0, -4.0)

    def test_centred_on_spawn(self) -> None:
        cfg = GridConfig(cell_size=5.0, width=20, height=10)
        assert origin_for(cfg, (10.0, 3.0, 10.0)) == (-40.0, -15.0)

    def test_centred_needs_spawn(self) -> None:
        with pytest.raises(ValueError):
            origin_for(GridConfig())

    def test_build_centred_grid_contains_spawn(self, clock: ManualClock, flat_nav: NavSurface) -> None:
        spawn = (7.0, 0.0, -3.0)
        grid = ChunkGrid.build(GridConfig(cell_size=5.0, width=4, height=4), flat_nav, clock, spawn)
        assert grid.coord_of(spawn) == (2, 2)


class TestGridConfigValidation:
    @pytest.mark.parametrize(
        "kw",
        [{"cell_size": 0.0}, {"cell_size": -1.0}, {"width": -1}, {"sample_tolerance": 0.0}],
    )
    def test_rejects_bad_values(self, kw: dict) -> None:
        with pytest.raises(ValueError):
            GridConfig(**kw)


class TestCoordinates:
    def test_coord_of_floors(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=5.0, width=2, height=2)
        assert grid.coord_of((0.0, 0.0, 0.0)) == (0, 0)
        assert grid.coord_of((4.99, 0.0, 5.0)) == (0, 1)
        assert grid.coord_of((-0.1, 0.0, 7.0)) == (-1, 1)

    def test_lookup_outside_is_none(self, clock: ManualClock) -> None:
        grid = build(clock, width=2, height=2)
        assert grid.chunk_at((-1, 0)) is None
        assert grid.chunk_at_world((100.0, 0.0, 100.0)) is None

    def test_window_is_inclusive(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=1.0, width=50, height=50)
        assert grid.window((25.0, 0.0, 25.0), 10.0) == ((15, 15), (35, 35))


class TestMarking:
    def test_mark_visited_also_marks_seen(self, clock: ManualClock) -> None:
        grid = build(clock, width=2, height=2)
        clock.advance(3.0)
        chunk = grid.mark_visited((1.0, 0.0, 1.0))
        assert chunk is not None
        assert chunk.last_visited == chunk.last_seen == 3.0

    def test_mark_visited_after_scan_keeps_equality(self, clock: ManualClock) -> None:
        grid = build(clock, width=1, height=1)
        clock.advance(1.0)
        grid.stamp_seen((0, 0), clock.now())
        clock.advance(1.0)
        chunk = grid.mark_visited((1.0, 0.0, 1.0))
        assert chunk is not None and chunk.last_seen == chunk.last_visited == 2.0

    def test_mark_seen_leaves_visited(self, clock: ManualClock) -> None:
        grid = build(clock, width=2, height=2)
        clock.advance(2.0)
        chunk = grid.mark_seen((1.0, 0.0, 1.0))
        assert chunk is not None
        assert chunk.last_seen == 2.0
        assert chunk.last_visited == -math.inf

    def test_marking_off_grid_is_a_noop(self, clock: ManualClock) -> None:
        grid = build(clock, width=1, height=1)
        assert grid.mark_visited((-50.0, 0.0, 0.0)) is None
        assert grid.mark_seen((50.0, 0.0, 50.0)) is None
        assert grid.stamp_target_seen((9, 9), 1.0) is None

    def test_timestamps_never_go_backwards(self, clock: ManualClock) -> None:
        grid = build(clock, width=1, height=1)
        grid.stamp_seen((0, 0), 5.0)
        grid.stamp_seen((0, 0), 3.0)
        grid.stamp_target_seen((0, 0), 4.0)
        grid.stamp_target_seen((0, 0), 1.0)
        chunk = grid.chunk_at((0, 0))
        assert chunk is not None
        assert chunk.last_seen == 5.0
        assert chunk.last_target_seen == 4.0

    def test_target_seen_is_separate_from_seen(self, clock: ManualClock) -> None:
        grid = build(clock, width=1, height=1)
        grid.stamp_target_seen((0, 0), 2.0)
        chunk = grid.chunk_at((0, 0))
        assert chunk is not None
        assert chunk.last_target_seen == 2.0
        assert chunk.last_seen == -math.inf


class TestSnapshots:
    def test_snapshot_is_frozen(self, clock: ManualClock) -> None:
        chunk = build(clock, width=1, height=1).chunk_at((0, 0))
        assert chunk is not None
        with pytest.raises(dataclasses.FrozenInstanceError):
            chunk.last_seen = 10.0  # type: ignore[misc]

    def test_snapshot_does_not_track_later_writes(self, clock: ManualClock) -> None:
        grid = build(clock, width=1, height=1)
        before = grid.chunk_at((0, 0))
        grid.stamp_seen((0, 0), 1.0)
        assert before is not None and before.last_seen == -math.inf
        after = grid.chunk_at((0, 0))
        assert after is not None and after.last_seen == 1.0

    def test_set_interest(self, clock: ManualClock) -> None:
        grid = build(clock, width=1, height=1)
        grid.set_interest((0, 0), 0.75)
        chunk = grid.chunk_at((0, 0))
        assert chunk is not None and chunk.interest == 0.75
        assert grid.set_interest((5, 5), 1.0) is None


class TestQueries:
    def test_least_recently_visited_tie_breaks_on_lowest_coord(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=5.0, width=2, height=2)
        chunk = grid.least_recently_visited()
        assert chunk is not None and chunk.coord == (0, 0)

    def test_least_recently_visited_follows_visits(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=5.0, width=2, height=2)
        clock.advance(1.0)
        grid.mark_visited((2.0, 0.0, 2.0))      # (0, 0)
        chunk = grid.least_recently_visited()
        assert chunk is not None and chunk.coord == (0, 1)

        for pos in ((2.0, 0.0, 7.0), (7.0, 0.0, 7.0)):   # (0, 1), (1, 1)
            clock.advance(1.0)
            grid.mark_visited(pos)
        chunk = grid.least_recently_visited()
        assert chunk is not None and chunk.coord == (1, 0)

        clock.advance(1.0)
        grid.mark_visited((7.0, 0.0, 2.0))      # (1, 0)
        chunk = grid.least_recently_visited()
        assert chunk is not None and chunk.coord == (0, 0)

    def test_empty_grid_has_no_answer(self, clock: ManualClock) -> None:
        grid = build(clock, width=0, height=0)
        assert grid.least_recently_visited() is None
        assert grid.latest_target_sighting() is None

    def test_latest_target_sighting(self, clock: ManualClock) -> None:
        grid = build(clock, cell_size=5.0, width=2, height=2)
        assert grid.latest_target_sighting() is None
        grid.stamp_target_seen((1, 0), 2.0)
        grid.stamp_target_seen((0, 1), 5.0)
        chunk = grid.latest_target_sighting()
        assert chunk is not None and chunk.coord == (0, 1)
