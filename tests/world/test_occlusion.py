"""Tests for vigil.world.occlusion."""

from __future__ import annotations

import pytest

from vigil import settings
from vigil.world.occlusion import Box, BoxWorld


def wall(z0: float, z1: float, layer: int = settings.OBSTACLE_LAYER) -> Box:
    return Box((-10.0, -10.0, z0), (10.0, 10.0, z1), layer)


class TestBoxWorldRaycast:
    def test_hits_wall_ahead(self) -> None:
        world = BoxWorld([wall(2.0, 3.0)])
        hit = world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK)
        assert hit is not None
        assert hit.distance == pytest.approx(2.0)
        assert hit.normal == (0.0, 0.0, -1.0)

    def test_nearest_of_two(self) -> None:
        world = BoxWorld([wall(6.0, 7.0), wall(2.0, 3.0)])
        hit = world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK)
        assert hit is not None and hit.distance == pytest.approx(2.0)

    def test_beyond_max_distance(self) -> None:
        world = BoxWorld([wall(20.0, 21.0)])
        assert world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK) is None

    def test_mask_filters_layers(self) -> None:
        world = BoxWorld([wall(2.0, 3.0, settings.TARGET_LAYER)])
        assert world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK) is None
        assert world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, 1 << settings.TARGET_LAYER) is not None

    def test_behind_origin_ignored(self) -> None:
        world = BoxWorld([wall(-3.0, -2.0)])
        assert world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK) is None

    def test_origin_inside_box_ignored(self) -> None:
        world = BoxWorld([wall(-1.0, 1.0)])
        assert world.raycast((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK) is None

    def test_ray_passing_over_low_box(self) -> None:
        world = BoxWorld([Box((-1.0, 0.0, 2.0), (1.0, 1.0, 3.0))])
        assert world.raycast((0.0, 1.5, 0.0), (0.0, 0.0, 1.0), 10.0, settings.OBSTACLE_MASK) is None


class TestBoxWorldEditing:
    def test_box_at_and_remove(self) -> None:
        box = Box.around((5.0, 1.0, 5.0), (1.0, 1.0, 1.0))
        world = BoxWorld()
        world.add(box)
        assert world.box_at(5.5, 4.5) is box
        world.remove(box)
        assert world.box_at(5.5, 4.5) is None

    def test_inverted_box_rejected(self) -> None:
        with pytest.raises(ValueError):
            Box((1.0, 0.0, 0.0), (0.0, 1.0, 1.0))
