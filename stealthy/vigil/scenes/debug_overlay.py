# vigil/scenes/debug_overlay.py
from __future__ import annotations
import math
import pygame
from dataclasses import dataclass
from typing import Optional
from vigil import settings
from vigil.core.vec import Vec3, sub
from vigil.perception.scanner import TargetProvider, VisibilityScanner
from vigil.world.camera import Camera2D
from vigil.world.fog import seen_color, visited_color
from vigil.world.grid import ChunkGrid
from vigil.world.occlusion import BoxWorld

@dataclass
class DebugOverlay:
    """Read-only renderer for chunk memory, FOV cones and line of sight.

    Draws from snapshots only; nothing here writes to the grid or scanner.
    """
    grid: ChunkGrid
    scanner: VisibilityScanner
    target: Optional[TargetProvider] = None
    world: Optional[BoxWorld] = None
    max_age: float = settings.DEBUG_MAX_AGE

    def draw(self, surface: pygame.Surface, camera: Camera2D, now: float) -> None:
        if not settings.DEBUG_DRAW:
            return
        self.draw_grid_lines(surface, camera)
        self.draw_chunks(surface, camera, now)
        if self.world is not None:
            self.draw_obstacles(surface, camera)
        self.draw_cones(surface, camera)
        if self.target is not None:
            self.draw_line_of_sight(surface, camera)

    # --- grid ---
    def draw_grid_lines(self, surface: pygame.Surface, camera: Camera2D) -> None:
        cfg = self.grid.config
        ox, oz = self.grid.origin
        cs = cfg.cell_size
        x0, z0 = camera.world_to_screen(ox, oz)
        x1, z1 = camera.world_to_screen(ox + cfg.width * cs, oz + cfg.height * cs)
        for c in range(cfg.width + 1):
            xs, _ = camera.world_to_screen(ox + c * cs, oz)
            pygame.draw.line(surface, settings.GRID_COLOR, (xs, z0), (xs, z1), 1)
        for r in range(cfg.height + 1):
            _, zs = camera.world_to_screen(ox, oz + r * cs)
            pygame.draw.line(surface, settings.GRID_COLOR, (x0, zs), (x1, zs), 1)

    def draw_chunks(self, surface: pygame.Surface, camera: Camera2D, now: float) -> None:
        sw, sh = surface.get_size()
        overlay = pygame.Surface((sw, sh), pygame.SRCALPHA)
        cs = self.grid.cell_size
        inner = camera.length_to_screen(cs * 0.4)
        outer = camera.length_to_screen(cs * 0.9)
        latest = self.grid.latest_target_sighting()

        for chunk in self.grid.chunks():
            cx, _, cz = chunk.world_center
            xs, ys = camera.world_to_screen(cx, cz)

            # VISITED: small solid square
            rect = pygame.Rect(0, 0, inner, inner)
            rect.center = (xs, ys)
            overlay.fill((*visited_color(chunk.last_visited, now, self.max_age), settings.VISITED_ALPHA), rect)

            # SEEN: outline
            rect = pygame.Rect(0, 0, outer, outer)
            rect.center = (xs, ys)
            pygame.draw.rect(overlay, seen_color(chunk.last_seen, now, self.max_age), rect, width=1)

        if latest is not None:
            cx, _, cz = latest.world_center
            pygame.draw.circle(overlay, settings.TARGET_SEEN_RGB, camera.world_to_screen(cx, cz), max(3, inner // 3), width=2)

        surface.blit(overlay, (0, 0))

    def draw_obstacles(self, surface: pygame.Surface, camera: Camera2D) -> None:
        if self.world is None:
            return
        sw, sh = surface.get_size()
        overlay = pygame.Surface((sw, sh), pygame.SRCALPHA)
        for box in self.world.boxes:
            x0, z0 = camera.world_to_screen(box.min[0], box.min[2])
            x1, z1 = camera.world_to_screen(box.max[0], box.max[2])
            rect = pygame.Rect(x0, z0, max(1, x1 - x0), max(1, z1 - z0))
            overlay.fill(settings.OBSTACLE_RGBA, rect)
            pygame.draw.rect(overlay, settings.OBSTACLE_BORDER_RGB, rect, width=1)
        surface.blit(overlay, (0, 0))

    # --- FOV ---
    def draw_cones(self, surface: pygame.Surface, camera: Camera2D) -> None:
        transform = self.scanner.transform
        if transform is None:
            return
        sw, sh = surface.get_size()
        overlay = pygame.Surface((sw, sh), pygame.SRCALPHA)
        cfg = self.scanner.config
        for cone, color in ((cfg.close, settings.CLOSE_CONE_RGBA), (cfg.far, settings.FAR_CONE_RGBA)):
            points = cone_outline(transform.position, transform.forward, cone.distance, cone.angle)
            pygame.draw.lines(overlay, color, True, [camera.world_to_screen(x, z) for x, z in points], 2)
        surface.blit(overlay, (0, 0))

    def draw_line_of_sight(self, surface: pygame.Surface, camera: Camera2D) -> None:
        transform, target = self.scanner.transform, self.target
        if transform is None or target is None:
            return
        eye = transform.position
        anchor = target.anchor()
        visible = self.scanner.is_visible(sub(anchor, eye))
        color = settings.LOS_CLEAR_RGBA if visible else settings.LOS_BLOCKED_RGBA
        sw, sh = surface.get_size()
        overlay = pygame.Surface((sw, sh), pygame.SRCALPHA)
        pygame.draw.line(overlay, color, camera.world_to_screen(eye[0], eye[2]), camera.world_to_screen(anchor[0], anchor[2]), 2)
        surface.blit(overlay, (0, 0))

def cone_outline(origin: Vec3, forward: Vec3, distance: float, angle: float,
                 segments: int = settings.CONE_SEGMENTS) -> list[tuple[float, float]]:
    """Closed XZ polygon: origin, then the arc from -angle/2 to +angle/2 around forward."""
    ox, _, oz = origin
    base = math.atan2(forward[0], forward[2])
    half = math.radians(angle) * 0.5
    points = [(ox, oz)]
    for i in range(segments + 1):
        a = base - half + (i / segments) * 2 * half
        points.append((ox + math.sin(a) * distance, oz + math.cos(a) * distance))
    return points
