# vigil/scenes/patrol.py
from __future__ import annotations
import logging
import pygame
from dataclasses import dataclass, field
from typing import Optional

from vigil import settings
from vigil.core.clock import GameClock, MonotonicClock
from vigil.entities.intruder import Intruder
from vigil.entities.sentry import Sentry
from vigil.scenes.debug_overlay import DebugOverlay
from vigil.world.camera import Camera2D
from vigil.world.grid import GridConfig
from vigil.world.navigation import NavSurface
from vigil.world.occlusion import Box, BoxWorld

logger = logging.getLogger(__name__)

def demo_world() -> tuple[NavSurface, BoxWorld]:
    """A walled yard with a pit in the middle and a few pillars."""
    half = settings.GRID_WIDTH * settings.CELL_SIZE * 0.5
    nav = NavSurface.from_rects([
        (-half, -half, half, -8.0),
        (-half, 8.0, half, half),
        (-half, -8.0, -8.0, 8.0),
        (8.0, -8.0, half, 8.0),
    ])
    world = BoxWorld()
    h = settings.OBSTACLE_HEIGHT * 0.5
    for x, z in ((-20.0, -20.0), (20.0, -15.0), (-15.0, 20.0), (25.0, 25.0), (0.0, -30.0)):
        world.add(Box.around((x, h, z), (settings.OBSTACLE_SIZE, h, settings.OBSTACLE_SIZE)))
    return nav, world

@dataclass
class PatrolScene:
    """
    Demo layer:
    - Sentry roams to its least recently visited chunk
    - WASD moves the intruder, C toggles sneaking
    - O toggles a pillar under the mouse, arrows pan, wheel zooms
    - Debug overlay shows memory staleness, cones and line of sight
    """
    screen: pygame.Surface
    clock: GameClock = field(default_factory=MonotonicClock)
    nav: NavSurface = field(init=False)
    world: BoxWorld = field(init=False)
    intruder: Intruder = field(init=False)
    sentry: Sentry = field(init=False)
    camera: Camera2D = field(init=False)
    overlay: DebugOverlay = field(init=False)
    _patrolling: bool = field(default=True, init=False)

    def __post_init__(self) -> None:
        self.nav, self.world = demo_world()
        self.intruder = Intruder(position=(12.0, 0.0, 12.0))
        self.sentry = Sentry.spawn(
            (-12.0, 0.0, -12.0), 45.0, self.nav, self.world, self.intruder, self.clock,
            grid_config=GridConfig(),
        )
        sw, sh = self.screen.get_size()
        self.camera = Camera2D(sw, sh)
        self.camera.center_on(0.0, 0.0)
        grid, scanner = self.sentry.grid, self.sentry.scanner
        if grid is None or scanner is None:
            raise RuntimeError("sentry spawned without a grid or scanner")
        self.overlay = DebugOverlay(grid, scanner, self.intruder, self.world)
        self._font = pygame.font.Font(None, settings.HUD_FONT_SIZE)

    # ---- Input ----
    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            pygame.event.post(pygame.event.Event(pygame.QUIT))

        if event.type == pygame.KEYDOWN and event.key == pygame.K_c:
            self.intruder.toggle_sneak()

        if event.type == pygame.KEYDOWN and event.key == pygame.K_p:
            self._patrolling = not self._patrolling
            if not self._patrolling:
                self.sentry.set_destination(None)

        if event.type == pygame.KEYDOWN and event.key == pygame.K_o:
            wx, wz = self.camera.screen_to_world(*pygame.mouse.get_pos())
            self.toggle_obstacle(wx, wz)

        if event.type == pygame.MOUSEWHEEL:
            self.camera.zoom(1.1 if event.y > 0 else 1 / 1.1)

    def toggle_obstacle(self, x: float, z: float) -> None:
        existing = self.world.box_at(x, z, settings.OBSTACLE_MASK)
        if existing is not None:
            self.world.remove(existing)
            logger.debug("removed pillar at (%.1f, %.1f)", x, z)
            return
        h = settings.OBSTACLE_HEIGHT * 0.5
        self.world.add(Box.around((x, h, z), (settings.OBSTACLE_SIZE, h, settings.OBSTACLE_SIZE)))
        logger.debug("placed pillar at (%.1f, %.1f)", x, z)

    # ---- Fixed update ----
    def update(self, dt: float) -> None:
        keys = pygame.key.get_pressed()

        # camera pan
        cx = keys[pygame.K_RIGHT] - keys[pygame.K_LEFT]
        cz = keys[pygame.K_DOWN] - keys[pygame.K_UP]
        if cx or cz:
            pan = settings.CAMERA_PAN_SPEED / self.camera.ppu
            self.camera.move(cx * pan * dt, cz * pan * dt)

        # intruder
        dx = keys[pygame.K_d] - keys[pygame.K_a]
        dz = keys[pygame.K_s] - keys[pygame.K_w]
        self.intruder.move(dx, dz, dt)

        # sentry: head for the stalest chunk
        if self._patrolling and not self.sentry.is_moving() and self.sentry.grid is not None:
            stale = self.sentry.grid.least_recently_visited()
            if stale is not None:
                self.sentry.set_destination(stale.world_center)
        self.sentry.update(dt)

    # ---- Render ----
    def draw(self, surface: pygame.Surface, alpha: float) -> None:
        surface.fill(settings.BG_COLOR)
        now = self.clock.now()
        self.overlay.draw(surface, self.camera, now)

        sx, _, sz = self.sentry.position
        pygame.draw.circle(surface, settings.SENTRY_COLOR, self.camera.world_to_screen(sx, sz), 6)
        fx, _, fz = self.sentry.forward
        tip = self.camera.world_to_screen(sx + fx * 1.5, sz + fz * 1.5)
        pygame.draw.line(surface, settings.SENTRY_COLOR, self.camera.world_to_screen(sx, sz), tip, 2)

        ix, _, iz = self.intruder.position
        color = settings.INTRUDER_SNEAK_COLOR if self.intruder.sneaking else settings.INTRUDER_COLOR
        pygame.draw.circle(surface, color, self.camera.world_to_screen(ix, iz), 5)

        self._draw_hud(surface)

    def _draw_hud(self, surface: pygame.Surface) -> None:
        scanner = self.sentry.scanner
        result = scanner.last_result if scanner is not None else None
        lines = [
            f"chunks: {len(self.sentry.grid) if self.sentry.grid is not None else 0}",
            f"stance: {'sneaking' if self.intruder.sneaking else 'upright'}",
            _scan_line(result.target_visible if result else None, len(result.seen) if result else 0),
            "WASD move  C sneak  O pillar  P patrol  arrows pan  wheel zoom",
        ]
        texts = [self._font.render(s, True, settings.HUD_TEXT_RGB) for s in lines]
        w = max(t.get_width() for t in texts) + 16
        h = sum(t.get_height() for t in texts) + 12
        bg = pygame.Surface((w, h), pygame.SRCALPHA)
        bg.fill(settings.HUD_BG_RGBA)
        surface.blit(bg, (8, 8))
        y = 14
        for t in texts:
            surface.blit(t, (16, y))
            y += t.get_height()

def _scan_line(target_visible: Optional[bool], seen: int) -> str:
    if target_visible is None:
        return "scan: waiting"
    return f"scan: {seen} chunks seen, target {'VISIBLE' if target_visible else 'hidden'}"
