# vigil/world/camera.py
from __future__ import annotations
from dataclasses import dataclass
import pygame
from vigil import settings

@dataclass(slots=True)
class Camera2D:
    """Top-down view of the XZ plane. World X -> screen x, world Z -> screen y."""
    screen_w: int
    screen_h: int
    ppu: float = settings.PIXELS_PER_UNIT
    offset_x: float = 0.0    # world units at the screen's left edge
    offset_z: float = 0.0    # world units at the screen's top edge

    def move(self, dx: float, dz: float) -> None:
        self.offset_x += dx
        self.offset_z += dz

    def zoom(self, factor: float) -> None:
        cx, cz = self.screen_to_world(self.screen_w // 2, self.screen_h // 2)
        self.ppu = min(max(self.ppu * factor, 1.0), 64.0)
        self.center_on(cx, cz)

    # Conversions
    def world_to_screen(self, x: float, z: float) -> tuple[int, int]:
        return int((x - self.offset_x) * self.ppu), int((z - self.offset_z) * self.ppu)

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return sx / self.ppu + self.offset_x, sy / self.ppu + self.offset_z

    def length_to_screen(self, d: float) -> int:
        return max(1, int(d * self.ppu))

    def view_rect(self) -> pygame.Rect:
        return pygame.Rect(0, 0, self.screen_w, self.screen_h)

    def center_on(self, x: float, z: float) -> None:
        self.offset_x = x - self.screen_w / (2 * self.ppu)
        self.offset_z = z - self.screen_h / (2 * self.ppu)
