# vigil/core/clock.py
from __future__ import annotations
import time
import pygame
from dataclasses import dataclass, field
from typing import Protocol
from vigil.settings import FIXED_DT, MAX_STEPS, DT_CLAMP

class GameClock(Protocol):
    """Source of chunk timestamps, in seconds."""
    def now(self) -> float: ...

@dataclass
class MonotonicClock:
    """Seconds since the clock was created. Never goes backwards."""
    _start: float = field(default_factory=time.monotonic, init=False)

    def now(self) -> float:
        return time.monotonic() - self._start

@dataclass
class ManualClock:
    """Clock that only moves when told to. Used for replays and tests."""
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError("ManualClock cannot run backwards")
        self.t += dt
        return self.t

@dataclass
class FrameStepper:
    """Splits real frame time into fixed-size world updates for the render loop.

    Scanning does not run off this; it keeps its own interval task.
    """
    step: float = FIXED_DT
    max_steps: int = MAX_STEPS
    clamp: float = DT_CLAMP
    backlog: float = 0.0
    _frames: pygame.time.Clock = field(default_factory=pygame.time.Clock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.step <= 0:
            raise ValueError("step must be > 0")

    def tick(self) -> tuple[int, float]:
        """Wall time since the last frame -> (updates to run, render blend in [0, 1])."""
        return self.advance(self._frames.tick() / 1000.0)

    def advance(self, elapsed: float) -> tuple[int, float]:
        self.backlog += min(max(elapsed, 0.0), self.clamp)
        steps = min(int(self.backlog // self.step), self.max_steps)
        self.backlog -= steps * self.step
        if steps == self.max_steps:
            # at most one step of backlog survives a capped frame
            self.backlog = min(self.backlog, self.step)
        return steps, min(self.backlog / self.step, 1.0)
