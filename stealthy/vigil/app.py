# vigil/app.py
from __future__ import annotations
import asyncio
import logging
import pygame
from vigil import settings
from vigil.core.clock import FrameStepper
from vigil.scenes.patrol import PatrolScene

logger = logging.getLogger(__name__)

async def run() -> None:
    pygame.init()
    pygame.display.set_caption(settings.WINDOW_TITLE)
    screen = pygame.display.set_mode(settings.SCREEN_SIZE)
    stepper = FrameStepper()

    scene = PatrolScene(screen)
    scene.sentry.activate()
    logger.info("demo running, scan interval %.2fs", settings.SCAN_INTERVAL)

    running = True
    try:
        while running:
            # -- Input --
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                else:
                    scene.handle_event(event)

            # -- Fixed updates --
            steps, alpha = stepper.tick()
            for _ in range(steps):
                scene.update(stepper.step)

            # -- Render --
            scene.draw(screen, alpha)
            pygame.display.flip()

            # hand the loop to the scan task between frames
            await asyncio.sleep(settings.FRAME_SLEEP)
    finally:
        await scene.sentry.aclose()
        pygame.quit()

def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
    asyncio.run(run())

if __name__ == "__main__":
    main()
