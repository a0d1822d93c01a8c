import numpy as np
from typing import List, Tuple, Optional, Sequence
from dataclasses import dataclass, field
import logging
import os

import ballpit as P
from ballpit.loop import BodySnapshot, SimulationLoop

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame

logger = logging.getLogger("ballpit")


@dataclass
class AppearanceConfig:
    """Nuisance variables. Affect pixels, never physics."""
    palette: List[Tuple[int, int, int]] = field(
        default_factory=lambda: list(P.AVATAR_COLORS))
    bg_color: Tuple[int, int, int] = P.BG_COLOR
    face_color: Tuple[int, int, int] = P.FACE_COLOR
    draw_faces: bool = True
    outline: bool = False


class Renderer:
    """Maps body snapshots → pixels. Never touches body state."""

    def __init__(self, config: Optional[AppearanceConfig] = None):
        self.config = config or AppearanceConfig()
        self._display_initialized = False

    def color_for(self, visual_id: int) -> Tuple[int, int, int]:
        palette = self.config.palette
        return palette[visual_id % len(palette)]

    def _draw_face(self, surface, cx: float, cy: float, r: float):
        # Avatar art is laid out on a 100x100 box covering 75% of the body.
        s = 1.5 * r / 100.0
        ox, oy = cx - 50 * s, cy - 50 * s
        face = self.config.face_color
        eye_r = max(1, int(8 * s))
        pygame.draw.circle(surface, face, (int(ox + 30 * s), int(oy + 40 * s)), eye_r)
        pygame.draw.circle(surface, face, (int(ox + 70 * s), int(oy + 40 * s)), eye_r)
        pygame.draw.ellipse(surface, face,
                            pygame.Rect(int(ox + 38 * s), int(oy + 47 * s),
                                        max(1, int(24 * s)), max(1, int(16 * s))))
        glint_r = max(1, int(2 * s))
        pygame.draw.circle(surface, (255, 255, 255), (int(ox + 25 * s), int(oy + 35 * s)), glint_r)
        pygame.draw.circle(surface, (255, 255, 255), (int(ox + 65 * s), int(oy + 35 * s)), glint_r)

    def draw(self, surface, snapshot: Sequence[BodySnapshot]):
        surface.fill(self.config.bg_color)
        for body in snapshot:
            cx, cy = body.x + body.radius, body.y + body.radius
            pr = max(1, int(body.radius))
            color = self.color_for(body.visual_id)
            if self.config.outline:
                pygame.draw.circle(surface, color, (int(cx), int(cy)), pr, 2)
            else:
                pygame.draw.circle(surface, color, (int(cx), int(cy)), pr)
            if self.config.draw_faces:
                self._draw_face(surface, cx, cy, body.radius)

    def render(self, snapshot: Sequence[BodySnapshot],
               viewport: Tuple[float, float]) -> np.ndarray:
        """Render single frame → (H, W, 3) uint8."""
        w, h = int(viewport[0]), int(viewport[1])
        surface = pygame.Surface((w, h))
        self.draw(surface, snapshot)
        return pygame.surfarray.array3d(surface).transpose(1, 0, 2)

    def record(self, loop: SimulationLoop, n_frames: int) -> np.ndarray:
        """Step the loop headless and render every tick → (T, H, W, 3) uint8."""
        w, h = int(loop.config.width), int(loop.config.height)
        frames = np.zeros((n_frames, h, w, 3), dtype=np.uint8)
        loop.start()
        for t in range(n_frames):
            loop.on_refresh()
            frames[t] = self.render(loop.snapshot(), loop.config.viewport)
        return frames

    def handle_resize(self, loop: SimulationLoop, width: int,
                      height: int) -> Tuple[int, int]:
        """Recreate the pit for a new window size.

        Returns the window size to use: the requested one, or the previous
        viewport when the pit cannot fit the requested size.
        """
        try:
            loop.reset((width, height))
        except ValueError as e:
            logger.warning(f"Ignoring resize to {width}x{height}: {e}")
        return int(loop.config.width), int(loop.config.height)

    def play(self, loop: SimulationLoop, fps: int = P.FPS):
        """Drive the loop from the window's frame clock. Q quits, SPACE pauses."""
        if not self._display_initialized:
            pygame.init()
            self._display_initialized = True

        size = (int(loop.config.width), int(loop.config.height))
        screen = pygame.display.set_mode(size, pygame.RESIZABLE)
        pygame.display.set_caption('Ballpit')
        clock = pygame.time.Clock()

        loop.start()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_q:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                    if loop.running:
                        loop.stop()
                    else:
                        loop.start()
                elif event.type == pygame.VIDEORESIZE:
                    size = self.handle_resize(loop, event.w, event.h)
                    if size != (event.w, event.h):
                        screen = pygame.display.set_mode(size, pygame.RESIZABLE)

            loop.on_refresh()
            self.draw(screen, loop.snapshot())
            pygame.display.flip()
            clock.tick(fps)

        loop.stop()
        pygame.quit()
        self._display_initialized = False


def save_frames(frames: np.ndarray, path: str):
    """Save frames as individual PNGs."""
    os.makedirs(path, exist_ok=True)
    for t in range(len(frames)):
        surf = pygame.surfarray.make_surface(frames[t].transpose(1, 0, 2))
        pygame.image.save(surf, os.path.join(path, f'frame_{t:05d}.png'))
