# pygame_runner.py
"""
Pygame-CE viewer for the Ripple wave simulation.

Advances the simulation a few timesteps per frame and draws the current
field scaled to the window. The simulation runs exactly as in main.py;
the viewer only reads the state between steps.

Controls:
- Space: pause / resume
- R: restart from the initial condition
- ESC: quit
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Tuple

try:
    import pygame
except ImportError as exc:
    raise SystemExit("pygame-ce is required. Install with: pip install pygame-ce") from exc

from config import GRID_WIDTH, GRID_HEIGHT, TIMESTEPS, SPLASH_HEIGHT
from exceptions import RippleError
from render.colors import blend_colors, field_to_rgb
from render.config import (
    WINDOW_MAX_SIZE,
    STATUS_BAR_HEIGHT,
    FONT_SIZE,
    TARGET_FPS,
    STEPS_PER_FRAME,
    COLOR_BG_DARK,
    COLOR_WATER_REST,
    COLOR_TEXT_HIGHLIGHT,
)
from render.primitives import draw_text, rgb_to_surface
from simulation.config import BACKEND_NAMES, DEFAULT_BACKEND
from simulation.dispatch import StencilBackend, get_backend
from simulation.stepping import prepare_backend, step
from wave_state import WaveParameters, WaveState, build_initial_state


def window_size(width: int, height: int) -> Tuple[int, int]:
    """Map viewport size preserving the grid aspect ratio."""
    scale = WINDOW_MAX_SIZE / max(width, height)
    return max(1, int(width * scale)), max(1, int(height * scale))


def restart(params: WaveParameters, backend: StencilBackend) -> WaveState:
    state = build_initial_state(params)
    prepare_backend(state, backend)
    return state


def run(params: WaveParameters, backend_name: str, steps_per_frame: int) -> None:
    pygame.init()
    map_size = window_size(params.width, params.height)
    screen = pygame.display.set_mode((map_size[0], map_size[1] + STATUS_BAR_HEIGHT))
    pygame.display.set_caption("Ripple")
    font = pygame.font.Font(None, FONT_SIZE)
    clock = pygame.time.Clock()
    status_bg = blend_colors(COLOR_BG_DARK, COLOR_WATER_REST, 0.2)

    with get_backend(backend_name) as backend:
        state = restart(params, backend)
        # Fixed colour scale so fading waves visibly fade
        scale = SPLASH_HEIGHT / 4
        paused = False
        running = True

        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_r:
                        state = restart(params, backend)

            if not paused:
                for _ in range(steps_per_frame):
                    if state.timestep >= params.timesteps:
                        break
                    step(state, backend)

            rgb = field_to_rgb(state.current, state.elevation, scale=scale)
            screen.blit(rgb_to_surface(rgb, map_size), (0, 0))

            bar = pygame.Rect(0, map_size[1], map_size[0], STATUS_BAR_HEIGHT)
            screen.fill(status_bg, bar)
            status = f"t={state.timestep}/{params.timesteps}  {backend.name}  {clock.get_fps():.0f} fps"
            if paused:
                status += "  [paused]"
            draw_text(screen, font, status, (8, map_size[1] + 6), color=COLOR_TEXT_HIGHLIGHT)

            pygame.display.flip()
            clock.tick(TARGET_FPS)

    pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive viewer for the Ripple wave simulation")
    parser.add_argument("--width", type=int, default=GRID_WIDTH)
    parser.add_argument("--height", type=int, default=GRID_HEIGHT)
    parser.add_argument("--timesteps", type=int, default=TIMESTEPS)
    parser.add_argument("--backend", choices=BACKEND_NAMES, default=DEFAULT_BACKEND)
    parser.add_argument("--steps-per-frame", type=int, default=STEPS_PER_FRAME)
    args = parser.parse_args(argv)

    try:
        params = WaveParameters(width=args.width, height=args.height, timesteps=args.timesteps).validate()
        run(params, args.backend, max(1, args.steps_per_frame))
    except RippleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
