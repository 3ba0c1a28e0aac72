"""
Tilecaster - first-person raycaster over a tile grid
pygame front end: window, input sampling, frame timing
"""

import argparse
import logging
import sys
from pathlib import Path

import pygame

from config import GAME_TITLE, GAME_VERSION, RaycastSettings, load_settings
from game.commands import InputCommands
from game.player import Pose
from game.simulation import Simulation
from level import LEVELS_DIR, load_level, save_level
from renderer3d.renderer import Renderer3D
from renderer3d.minimap import Minimap3D
from utils.colors import COLOR_BG, COLOR_TEXT
from utils.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FPS, STRATEGY_DDA, STRATEGY_MARCH

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = LEVELS_DIR / "demo.txt"
HUD_H = 24


def find_start(grid):
    """World position at the center of the first empty cell, row by row"""
    for cell_y in range(grid.height):
        for cell_x in range(grid.width):
            if not grid.is_solid(cell_x, cell_y):
                return grid.cell_center(cell_x, cell_y)
    raise ValueError("Level has no empty cell to start in")


class RaycasterApp:
    """
    Main application class
    """

    def __init__(self, level_path, settings, width=SCREEN_WIDTH, height=SCREEN_HEIGHT):
        pygame.init()
        self.screen_w = width
        self.screen_h = height
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(f"{GAME_TITLE} v{GAME_VERSION}")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 14)
        self.running = True

        self.level_path = Path(level_path)
        self.settings = settings.replace(num_rays=width) if settings.num_rays != width else settings
        self.grid = load_level(self.level_path, cell_size=self.settings.cell_size)
        x, y = find_start(self.grid)
        self.simulation = Simulation(self.grid, Pose(x, y), self.settings)

        self.render_h = height - HUD_H
        self.renderer = Renderer3D(width, self.render_h)
        self.minimap = Minimap3D()
        self.brush = 1
        self.frame = self.simulation.render_frame(self.render_h)

    def _sample_commands(self):
        """Read held keys into this tick's command set"""
        keys = pygame.key.get_pressed()
        return InputCommands(
            move_forward=keys[pygame.K_w] or keys[pygame.K_UP],
            move_backward=keys[pygame.K_s] or keys[pygame.K_DOWN],
            strafe_left=keys[pygame.K_a],
            strafe_right=keys[pygame.K_d],
            rotate_left=keys[pygame.K_LEFT] or keys[pygame.K_q],
            rotate_right=keys[pygame.K_RIGHT] or keys[pygame.K_e],
        )

    def _toggle_strategy(self):
        strategy = STRATEGY_MARCH if self.settings.strategy == STRATEGY_DDA else STRATEGY_DDA
        self.settings = self.settings.replace(strategy=strategy)
        pose = self.simulation.pose.copy()
        self.simulation = Simulation(self.grid, pose, self.settings)
        logger.info("Switched ray strategy to %s", strategy)

    def handle_events(self):
        """Handle window and one-shot input events; returns paint requests"""
        paints = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_TAB:
                    self._toggle_strategy()
                elif event.key == pygame.K_F5:
                    save_level(self.grid, self.level_path)
                elif pygame.K_1 <= event.key <= pygame.K_9:
                    self.brush = event.key - pygame.K_0
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 3):
                cell = self.minimap.cell_at(event.pos, self.grid)
                if cell is not None:
                    value = self.brush if event.button == 1 else 0
                    paints.append((cell[0], cell[1], value))
        return paints

    def update(self, dt):
        paints = self.handle_events()
        commands = self._sample_commands()
        for request in paints:
            commands.paint_cell_at(*request)
        self.frame = self.simulation.tick(commands, dt, self.render_h)

    def render(self):
        self.screen.fill(COLOR_BG)
        self.renderer.render(self.screen, self.frame)
        self.minimap.render(self.screen, self.frame, self.grid)
        self._draw_hud()
        pygame.display.flip()

    def _draw_hud(self):
        pose = self.frame.pose
        text = (f"{self.settings.strategy.upper()}  pos=({pose.x:.0f}, {pose.y:.0f})  "
                f"angle={pose.angle:.0f}  brush={self.brush}  fps={self.clock.get_fps():.0f}  "
                f"[WASD/QE move, TAB strategy, 1-9 brush, F5 save]")
        label = self.font.render(text, True, COLOR_TEXT)
        self.screen.blit(label, (8, self.screen_h - HUD_H + 4))

    def run(self):
        """Main loop"""
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.update(dt)
            self.render()
        pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=f"{GAME_TITLE} - tile grid raycaster")
    parser.add_argument("--level", default=str(DEFAULT_LEVEL), help="Level text file")
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument("--strategy", choices=(STRATEGY_DDA, STRATEGY_MARCH),
                        help="Ray intersection strategy")
    parser.add_argument("--width", type=int, default=SCREEN_WIDTH)
    parser.add_argument("--height", type=int, default=SCREEN_HEIGHT)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    """Entry point"""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = load_settings(args.settings) if args.settings else RaycastSettings()
    if args.strategy:
        settings = settings.replace(strategy=args.strategy)

    app = RaycasterApp(args.level, settings, args.width, args.height)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
