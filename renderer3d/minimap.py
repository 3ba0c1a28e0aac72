"""
Minimap - top-down overlay of the grid, the player pose and the ray fan
Also maps mouse clicks back to grid cells for painting.
"""

import pygame
from utils.colors import (
    COLOR_MINIMAP_BG, COLOR_MINIMAP_BORDER, COLOR_MINIMAP_EMPTY, COLOR_PLAYER,
    COLOR_RAY, COLOR_TEXT_DIM, MATERIAL_COLORS, COLOR_MATERIAL_DEFAULT
)
from utils.constants import MINIMAP_SIZE


class Minimap3D:
    """
    Minimap overlay for the first-person view
    """

    def __init__(self, width=MINIMAP_SIZE, height=MINIMAP_SIZE, ray_stride=8):
        """
        Args:
            width, height: Minimap dimensions in pixels
            ray_stride: Draw every n-th ray of the fan
        """
        self.width = width
        self.height = height
        self.margin = 10
        self.padding = 5
        self.ray_stride = max(1, ray_stride)
        self.surface = pygame.Surface((width, height), pygame.SRCALPHA)
        self._origin = (0, 0)
        self._scale = (1.0, 1.0)

    def _layout(self, screen, grid, position):
        screen_w, screen_h = screen.get_size()
        if position == 'top-left':
            x = self.margin
        else:
            x = screen_w - self.width - self.margin
        y = self.margin
        self._origin = (x, y)
        inner_w = self.width - 2 * self.padding
        inner_h = self.height - 2 * self.padding - 12
        self._scale = (inner_w / grid.world_width, inner_h / grid.world_height)

    def _to_map(self, wx, wy):
        sx, sy = self._scale
        return int(wx * sx) + self.padding, int(wy * sy) + self.padding

    def render(self, screen, frame, grid, position='top-right'):
        """
        Render minimap on screen

        Args:
            screen: pygame.Surface to render to
            frame: game.simulation.Frame (pose and ray hits)
            grid: GridMap
            position: 'top-right' or 'top-left'
        """
        self._layout(screen, grid, position)
        self.surface.fill((0, 0, 0, 0))
        pygame.draw.rect(self.surface, COLOR_MINIMAP_BG, (0, 0, self.width, self.height), border_radius=5)

        self._draw_cells(grid)
        self._draw_rays(frame)
        self._draw_player(frame.pose)

        pygame.draw.rect(self.surface, COLOR_MINIMAP_BORDER, (0, 0, self.width, self.height), 2, border_radius=5)
        font = pygame.font.SysFont("consolas", 10)
        label = font.render("MAP  (click: paint)", True, COLOR_TEXT_DIM)
        self.surface.blit(label, (5, self.height - 14))

        screen.blit(self.surface, self._origin)

    def _draw_cells(self, grid):
        for cell_y, row in enumerate(grid.rows()):
            for cell_x, value in enumerate(row):
                x0, y0 = self._to_map(cell_x * grid.cell_w, cell_y * grid.cell_h)
                x1, y1 = self._to_map((cell_x + 1) * grid.cell_w, (cell_y + 1) * grid.cell_h)
                if value == 0:
                    color = COLOR_MINIMAP_EMPTY
                else:
                    color = MATERIAL_COLORS.get(value, COLOR_MATERIAL_DEFAULT)
                pygame.draw.rect(self.surface, color, (x0, y0, max(1, x1 - x0), max(1, y1 - y0)))

    def _draw_rays(self, frame):
        start = self._to_map(*frame.pose.position)
        for i in range(0, len(frame.hits), self.ray_stride):
            hit = frame.hits[i]
            if hit.hit:
                pygame.draw.line(self.surface, COLOR_RAY, start, self._to_map(*hit.hit_point), 1)

    def _draw_player(self, pose):
        px, py = self._to_map(*pose.position)
        dx, dy = pose.direction
        pygame.draw.line(self.surface, (255, 255, 255), (px, py), (px + int(dx * 8), py + int(dy * 8)), 2)
        pygame.draw.circle(self.surface, COLOR_PLAYER, (px, py), 3)

    def cell_at(self, screen_pos, grid):
        """
        Grid cell under a screen position, or None outside the minimap

        Args:
            screen_pos: (x, y) pixel position on the screen
            grid: GridMap
        """
        ox, oy = self._origin
        mx = screen_pos[0] - ox - self.padding
        my = screen_pos[1] - oy - self.padding
        sx, sy = self._scale
        if mx < 0 or my < 0:
            return None
        cell_x, cell_y = grid.cell_of(mx / sx, my / sy)
        if not grid.in_bounds(cell_x, cell_y):
            return None
        return cell_x, cell_y
