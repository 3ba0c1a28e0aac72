"""
Procedural wall textures, one per material code
Generated at startup, no image files required
"""

import math
import random
import pygame
from utils.colors import MATERIAL_COLORS, COLOR_MATERIAL_DEFAULT
from utils.helpers import clamp

# Pattern used for each material code
MATERIAL_PATTERNS = {
    1: 'brick',
    2: 'stone',
    3: 'metal',
    4: 'wood',
    5: 'stone',
    6: 'tile',
    7: 'brick',
    8: 'brick',
    9: 'solid',
}


def _jitter(color, amount, rng):
    return tuple(int(clamp(c + rng.randint(-amount, amount), 0, 255)) for c in color)


class TextureManager:
    """
    Builds and caches one square texture per material code

    Unknown material codes get a plain default texture.
    """

    def __init__(self, texture_size=64, seed=42):
        """
        Args:
            texture_size: Width and height of each texture in pixels
            seed: Seed for reproducible patterns
        """
        self.texture_size = texture_size
        self._seed = seed
        self._cache = {}

    def get_material_texture(self, material_id):
        """
        Texture for a cell code

        Returns:
            pygame.Surface of texture_size x texture_size
        """
        if material_id not in self._cache:
            pattern = MATERIAL_PATTERNS.get(material_id, 'solid')
            color = MATERIAL_COLORS.get(material_id, COLOR_MATERIAL_DEFAULT)
            rng = random.Random(self._seed + material_id)
            builder = getattr(self, f"_generate_{pattern}")
            self._cache[material_id] = builder(color, rng)
        return self._cache[material_id]

    def _generate_brick(self, base_color, rng):
        size = self.texture_size
        surface = pygame.Surface((size, size))
        surface.fill((60, 55, 50))  # Mortar

        brick_w = size // 4
        brick_h = size // 8
        gap = 2

        for row in range(size // brick_h + 1):
            # Offset every other row
            offset = brick_w // 2 if row % 2 else 0
            for col in range(-1, size // brick_w + 1):
                rect = pygame.Rect(col * brick_w + offset + gap // 2, row * brick_h + gap // 2,
                                   brick_w - gap, brick_h - gap)
                rect = rect.clip(surface.get_rect())
                if rect.width > 0 and rect.height > 0:
                    pygame.draw.rect(surface, _jitter(base_color, 18, rng), rect)
        return surface

    def _generate_stone(self, base_color, rng):
        size = self.texture_size
        surface = pygame.Surface((size, size))

        # Nearest-seed cells with wrap-around so the texture tiles
        seeds = [(rng.randrange(size), rng.randrange(size), _jitter(base_color, 28, rng))
                 for _ in range(8)]
        for y in range(size):
            for x in range(size):
                best = None
                second = None
                color = base_color
                for sx, sy, scolor in seeds:
                    dx = min(abs(x - sx), size - abs(x - sx))
                    dy = min(abs(y - sy), size - abs(y - sy))
                    d = dx * dx + dy * dy
                    if best is None or d < best:
                        second = best
                        best = d
                        color = scolor
                    elif second is None or d < second:
                        second = d
                if second is not None and second - best < 40:
                    color = tuple(max(0, c - 40) for c in color)  # Crack
                surface.set_at((x, y), color)
        return surface

    def _generate_metal(self, base_color, rng):
        size = self.texture_size
        surface = pygame.Surface((size, size))

        # Brushed horizontal streaks
        for y in range(size):
            streak = rng.randint(-15, 15)
            for x in range(size):
                noise = streak + rng.randint(-5, 5)
                surface.set_at((x, y), tuple(int(clamp(c + noise, 0, 255)) for c in base_color))

        rivet = tuple(max(0, c - 30) for c in base_color)
        for rx, ry in ((size // 8, size // 8), (size * 7 // 8, size // 8),
                       (size // 8, size * 7 // 8), (size * 7 // 8, size * 7 // 8)):
            pygame.draw.circle(surface, rivet, (rx, ry), 3)
        return surface

    def _generate_wood(self, base_color, rng):
        size = self.texture_size
        surface = pygame.Surface((size, size))
        for y in range(size):
            ring = math.sin(y * 0.3) * 10
            for x in range(size):
                grain = math.sin((x + ring) * 0.5) * 15
                noise = rng.randint(-8, 8)
                surface.set_at((x, y), (
                    int(clamp(base_color[0] + grain + noise, 0, 255)),
                    int(clamp(base_color[1] + grain * 0.7 + noise, 0, 255)),
                    int(clamp(base_color[2] + grain * 0.5 + noise, 0, 255)),
                ))
        return surface

    def _generate_tile(self, base_color, rng):
        size = self.texture_size
        surface = pygame.Surface((size, size))
        surface.fill((40, 40, 48))  # Grout
        step = size // 4
        for ty in range(4):
            for tx in range(4):
                pygame.draw.rect(surface, _jitter(base_color, 12, rng),
                                 (tx * step + 1, ty * step + 1, step - 2, step - 2))
        return surface

    def _generate_solid(self, base_color, rng):
        surface = pygame.Surface((self.texture_size, self.texture_size))
        surface.fill(base_color)
        return surface
