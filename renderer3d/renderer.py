"""
3D Scene Renderer - draws a Frame of column descriptors
NumPy frame buffer blitted through surfarray, column fill in Numba.
"""

import pygame
import pygame.surfarray
import numpy as np
from numba import njit, int32, float64
from utils.colors import COLOR_CEILING, COLOR_FLOOR, COLOR_VOID
from .textures import TextureManager

# Columns of the packed descriptor array
_PACK_HEIGHT = 0
_PACK_SHADE = 1
_PACK_U = 2
_PACK_SLOT = 3
_PACK_VOID = 4


@njit(cache=True)
def _numba_draw_columns(packed, frame_buffer, atlas, render_height, tex_size,
                        void_r, void_g, void_b):
    """
    Fill wall slices into the frame buffer (Numba JIT compiled)

    Args:
        packed: numpy array (num_columns, 5): [height, shade, u, atlas slot, void]
        frame_buffer: numpy array (width, height, 3) uint8
        atlas: numpy array (materials, tex_size, tex_size, 3) uint8
        render_height: Screen height of the 3D view
        tex_size: Texture dimension
        void_r, void_g, void_b: Color of void columns
    """
    num_columns = packed.shape[0]
    width = frame_buffer.shape[0]
    half_h = float64(render_height) / 2.0

    for col in range(num_columns):
        x0 = int32(col * width // num_columns)
        x1 = int32((col + 1) * width // num_columns)
        if x1 <= x0:
            x1 = x0 + 1
        if x1 > width:
            x1 = width

        full_height = packed[col, 0]
        if full_height <= 0.0:
            continue

        full_top = half_h - full_height / 2.0
        draw_start = int32(full_top)
        if draw_start < 0:
            draw_start = 0
        draw_end = int32(half_h + full_height / 2.0)
        if draw_end > render_height:
            draw_end = render_height

        if packed[col, 4] > 0.5:
            for x in range(x0, x1):
                for y in range(draw_start, draw_end):
                    frame_buffer[x, y, 0] = void_r
                    frame_buffer[x, y, 1] = void_g
                    frame_buffer[x, y, 2] = void_b
            continue

        shade = packed[col, 1]
        slot = int32(packed[col, 3])
        tex_x = int32(packed[col, 2] * tex_size)
        if tex_x >= tex_size:
            tex_x = tex_size - 1
        elif tex_x < 0:
            tex_x = 0

        for y in range(draw_start, draw_end):
            tex_y = int32((y - full_top) * tex_size / full_height)
            if tex_y < 0:
                tex_y = 0
            elif tex_y >= tex_size:
                tex_y = tex_size - 1

            r = int32(atlas[slot, tex_x, tex_y, 0] * shade)
            g = int32(atlas[slot, tex_x, tex_y, 1] * shade)
            b = int32(atlas[slot, tex_x, tex_y, 2] * shade)
            for x in range(x0, x1):
                frame_buffer[x, y, 0] = r
                frame_buffer[x, y, 1] = g
                frame_buffer[x, y, 2] = b


class Renderer3D:
    """
    Draws the first-person view from a Frame's column descriptors
    """

    def __init__(self, screen_width, render_height, texture_manager=None):
        """
        Args:
            screen_width: Width of the 3D view in pixels
            render_height: Height of the 3D view in pixels
            texture_manager: TextureManager, created when None
        """
        self.texture_manager = texture_manager or TextureManager(texture_size=64)
        self._atlas = None
        self._atlas_slots = {}
        self.screen_width = screen_width
        self.render_height = render_height
        self.frame_buffer = None
        self.set_render_area(screen_width, render_height)

    def set_render_area(self, width, height):
        """Update render area dimensions"""
        self.screen_width = width
        self.render_height = height
        self.frame_buffer = np.zeros((width, height, 3), dtype=np.uint8)

    def _atlas_slot(self, material_id):
        """Texture atlas index for a material, rebuilding the atlas on first sight"""
        if material_id not in self._atlas_slots:
            self._atlas_slots[material_id] = len(self._atlas_slots)
            textures = [None] * len(self._atlas_slots)
            for mat, slot in self._atlas_slots.items():
                surface = self.texture_manager.get_material_texture(mat)
                textures[slot] = pygame.surfarray.array3d(surface)
            self._atlas = np.ascontiguousarray(np.stack(textures), dtype=np.uint8)
        return self._atlas_slots[material_id]

    def _pack(self, columns):
        packed = np.zeros((len(columns), 5), dtype=np.float64)
        for i, column in enumerate(columns):
            packed[i, _PACK_HEIGHT] = column.height_px
            packed[i, _PACK_SHADE] = column.shade
            packed[i, _PACK_U] = column.texture_u
            if column.is_void:
                packed[i, _PACK_VOID] = 1.0
            else:
                packed[i, _PACK_SLOT] = self._atlas_slot(column.material_id)
        return packed

    def _draw_ceiling_floor(self):
        half = self.render_height // 2
        self.frame_buffer[:, :half] = COLOR_CEILING
        self.frame_buffer[:, half:] = COLOR_FLOOR

    def render(self, screen, frame):
        """
        Draw one frame

        Args:
            screen: pygame.Surface to render to
            frame: game.simulation.Frame
        """
        self._draw_ceiling_floor()

        if frame.columns:
            packed = self._pack(frame.columns)
            if self._atlas is None:
                self._atlas_slot(1)
            _numba_draw_columns(
                packed, self.frame_buffer, self._atlas,
                int32(self.render_height), int32(self.texture_manager.texture_size),
                COLOR_VOID[0], COLOR_VOID[1], COLOR_VOID[2]
            )

        screen_w, screen_h = screen.get_size()
        if screen_w == self.screen_width and screen_h == self.render_height:
            pygame.surfarray.blit_array(screen, self.frame_buffer)
        else:
            render_surface = pygame.Surface((self.screen_width, self.render_height))
            pygame.surfarray.blit_array(render_surface, self.frame_buffer)
            screen.blit(render_surface, (0, 0))
