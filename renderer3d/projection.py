"""
Projection - converts ray hits into screen column descriptors
Pure functions only: no drawing, no graphics context.
"""

from utils.constants import (
    CELL_SIZE, WALL_SCALE, SIDE_SHADE, MIN_DISTANCE, VOID_HEIGHT, VOID_SHADE,
    VOID_MATERIAL, DEFAULT_MATERIAL
)
from utils.helpers import fractional
from .raycaster import HitSide


class ColumnDescriptor:
    """
    One screen column handed to the renderer

    Attributes:
        height_px: Projected wall height in pixels
        shade: Brightness factor in [0, 1]
        texture_u: Horizontal texture coordinate in [0, 1)
        material_id: Cell code of the struck wall (VOID_MATERIAL for no hit)
        column: Index of the ray in its fan, left to right
        angle_offset: Degrees between this column's ray and the view axis
        is_void: True when the ray found no wall
    """

    __slots__ = ('height_px', 'shade', 'texture_u', 'material_id',
                 'column', 'angle_offset', 'is_void')

    def __init__(self, height_px, shade, texture_u, material_id, column=0,
                 angle_offset=0.0, is_void=False):
        self.height_px = height_px
        self.shade = shade
        self.texture_u = texture_u
        self.material_id = material_id
        self.column = column
        self.angle_offset = angle_offset
        self.is_void = is_void

    def __repr__(self):
        if self.is_void:
            return f"ColumnDescriptor(column={self.column}, void)"
        return (f"ColumnDescriptor(column={self.column}, h={self.height_px:.1f}, "
                f"shade={self.shade:.2f}, u={self.texture_u:.3f}, material={self.material_id})")


def column_angle(ray_index, total_rays, fov_degrees):
    """Degrees off the view axis of a fan ray, leftmost ray negative"""
    if total_rays == 1:
        return 0.0
    return -fov_degrees / 2.0 + ray_index * fov_degrees / (total_rays - 1)


class ColumnMapper:
    """
    Maps RayHit / RayMiss results to ColumnDescriptor

    Shading convention: Y-boundary hits are drawn at full brightness and
    X-boundary hits are darkened by side_shade.
    """

    def __init__(self, cell_size=CELL_SIZE, wall_scale=WALL_SCALE, side_shade=SIDE_SHADE,
                 min_distance=MIN_DISTANCE, void_height=VOID_HEIGHT, void_shade=VOID_SHADE):
        """
        Args:
            cell_size: (w, h) world units per cell, used for texture_u
            wall_scale: K in height = K * screen_height / distance
            side_shade: Brightness of X-boundary hits
            min_distance: Near clamp for the perpendicular distance
            void_height: Height of columns without a hit, as a fraction of the screen
            void_shade: Shade reported for columns without a hit
        """
        if not 0.0 <= side_shade <= 1.0:
            raise ValueError(f"side_shade must be within [0, 1], got {side_shade}")
        if not 0.0 <= void_shade <= 1.0:
            raise ValueError(f"void_shade must be within [0, 1], got {void_shade}")
        if min_distance <= 0:
            raise ValueError(f"min_distance must be positive, got {min_distance}")
        if isinstance(cell_size, (tuple, list)):
            self.cell_w, self.cell_h = float(cell_size[0]), float(cell_size[1])
        else:
            self.cell_w = self.cell_h = float(cell_size)
        self.wall_scale = wall_scale
        self.side_shade = side_shade
        self.min_distance = min_distance
        self.void_height = void_height
        self.void_shade = void_shade

    @classmethod
    def for_grid(cls, grid, **kwargs):
        return cls(cell_size=grid.cell_size, **kwargs)

    def shade_for(self, side):
        return 1.0 if side == HitSide.Y_BOUNDARY else self.side_shade

    def texture_u(self, hit):
        hx, hy = hit.hit_point
        dx, dy = hit.direction
        if hit.side == HitSide.X_BOUNDARY:
            u = fractional(hy / self.cell_h)
            if dx < 0:
                u = 1.0 - u
        else:
            u = fractional(hx / self.cell_w)
            if dy > 0:
                u = 1.0 - u
        if u >= 1.0:
            u = 0.0
        return u

    def map_column(self, hit, ray_index, total_rays, fov_degrees, screen_height):
        """
        Project one ray result

        Args:
            hit: RayHit or RayMiss
            ray_index: Position of the ray in its fan, 0 = leftmost
            total_rays: Rays in the fan
            fov_degrees: Fan field of view
            screen_height: Render height in pixels

        Returns:
            ColumnDescriptor
        """
        if not 0 <= ray_index < total_rays:
            raise ValueError(f"Ray index {ray_index} outside fan of {total_rays} rays")
        angle = column_angle(ray_index, total_rays, fov_degrees)

        if not hit.hit:
            return ColumnDescriptor(
                height_px=self.void_height * screen_height,
                shade=self.void_shade,
                texture_u=0.0,
                material_id=VOID_MATERIAL,
                column=ray_index,
                angle_offset=angle,
                is_void=True,
            )

        distance = max(hit.perp_distance, self.min_distance)
        return ColumnDescriptor(
            height_px=self.wall_scale * screen_height / distance,
            shade=self.shade_for(hit.side),
            texture_u=self.texture_u(hit),
            material_id=hit.cell_value if hit.cell_value > 0 else DEFAULT_MATERIAL,
            column=ray_index,
            angle_offset=angle,
        )

    def map_fan(self, hits, fov_degrees, screen_height):
        """Project a whole fan, preserving left-to-right order"""
        total = len(hits)
        return [self.map_column(hit, i, total, fov_degrees, screen_height)
                for i, hit in enumerate(hits)]
