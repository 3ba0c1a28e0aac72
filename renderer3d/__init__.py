"""
3D Renderer Module - Wolfenstein3D style raycasting over a tile grid

The pygame-backed modules (renderer, minimap, textures) are imported on
demand so the casting core stays usable without a display.
"""

from .raycaster import Raycaster, RayHit, RayMiss, HitSide
from .scene import FanCaster, fan_offsets
from .projection import ColumnMapper, ColumnDescriptor, column_angle

__all__ = ['Raycaster', 'RayHit', 'RayMiss', 'HitSide', 'FanCaster', 'fan_offsets',
           'ColumnMapper', 'ColumnDescriptor', 'column_angle']
