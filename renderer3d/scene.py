"""
Scene Fan Caster - one sweep of rays across the field of view
"""

import math
import numpy as np
from utils.constants import FOV_DEGREES, NUM_RAYS
from utils.helpers import normalize
from .raycaster import Raycaster


def fan_offsets(fov_degrees, ray_count):
    """
    Angular offsets (degrees) of each ray from the view axis, leftmost first

    Rays span [-fov/2, +fov/2] inclusive; a single ray looks straight ahead.
    Negative offsets turn counter-clockwise on a y-down screen, i.e. left.
    """
    if ray_count == 1:
        return np.zeros(1, dtype=np.float64)
    half = fov_degrees / 2.0
    return np.linspace(-half, half, ray_count, dtype=np.float64)


class FanCaster:
    """
    Casts rayCount rays evenly spread around a view direction
    """

    def __init__(self, raycaster=None, fov=FOV_DEGREES, num_rays=NUM_RAYS):
        """
        Args:
            raycaster: Raycaster instance (DDA by default)
            fov: Field of view in degrees, in (0, 180)
            num_rays: Rays per fan, one per screen column
        """
        self.raycaster = raycaster if raycaster is not None else Raycaster()
        self.fov = None
        self.num_rays = None
        self._offsets = None
        self.set_fov(fov)
        self.set_resolution(num_rays)

    def set_fov(self, fov):
        if not 0 < fov < 180:
            raise ValueError(f"Field of view must be within (0, 180) degrees, got {fov}")
        self.fov = float(fov)
        if self.num_rays is not None:
            self._offsets = fan_offsets(self.fov, self.num_rays)

    def set_resolution(self, num_rays):
        """Update ray count for different screen widths"""
        if num_rays <= 0:
            raise ValueError(f"Ray count must be positive, got {num_rays}")
        if num_rays != self.num_rays or self._offsets is None:
            self.num_rays = int(num_rays)
            self._offsets = fan_offsets(self.fov, self.num_rays)

    @property
    def offsets(self):
        return self._offsets

    def ray_directions(self, view_forward):
        """
        Unit direction of each ray in the fan

        Returns:
            (dirs_x, dirs_y) numpy arrays, leftmost ray first
        """
        fx, fy = normalize(*view_forward)
        base = math.atan2(fy, fx)
        angles = base + np.radians(self._offsets)
        return np.cos(angles), np.sin(angles)

    def cast(self, grid, view_origin, view_forward):
        """
        Cast the full fan

        Args:
            grid: GridMap
            view_origin: (x, y) world position
            view_forward: (dx, dy) view direction

        Returns:
            list of RayHit / RayMiss indexed 0..num_rays-1, left to right
        """
        dirs_x, dirs_y = self.ray_directions(view_forward)
        return self.raycaster.cast_directions(
            grid, view_origin, dirs_x, dirs_y, np.abs(self._offsets)
        )
