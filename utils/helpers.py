"""
Helper utility functions for the tile raycaster
"""

import math


def clamp(value, min_value, max_value):
    """Clamp a value between min and max"""
    return max(min_value, min(value, max_value))


def fractional(value):
    """Fractional part in [0, 1), also for negative values"""
    frac = value - math.floor(value)
    if frac >= 1.0:
        return 0.0
    return frac


def normalize(dx, dy):
    """
    Normalize a 2D vector

    Raises:
        ValueError: for the zero vector
    """
    length = math.hypot(dx, dy)
    if length == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return dx / length, dy / length


def rotate(dx, dy, degrees):
    """Rotate a vector by an angle in degrees (positive turns clockwise on a y-down screen)"""
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    return dx * cos_a - dy * sin_a, dx * sin_a + dy * cos_a
