"""
Level Module - tile grid model and level source loading
"""

from .grid_map import GridMap
from .loader import LEVELS_DIR, MalformedLevelError, parse_level, load_level, save_level

__all__ = ['GridMap', 'LEVELS_DIR', 'MalformedLevelError', 'parse_level', 'load_level',
           'save_level']
