"""
Tilecaster configuration

Tunable constants default to utils.constants and can be overridden from
a dict or a JSON file.
"""

import json
import logging
from pathlib import Path
from utils import constants

logger = logging.getLogger(__name__)

GAME_TITLE = "Tilecaster"
GAME_VERSION = "1.0.0"


class RaycastSettings:
    """Tunable constants for casting, projection and player motion"""

    DEFAULTS = {
        'strategy': constants.DEFAULT_STRATEGY,
        'fov_degrees': constants.FOV_DEGREES,
        'num_rays': constants.NUM_RAYS,
        'cell_size': constants.CELL_SIZE,
        'max_draw_distance': constants.MAX_DRAW_DISTANCE,
        'march_steps': constants.MARCH_STEPS,
        'wall_scale': constants.WALL_SCALE,
        'side_shade': constants.SIDE_SHADE,
        'min_distance': constants.MIN_DISTANCE,
        'void_height': constants.VOID_HEIGHT,
        'void_shade': constants.VOID_SHADE,
        'move_speed': constants.PLAYER_MOVE_SPEED,
        'strafe_speed': constants.PLAYER_STRAFE_SPEED,
        'turn_speed': constants.PLAYER_TURN_SPEED,
    }

    def __init__(self, **overrides):
        unknown = set(overrides) - set(self.DEFAULTS)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        values = dict(self.DEFAULTS)
        values.update(overrides)
        for key, value in values.items():
            setattr(self, key, value)
        self.validate()

    @classmethod
    def from_dict(cls, data):
        return cls(**data)

    def to_dict(self):
        return {key: getattr(self, key) for key in self.DEFAULTS}

    def replace(self, **changes):
        """Copy with some values changed"""
        data = self.to_dict()
        data.update(changes)
        return RaycastSettings(**data)

    def validate(self):
        """Raise ValueError naming the first invalid setting"""
        if self.strategy not in constants.STRATEGIES:
            raise ValueError(
                f"strategy: expected one of {constants.STRATEGIES}, got {self.strategy!r}"
            )
        if not 0 < self.fov_degrees < 180:
            raise ValueError(f"fov_degrees: must be within (0, 180), got {self.fov_degrees}")
        if not isinstance(self.num_rays, int) or self.num_rays <= 0:
            raise ValueError(f"num_rays: must be a positive integer, got {self.num_rays!r}")
        if not isinstance(self.march_steps, int) or self.march_steps <= 0:
            raise ValueError(f"march_steps: must be a positive integer, got {self.march_steps!r}")
        for key in ('cell_size', 'max_draw_distance', 'wall_scale', 'min_distance'):
            if getattr(self, key) <= 0:
                raise ValueError(f"{key}: must be positive, got {getattr(self, key)}")
        for key in ('side_shade', 'void_shade'):
            if not 0.0 <= getattr(self, key) <= 1.0:
                raise ValueError(f"{key}: must be within [0, 1], got {getattr(self, key)}")
        for key in ('void_height', 'move_speed', 'strafe_speed', 'turn_speed'):
            if getattr(self, key) < 0:
                raise ValueError(f"{key}: must not be negative, got {getattr(self, key)}")

    def __repr__(self):
        return (f"RaycastSettings(strategy={self.strategy!r}, fov={self.fov_degrees}, "
                f"rays={self.num_rays})")


def load_settings(path):
    """
    Load settings from a JSON object file

    Args:
        path: Path to the JSON file

    Returns:
        RaycastSettings
    """
    path = Path(path)
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings file must contain a JSON object")
    settings = RaycastSettings.from_dict(data)
    logger.info("Loaded settings from %s: %r", path, settings)
    return settings


def save_settings(settings, path):
    """Write settings as JSON"""
    path = Path(path)
    with open(path, 'w') as f:
        json.dump(settings.to_dict(), f, indent=2)
