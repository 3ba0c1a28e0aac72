"""
Player - first-person pose and per-tick motion
"""

import math
from utils.constants import PLAYER_MOVE_SPEED, PLAYER_STRAFE_SPEED, PLAYER_TURN_SPEED
from utils.helpers import normalize, rotate


class Pose:
    """
    Position in world units plus a unit view direction

    Angles follow screen convention (y grows downward): 0 = east,
    90 degrees = south.
    """

    __slots__ = ('x', 'y', 'dir_x', 'dir_y')

    def __init__(self, x, y, dir_x=1.0, dir_y=0.0):
        self.x = float(x)
        self.y = float(y)
        self.dir_x, self.dir_y = normalize(dir_x, dir_y)

    @classmethod
    def from_angle(cls, x, y, degrees):
        rad = math.radians(degrees)
        return cls(x, y, math.cos(rad), math.sin(rad))

    @property
    def position(self):
        return self.x, self.y

    @property
    def direction(self):
        return self.dir_x, self.dir_y

    @property
    def right(self):
        """Unit vector 90 degrees clockwise of the view direction"""
        return -self.dir_y, self.dir_x

    @property
    def angle(self):
        """View angle in degrees, 0-360"""
        return math.degrees(math.atan2(self.dir_y, self.dir_x)) % 360.0

    def copy(self):
        return Pose(self.x, self.y, self.dir_x, self.dir_y)

    def __eq__(self, other):
        if not isinstance(other, Pose):
            return NotImplemented
        return (self.x, self.y, self.dir_x, self.dir_y) == (other.x, other.y, other.dir_x, other.dir_y)

    def __repr__(self):
        return f"Pose(pos=({self.x:.2f}, {self.y:.2f}), angle={self.angle:.1f}°)"


class Player:
    """
    First-person player driven by InputCommands
    """

    def __init__(self, pose, move_speed=PLAYER_MOVE_SPEED, strafe_speed=PLAYER_STRAFE_SPEED,
                 turn_speed=PLAYER_TURN_SPEED):
        """
        Args:
            pose: Starting Pose
            move_speed: Forward/backward speed, world units per second
            strafe_speed: Sideways speed, world units per second
            turn_speed: Degrees per second
        """
        self.pose = pose
        self.move_speed = move_speed
        self.strafe_speed = strafe_speed
        self.turn_speed = turn_speed

    def rotate(self, delta_degrees):
        """Turn the view; positive turns right"""
        self.pose.dir_x, self.pose.dir_y = normalize(
            *rotate(self.pose.dir_x, self.pose.dir_y, delta_degrees)
        )

    def displacement(self, commands, dt):
        """
        Proposed movement for this tick

        Args:
            commands: InputCommands
            dt: Delta time in seconds

        Returns:
            (dx, dy) in world units
        """
        fx, fy = self.pose.direction
        rx, ry = self.pose.right

        move_x = fx * commands.forward * self.move_speed
        move_y = fy * commands.forward * self.move_speed
        move_x += rx * commands.strafe * self.strafe_speed
        move_y += ry * commands.strafe * self.strafe_speed

        return move_x * dt, move_y * dt

    def update(self, commands, grid, resolver, dt, max_step=None):
        """
        Apply one tick of input

        Rotation is applied first, then the movement is resolved against
        the grid in a single collision call.

        Args:
            commands: InputCommands
            grid: GridMap
            resolver: CollisionResolver
            dt: Delta time in seconds
            max_step: Cap on the displacement length (world units)

        Returns:
            True if the position changed
        """
        if commands.turn:
            self.rotate(commands.turn * self.turn_speed * dt)

        dx, dy = self.displacement(commands, dt)
        if dx == 0 and dy == 0:
            return False

        if max_step is not None:
            length = math.hypot(dx, dy)
            if length > max_step:
                dx *= max_step / length
                dy *= max_step / length

        old = self.pose.position
        self.pose.x, self.pose.y = resolver.resolve(grid, old, (dx, dy))
        return self.pose.position != old

    def __repr__(self):
        return f"Player({self.pose!r})"
