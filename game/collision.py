"""
Collision detection and response against the tile grid
"""

from enum import Enum


class MoveOutcome(Enum):
    """How a proposed displacement was resolved"""
    FREE = "free"          # Full displacement accepted
    SLIDE_X = "slide_x"    # Only the X component accepted
    SLIDE_Y = "slide_y"    # Only the Y component accepted
    BLOCKED = "blocked"    # Position unchanged


class CollisionResolver:
    """
    Point-vs-cell collision with axis sliding

    The player is a point tested against the single cell that contains
    it. This holds while the player radius is below one cell and a
    single tick moves less than one cell, so no wall can be tunnelled.
    """

    def __init__(self):
        self.last_outcome = None

    def resolve(self, grid, position, displacement):
        """
        Correct a proposed move

        Tried in order: the full move, the X component alone, the Y
        component alone. The first target whose cell is not solid wins;
        otherwise the position is unchanged.

        Args:
            grid: GridMap
            position: Current (x, y) world position
            displacement: Proposed (dx, dy) in world units

        Returns:
            Corrected (x, y) world position
        """
        x, y = position
        dx, dy = displacement

        if dx == 0 and dy == 0:
            self.last_outcome = MoveOutcome.FREE
            return x, y

        candidates = (
            (x + dx, y + dy, MoveOutcome.FREE),
            (x + dx, y, MoveOutcome.SLIDE_X),
            (x, y + dy, MoveOutcome.SLIDE_Y),
        )
        for new_x, new_y, outcome in candidates:
            if (new_x, new_y) == (x, y):
                # Zero axis component, sliding along it goes nowhere
                continue
            if not grid.is_solid_at(new_x, new_y):
                self.last_outcome = outcome
                return new_x, new_y

        self.last_outcome = MoveOutcome.BLOCKED
        return x, y

    def can_stand_at(self, grid, position):
        """Check if a world position lies in a passable cell"""
        return not grid.is_solid_at(*position)
