"""
Input commands - the per-tick command set supplied by the input collaborator
"""


class InputCommands:
    """
    Discrete commands sampled once per tick

    Attributes:
        move_forward, move_backward: Move along the view direction
        strafe_left, strafe_right: Move perpendicular to the view direction
        rotate_left, rotate_right: Turn the view
        paint_requests: List of (cell_x, cell_y, value) to apply at the tick boundary
    """

    def __init__(self, move_forward=False, move_backward=False,
                 strafe_left=False, strafe_right=False,
                 rotate_left=False, rotate_right=False, paint_requests=None):
        self.move_forward = move_forward
        self.move_backward = move_backward
        self.strafe_left = strafe_left
        self.strafe_right = strafe_right
        self.rotate_left = rotate_left
        self.rotate_right = rotate_right
        self.paint_requests = list(paint_requests) if paint_requests else []

    def paint_cell_at(self, cell_x, cell_y, value):
        """Request a cell change for this tick"""
        self.paint_requests.append((cell_x, cell_y, value))

    @property
    def forward(self):
        """Forward/backward axis (-1, 0 or 1)"""
        return int(self.move_forward) - int(self.move_backward)

    @property
    def strafe(self):
        """Strafe axis, -1 = left, 1 = right"""
        return int(self.strafe_right) - int(self.strafe_left)

    @property
    def turn(self):
        """Turn axis, -1 = left, 1 = right"""
        return int(self.rotate_right) - int(self.rotate_left)

    def is_idle(self):
        return self.forward == 0 and self.strafe == 0 and self.turn == 0 and not self.paint_requests

    def __repr__(self):
        return (f"InputCommands(forward={self.forward}, strafe={self.strafe}, "
                f"turn={self.turn}, paints={len(self.paint_requests)})")
