"""
Simulation - frame-synchronous tick driving motion, casting and projection
"""

import logging
from config import RaycastSettings
from renderer3d.raycaster import Raycaster
from renderer3d.scene import FanCaster
from renderer3d.projection import ColumnMapper
from .collision import CollisionResolver
from .player import Player

logger = logging.getLogger(__name__)


class Frame:
    """
    Per-frame handoff to the renderer

    Attributes:
        columns: ColumnDescriptor list, left to right
        hits: RayHit / RayMiss list matching columns
        pose: Copy of the player's Pose for overlays
        tick: Tick number that produced this frame
        skipped_paints: (cell_x, cell_y, value) edits refused this tick
    """

    __slots__ = ('columns', 'hits', 'pose', 'tick', 'skipped_paints')

    def __init__(self, columns, hits, pose, tick, skipped_paints=()):
        self.columns = columns
        self.hits = hits
        self.pose = pose
        self.tick = tick
        self.skipped_paints = list(skipped_paints)

    def __len__(self):
        return len(self.columns)

    def __repr__(self):
        return f"Frame(tick={self.tick}, columns={len(self.columns)}, pose={self.pose!r})"


class Simulation:
    """
    One tick = paints applied -> player moved -> fan cast -> columns mapped

    Grid edits requested through InputCommands or queue_paint() are held
    until the start of the next tick so no fan ever sees a half-edited grid.
    """

    def __init__(self, grid, pose, settings=None):
        """
        Args:
            grid: GridMap
            pose: Starting Pose (must stand in a passable cell)
            settings: RaycastSettings, defaults when None
        """
        self.grid = grid
        self.settings = settings if settings is not None else RaycastSettings()

        if grid.is_solid_at(*pose.position):
            raise ValueError(f"Start position {pose.position} lies inside a solid cell")

        s = self.settings
        self.player = Player(pose, s.move_speed, s.strafe_speed, s.turn_speed)
        self.resolver = CollisionResolver()
        self.raycaster = Raycaster(s.strategy, s.max_draw_distance, s.march_steps)
        self.fan_caster = FanCaster(self.raycaster, s.fov_degrees, s.num_rays)
        self.mapper = ColumnMapper.for_grid(
            grid, wall_scale=s.wall_scale, side_shade=s.side_shade,
            min_distance=s.min_distance, void_height=s.void_height, void_shade=s.void_shade
        )

        self.tick_count = 0
        self._pending_paints = []
        logger.info("Simulation ready: %r, %r", grid, self.settings)

    @property
    def pose(self):
        return self.player.pose

    @property
    def max_step(self):
        """Per-tick displacement cap, just under one cell"""
        return 0.9 * min(self.grid.cell_w, self.grid.cell_h)

    def queue_paint(self, cell_x, cell_y, value):
        """Schedule a cell edit for the next tick boundary"""
        self._pending_paints.append((cell_x, cell_y, value))

    def _apply_paints(self):
        """Apply queued edits; returns the ones refused"""
        skipped = []
        for cell_x, cell_y, value in self._pending_paints:
            if (value != 0 and self.grid.in_bounds(cell_x, cell_y)
                    and self.grid.cell_of(*self.pose.position) == (cell_x, cell_y)):
                # Never wall the player in
                logger.info("Refused paint of %s on the player's own cell (%d, %d)",
                            value, cell_x, cell_y)
                skipped.append((cell_x, cell_y, value))
                continue
            self.grid.paint(cell_x, cell_y, value)
            logger.debug("Painted cell (%s, %s) = %s", cell_x, cell_y, value)
        self._pending_paints.clear()
        return skipped

    def set_resolution(self, num_rays):
        self.fan_caster.set_resolution(num_rays)

    def render_frame(self, screen_height, skipped_paints=()):
        """Cast and project the current pose without advancing the simulation"""
        hits = self.fan_caster.cast(self.grid, self.pose.position, self.pose.direction)
        columns = self.mapper.map_fan(hits, self.fan_caster.fov, screen_height)
        return Frame(columns, hits, self.pose.copy(), self.tick_count, skipped_paints)

    def tick(self, commands, dt, screen_height):
        """
        Advance one tick

        Args:
            commands: InputCommands sampled for this tick
            dt: Delta time in seconds
            screen_height: Render height in pixels

        Returns:
            Frame
        """
        for request in commands.paint_requests:
            self.queue_paint(*request)
        skipped = self._apply_paints()

        self.player.update(commands, self.grid, self.resolver, dt, self.max_step)
        self.tick_count += 1
        return self.render_frame(screen_height, skipped)
