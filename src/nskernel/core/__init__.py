"""Grid metadata: obstacle mask, directions and argument checks."""

from .flags import Axis, CellFlag, Direction, ObstacleMask, as_obstacle_mask

__all__ = [
    "Axis",
    "CellFlag",
    "Direction",
    "ObstacleMask",
    "as_obstacle_mask",
]
