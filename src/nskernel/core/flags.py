"""Obstacle mask for the staggered grid.

The geometry setup hands the kernel a per-cell classification: is the cell
fluid or obstacle, and which of its four neighbours are fluid. Instead of
querying bit codes inside the sweeps, the mask is expanded once into
boolean arrays of shape (imax + 2, jmax + 2):

- ``fluid[i, j]``                       cell (i, j) is fluid
- ``neighbour_fluid[Direction][i, j]``  neighbour of (i, j) in that direction is fluid

Cells outside the array count as obstacles. Integer codes (``CellFlag``)
are supported for interop with grids produced elsewhere.
"""

from enum import Enum, IntEnum, IntFlag

import numpy as np

from ..errors import FlagConsistencyError, GridShapeError


class Axis(IntEnum):
    """Coordinate axis of a derivative or a face orientation."""

    X = 0
    Y = 1


class Direction(Enum):
    """Neighbour direction, valued by its (di, dj) index offset."""

    RIGHT = (1, 0)
    LEFT = (-1, 0)
    TOP = (0, 1)
    BOTTOM = (0, -1)

    @property
    def offset(self):
        return self.value


class CellFlag(IntFlag):
    """Integer cell code: FLUID bit plus one bit per fluid neighbour."""

    OBSTACLE = 0
    TOP = 1
    BOTTOM = 2
    LEFT = 4
    RIGHT = 8
    FLUID = 16

    @classmethod
    def for_direction(cls, direction):
        return cls[direction.name]


def _shift(values, di, dj, fill=False):
    """Return ``out`` with ``out[i, j] = values[i + di, j + dj]`` (``fill`` outside)."""
    ni, nj = values.shape
    out = np.full_like(values, fill)
    out[max(-di, 0):ni + min(-di, 0), max(-dj, 0):nj + min(-dj, 0)] = values[
        max(di, 0):ni + min(di, 0), max(dj, 0):nj + min(dj, 0)
    ]
    return out


class ObstacleMask:
    """Precomputed fluid/obstacle predicates for every cell of the grid.

    Parameters
    ----------
    fluid : array_like of bool, shape (imax + 2, jmax + 2)
        True where the cell is fluid.
    """

    def __init__(self, fluid):
        fluid = np.array(fluid, dtype=np.bool_, copy=True)
        if fluid.ndim != 2 or fluid.shape[0] < 3 or fluid.shape[1] < 3:
            raise GridShapeError(f"Fluid mask must be 2-D with at least 3x3 cells, got shape {fluid.shape}")
        fluid.setflags(write=False)
        self.fluid = fluid

        self.neighbour_fluid = {}
        for direction in Direction:
            di, dj = direction.offset
            neighbour = _shift(fluid, di, dj)
            neighbour.setflags(write=False)
            self.neighbour_fluid[direction] = neighbour

        # Faces between two fluid cells: U/F across RIGHT, V/G across TOP
        self._interfaces = {
            Axis.X: fluid & self.neighbour_fluid[Direction.RIGHT],
            Axis.Y: fluid & self.neighbour_fluid[Direction.TOP],
        }
        for interface in self._interfaces.values():
            interface.setflags(write=False)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def all_fluid(cls, imax, jmax):
        """Mask without obstacles (ghost layer included)."""
        return cls(np.ones((imax + 2, jmax + 2), dtype=np.bool_))

    @classmethod
    def from_fluid(cls, fluid):
        return cls(fluid)

    @classmethod
    def from_codes(cls, codes):
        """Build a mask from integer ``CellFlag`` codes.

        Raises
        ------
        FlagConsistencyError
            If a neighbour bit disagrees with the type of the neighbour cell.
        """
        codes = np.asarray(codes)
        if not np.issubdtype(codes.dtype, np.integer):
            raise GridShapeError(f"Cell codes must be integers, got dtype {codes.dtype}")

        mask = cls((codes & int(CellFlag.FLUID)) != 0)
        inside = np.ones_like(mask.fluid)
        for direction in Direction:
            di, dj = direction.offset
            claimed = (codes & int(CellFlag.for_direction(direction))) != 0
            has_neighbour = _shift(inside, di, dj)
            bad = has_neighbour & (claimed != mask.neighbour_fluid[direction])
            if bad.any():
                i, j = np.argwhere(bad)[0]
                raise FlagConsistencyError(
                    f"Cell ({i}, {j}) claims its {direction.name} neighbour is "
                    f"{'fluid' if claimed[i, j] else 'obstacle'}, but it is not"
                )
        return mask

    def to_codes(self):
        """Encode the mask as integer ``CellFlag`` codes."""
        codes = np.where(self.fluid, int(CellFlag.FLUID), int(CellFlag.OBSTACLE))
        for direction in Direction:
            codes |= np.where(self.neighbour_fluid[direction], int(CellFlag.for_direction(direction)), 0)
        return codes.astype(np.int32)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def shape(self):
        return self.fluid.shape

    def is_fluid(self, i, j):
        return bool(self.fluid[i, j])

    def is_obstacle(self, i, j):
        return not self.fluid[i, j]

    def is_neighbour_fluid(self, i, j, direction):
        return bool(self.neighbour_fluid[Direction(direction)][i, j])

    def is_neighbour_obstacle(self, i, j, direction):
        return not self.neighbour_fluid[Direction(direction)][i, j]

    def fluid_interfaces(self, axis):
        """Boolean array, True where the cell and its RIGHT (X) or TOP (Y) neighbour are fluid."""
        return self._interfaces[Axis(axis)]

    @property
    def n_fluid(self):
        return int(np.count_nonzero(self.fluid))

    def __eq__(self, other):
        if not isinstance(other, ObstacleMask):
            return NotImplemented
        return np.array_equal(self.fluid, other.fluid)

    __hash__ = None

    def __repr__(self):
        imax, jmax = self.shape[0] - 2, self.shape[1] - 2
        return f"ObstacleMask(imax={imax}, jmax={jmax}, fluid_cells={self.n_fluid})"


def as_obstacle_mask(flags, shape):
    """Coerce ``flags`` into an ``ObstacleMask`` of the given shape.

    Accepts ``None`` (no obstacles), an ``ObstacleMask``, a boolean fluid
    array or an integer ``CellFlag`` code array.
    """
    if flags is None:
        return ObstacleMask(np.ones(shape, dtype=np.bool_))

    if isinstance(flags, ObstacleMask):
        mask = flags
    else:
        flags = np.asarray(flags)
        if flags.dtype == np.bool_:
            mask = ObstacleMask.from_fluid(flags)
        elif np.issubdtype(flags.dtype, np.integer):
            mask = ObstacleMask.from_codes(flags)
        else:
            raise GridShapeError(f"Cannot interpret flags of dtype {flags.dtype} as an obstacle mask")

    if mask.shape != tuple(shape):
        raise GridShapeError(f"Flags have shape {mask.shape}, expected {tuple(shape)}")
    return mask
