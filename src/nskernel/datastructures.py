"""Data structures for kernel configuration, fields and step results.

Structure:
- Parameters: Input configuration (physics + discretization)
- SimulationFields: Staggered-grid arrays owned by the driver
- StepReport: Diagnostics of one projection step
"""

from dataclasses import asdict, dataclass, fields as dataclass_fields
from pathlib import Path

import numpy as np
import pandas as pd
from omegaconf import DictConfig, OmegaConf

from .core.validation import check_grid, check_reynolds, check_spacing, check_timestep
from .errors import ParameterError


# ========================================================
# Parameters (Input Configuration)
# ========================================================


@dataclass
class Parameters:
    """Physical and discretization parameters of the kernel."""

    # Grid
    imax: int = 50
    jmax: int = 50
    xlength: float = 1.0
    ylength: float = 1.0

    # Physics
    Re: float = 100.0
    Pr: float = 1.0
    GX: float = 0.0
    GY: float = 0.0
    beta: float = 0.0

    # Discretization
    alpha: float = 0.9  # donor-cell blending
    tau: float = 0.5  # time step safety factor
    dt: float = 0.05  # used as-is when adaptive_dt is off
    adaptive_dt: bool = True

    @property
    def dx(self) -> float:
        return self.xlength / self.imax

    @property
    def dy(self) -> float:
        return self.ylength / self.jmax

    def validate(self):
        """Raise ``ParameterError``/``GridShapeError`` for unusable settings."""
        check_grid(self.imax, self.jmax)
        check_spacing(self.dx, self.dy)
        check_reynolds(self.Re)
        if not self.Pr > 0:
            raise ParameterError(f"Pr must be positive, got {self.Pr}")
        if not 0.0 <= self.alpha <= 1.0:
            raise ParameterError(f"alpha must lie in [0, 1], got {self.alpha}")
        if not 0.0 < self.tau <= 1.0:
            raise ParameterError(f"tau must lie in (0, 1], got {self.tau}")
        if not self.adaptive_dt:
            check_timestep(self.dt)
        return self

    @classmethod
    def from_config(cls, cfg=None, **overrides):
        """Build validated parameters from a YAML file, mapping or DictConfig.

        Keys are checked against the dataclass schema by OmegaConf, so unknown
        keys and values of the wrong type are rejected.
        """
        schema = OmegaConf.structured(cls)
        if cfg is None:
            cfg = {}
        elif isinstance(cfg, (str, Path)):
            cfg = OmegaConf.load(cfg)
        elif not isinstance(cfg, DictConfig):
            cfg = OmegaConf.create(dict(cfg))

        merged = OmegaConf.merge(schema, cfg, overrides)
        return OmegaConf.to_object(merged).validate()

    def to_dataframe(self):
        return pd.DataFrame([self.to_mlflow()])

    def to_mlflow(self):
        params = asdict(self)
        params.update(dx=self.dx, dy=self.dy)
        return params


# ========================================================
# Fields (Staggered Grid Arrays)
# ========================================================


@dataclass
class SimulationFields:
    """All arrays of the staggered grid, shape (imax + 2, jmax + 2).

    U, V live on vertical/horizontal cell faces, P, T and RS at cell centres.
    F, G and RS are work arrays recomputed every step.
    """

    U: np.ndarray
    V: np.ndarray
    P: np.ndarray
    T: np.ndarray
    F: np.ndarray
    G: np.ndarray
    RS: np.ndarray

    def __post_init__(self):
        imax, jmax = self.U.shape[0] - 2, self.U.shape[1] - 2
        check_grid(imax, jmax, **self.as_dict())

    @classmethod
    def allocate(cls, imax: int, jmax: int, T_init: float = 0.0):
        """Allocate zeroed fields (temperature set to ``T_init``)."""
        shape = (imax + 2, jmax + 2)
        return cls(
            U=np.zeros(shape),
            V=np.zeros(shape),
            P=np.zeros(shape),
            T=np.full(shape, T_init, dtype=np.float64),
            F=np.zeros(shape),
            G=np.zeros(shape),
            RS=np.zeros(shape),
        )

    @property
    def imax(self) -> int:
        return self.U.shape[0] - 2

    @property
    def jmax(self) -> int:
        return self.U.shape[1] - 2

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}

    def copy(self):
        return SimulationFields(**{name: array.copy() for name, array in self.as_dict().items()})


# ========================================================
# Step Report (Diagnostics)
# ========================================================


@dataclass
class StepReport:
    """Diagnostics of one projection step."""

    step: int
    dt: float
    u_max: float
    v_max: float
    max_divergence: float
    kinetic_energy: float
    wall_time_seconds: float = 0.0

    def to_mlflow(self):
        return {
            "dt": self.dt,
            "u_max": self.u_max,
            "v_max": self.v_max,
            "max_divergence": self.max_divergence,
            "kinetic_energy": self.kinetic_energy,
        }

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])
