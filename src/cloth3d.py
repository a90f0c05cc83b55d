"""Position-based dynamics cloth simulation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from integrator3d import apply_forces, update_velocities
from lattice3d import build_lattice, line_indices
from particles3d import GRAVITY
from solver3d import constraint_error, solve_constraints

logger = logging.getLogger(__name__)


@dataclass
class PBDCloth3D:
    """Simulation context owning one cloth lattice for its whole lifetime.

    The particle buffer and the constraint list are created once from the
    lattice parameters and mutated in place by :meth:`step`.
    """

    width: float
    height: float
    px: int
    py: int
    damping: float = 0.999
    mass: float = 1.0
    gravity: np.ndarray = field(default_factory=lambda: np.array(GRAVITY))
    pinned: Optional[Tuple[int, ...]] = None

    def __post_init__(self) -> None:
        if not 0.0 < self.damping <= 1.0:
            raise ValueError("damping must be in the range (0, 1]")
        if self.mass <= 0:
            raise ValueError("mass must be positive")

        self.gravity = np.asarray(self.gravity, dtype=np.float64)
        if self.pinned is not None:
            self.pinned = tuple(self.pinned)

        self.particles, self.lattice = build_lattice(
            self.width,
            self.height,
            self.px,
            self.py,
            mass=self.mass,
            gravity=self.gravity,
            pinned=self.pinned,
        )
        logger.debug(
            "Built %dx%d lattice: %d particles, %d constraints, %d pinned",
            self.px,
            self.py,
            self.particles.n_particles,
            self.lattice.n_constraints,
            int(np.count_nonzero(self.particles.pinned)),
        )

    # ------------------------------------------------------------------

    def step(self, dt: float, substeps: int = 1) -> None:
        """Advance the simulation by ``dt`` split into ``substeps`` equal parts."""

        if dt <= 0:
            raise ValueError("dt must be positive")
        if substeps < 1:
            raise ValueError("substeps must be >= 1")

        sub_dt = dt / substeps
        particles = self.particles
        edges = self.lattice.edges
        rest_lengths = self.lattice.rest_lengths

        for _ in range(substeps):
            apply_forces(particles, sub_dt)
            solve_constraints(particles, edges, rest_lengths)
            update_velocities(particles, sub_dt, self.damping)

    def read_positions(self) -> np.ndarray:
        """Copy of the particle positions in row-major lattice order."""
        return self.particles.positions.copy()

    def vertex_buffer(self) -> np.ndarray:
        """Flat ``float32`` positions, ready to upload as a vertex buffer."""
        return self.particles.positions.astype(np.float32).ravel()

    def line_indices(self) -> np.ndarray:
        return line_indices(self.px, self.py)

    def constraint_error(self) -> float:
        return constraint_error(self.particles, self.lattice.edges, self.lattice.rest_lengths)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.particles.positions)))

    def reset(self) -> None:
        self.particles.reset()
