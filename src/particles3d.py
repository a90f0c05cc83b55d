"""Particle storage for the position-based cloth simulation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

GRAVITY = (0.0, -9.81, 0.0)


@dataclass
class ParticleState:
    """Structure-of-arrays particle buffer.

    Every particle is addressed by its integer index into the arrays below.
    Positions, previous positions, velocities and forces are ``(N, 3)``
    arrays; inverse masses and the pinned flags are ``(N,)`` arrays.  A pinned
    particle always has an inverse mass of zero and never moves.
    """

    positions: np.ndarray
    velocities: np.ndarray
    forces: np.ndarray
    inv_mass: np.ndarray
    pinned: np.ndarray
    previous_positions: np.ndarray = field(init=False)
    initial_positions: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.positions = np.asarray(self.positions, dtype=np.float64)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError("positions must be an (N, 3) array")

        self.velocities = np.asarray(self.velocities, dtype=np.float64)
        self.forces = np.asarray(self.forces, dtype=np.float64)
        if self.velocities.shape != self.positions.shape:
            raise ValueError("velocities must match the shape of positions")
        if self.forces.shape != self.positions.shape:
            raise ValueError("forces must match the shape of positions")

        n = self.positions.shape[0]
        self.inv_mass = np.asarray(self.inv_mass, dtype=np.float64)
        self.pinned = np.asarray(self.pinned, dtype=bool)
        if self.inv_mass.shape != (n,) or self.pinned.shape != (n,):
            raise ValueError("inv_mass and pinned must have one entry per particle")
        if np.any((self.inv_mass == 0.0) != self.pinned):
            raise ValueError("a particle is pinned exactly when its inverse mass is zero")

        self.previous_positions = self.positions.copy()
        self.initial_positions = self.positions.copy()

    @classmethod
    def from_positions(
        cls,
        positions: np.ndarray,
        mass: float = 1.0,
        gravity: Sequence[float] = GRAVITY,
    ) -> "ParticleState":
        """Creates a resting particle buffer with a uniform mass.

        Each particle carries ``gravity`` as its constant accumulated force.
        A non-positive ``mass`` yields infinite-mass (pinned) particles.
        """

        positions = np.asarray(positions, dtype=np.float64)
        n = positions.shape[0]
        gravity = np.asarray(gravity, dtype=np.float64)
        if gravity.shape != (3,):
            raise ValueError("gravity must be a 3D vector")

        inv = 1.0 / mass if mass > 0 else 0.0
        return cls(
            positions=positions,
            velocities=np.zeros_like(positions),
            forces=np.tile(gravity, (n, 1)),
            inv_mass=np.full(n, inv),
            pinned=np.full(n, inv == 0.0),
        )

    @property
    def n_particles(self) -> int:
        return self.positions.shape[0]

    @property
    def free_mask(self) -> np.ndarray:
        return ~self.pinned

    def pin(self, index: int) -> None:
        """Fixes the particle in place by giving it infinite mass."""

        self.pinned[index] = True
        self.inv_mass[index] = 0.0
        self.velocities[index] = 0.0
        self.positions[index] = self.initial_positions[index]
        self.previous_positions[index] = self.initial_positions[index]

    def reset(self) -> None:
        self.positions[:] = self.initial_positions
        self.previous_positions[:] = self.initial_positions
        self.velocities[:] = 0.0
