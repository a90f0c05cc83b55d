"""Regular particle lattice and its distance-constraint topology."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from particles3d import GRAVITY, ParticleState


@dataclass
class Lattice3D:
    """Static topology of a ``px x py`` particle grid.

    Particles are indexed row-major as ``y * px + x``.  ``edges`` holds the
    index pairs of every distance constraint in solver order and
    ``rest_lengths`` the matching rest lengths.  Neither changes after
    construction.
    """

    width: float
    height: float
    px: int
    py: int
    edges: List[Tuple[int, int]]
    rest_lengths: np.ndarray

    @property
    def n_particles(self) -> int:
        return self.px * self.py

    @property
    def n_constraints(self) -> int:
        return len(self.edges)

    def index(self, x: int, y: int) -> int:
        return y * self.px + x


def expected_constraint_count(px: int, py: int) -> int:
    return px * (py - 1) + (px - 1) * py


def default_pins(px: int) -> Tuple[int, int]:
    """The two corners of the first row."""
    return (0, px - 1)


def build_lattice(
    width: float,
    height: float,
    px: int,
    py: int,
    mass: float = 1.0,
    gravity: Sequence[float] = GRAVITY,
    pinned: Optional[Iterable[int]] = None,
) -> Tuple[ParticleState, Lattice3D]:
    """Builds a flat cloth lattice lying on the XZ plane (``y = 0``).

    The grid spans ``[-width/2, width/2]`` along x and
    ``[-height/2, height/2]`` along z.  Constraints are emitted while walking
    the particles row-major: for each particle its horizontal edge (to
    ``x + 1``) comes before its vertical edge (to ``y + 1``).  The solver is
    sequential, so this order determines the simulated trajectory.

    ``pinned`` lists the particle indices to fix; ``None`` pins the two
    corners of the first row.
    """

    if px < 2 or py < 2:
        raise ValueError("px and py must be >= 2")
    if width < 0 or height < 0:
        raise ValueError("width and height must be >= 0")

    dx = width / (px - 1)
    dz = height / (py - 1)

    positions: List[Tuple[float, float, float]] = []
    for y in range(py):
        for x in range(px):
            positions.append((x * dx - width / 2, 0.0, y * dz - height / 2))

    edges: List[Tuple[int, int]] = []
    rest_lengths: List[float] = []
    for y in range(py):
        for x in range(px):
            i = y * px + x
            if x < px - 1:
                edges.append((i, i + 1))
                rest_lengths.append(dx)
            if y < py - 1:
                edges.append((i, i + px))
                rest_lengths.append(dz)

    state = ParticleState.from_positions(np.array(positions), mass=mass, gravity=gravity)
    for index in default_pins(px) if pinned is None else pinned:
        state.pin(index)

    lattice = Lattice3D(
        width=float(width),
        height=float(height),
        px=px,
        py=py,
        edges=edges,
        rest_lengths=np.array(rest_lengths, dtype=np.float64),
    )
    return state, lattice


def line_indices(px: int, py: int) -> np.ndarray:
    """Index buffer for drawing the lattice as line segments.

    All horizontal segments row by row, followed by all vertical segments
    column by column.  Each consecutive pair of entries is one segment.
    """

    indices: List[int] = []
    for y in range(py):
        for x in range(px - 1):
            indices.append(y * px + x)
            indices.append(y * px + x + 1)

    for x in range(px):
        for y in range(py - 1):
            indices.append(y * px + x)
            indices.append((y + 1) * px + x)

    return np.array(indices, dtype=np.uint32)
