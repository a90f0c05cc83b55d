"""Sequential (Gauss-Seidel) distance-constraint projection."""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from particles3d import ParticleState


def solve_constraints(
    state: ParticleState,
    edges: Sequence[Tuple[int, int]],
    rest_lengths: np.ndarray,
) -> None:
    """Runs one projection sweep over ``edges`` in the given order.

    Each constraint is projected using positions already corrected by the
    constraints before it in the same sweep.  Zero-length constraints and
    constraints between two pinned particles are skipped.
    """

    positions = state.positions.tolist()
    inv_mass = state.inv_mass.tolist()
    pinned = state.pinned.tolist()
    rest = rest_lengths.tolist()

    for edge_index, (i, j) in enumerate(edges):
        p1 = positions[i]
        p2 = positions[j]
        dx = p1[0] - p2[0]
        dy = p1[1] - p2[1]
        dz = p1[2] - p2[2]
        length = math.sqrt(dx * dx + dy * dy + dz * dz)
        if length == 0:
            continue

        scale = (length - rest[edge_index]) / length
        cx = dx * scale
        cy = dy * scale
        cz = dz * scale

        w_sum = inv_mass[i] + inv_mass[j]
        if w_sum == 0:
            continue

        if not pinned[i]:
            s = -inv_mass[i] / w_sum
            p1[0] += cx * s
            p1[1] += cy * s
            p1[2] += cz * s
        if not pinned[j]:
            s = inv_mass[j] / w_sum
            p2[0] += cx * s
            p2[1] += cy * s
            p2[2] += cz * s

    state.positions[:] = positions


def constraint_error(
    state: ParticleState,
    edges: Sequence[Tuple[int, int]],
    rest_lengths: np.ndarray,
) -> float:
    """Sum of absolute deviations of the constraint lengths from their rest lengths."""

    if len(edges) == 0:
        return 0.0
    index = np.asarray(edges, dtype=np.intp)
    delta = state.positions[index[:, 0]] - state.positions[index[:, 1]]
    lengths = np.linalg.norm(delta, axis=1)
    return float(np.sum(np.abs(lengths - rest_lengths)))
