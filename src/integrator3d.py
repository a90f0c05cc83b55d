"""Semi-implicit Euler prediction and PBD velocity reconciliation."""
from __future__ import annotations

from particles3d import ParticleState


def apply_forces(state: ParticleState, dt: float) -> None:
    """Predicts new positions of the free particles.

    The current position is saved first so that :func:`update_velocities`
    can derive the velocity from the displacement realised after constraint
    projection.
    """

    free = state.free_mask
    state.previous_positions[free] = state.positions[free]

    scale = (dt * state.inv_mass[free])[:, None]
    state.velocities[free] += state.forces[free] * scale
    state.positions[free] += state.velocities[free] * dt


def update_velocities(state: ParticleState, dt: float, damping: float) -> None:
    """Replaces the velocity of every free particle by its damped displacement rate."""

    free = state.free_mask
    displacement = state.positions[free] - state.previous_positions[free]
    state.velocities[free] = displacement * (1 / dt * damping)
