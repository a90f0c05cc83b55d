import numpy as np
import pytest

from particles3d import GRAVITY, ParticleState


def make_state(points, **kwargs):
    return ParticleState.from_positions(np.array(points, dtype=np.float64), **kwargs)


def test_from_positions_starts_at_rest():
    state = make_state([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]])

    assert state.n_particles == 2
    assert np.array_equal(state.velocities, np.zeros((2, 3)))
    assert np.array_equal(state.previous_positions, state.positions)
    assert np.array_equal(state.forces, np.tile(GRAVITY, (2, 1)))
    assert np.array_equal(state.inv_mass, [1.0, 1.0])
    assert not state.pinned.any()


def test_inverse_mass_follows_mass():
    state = make_state([[0.0, 0.0, 0.0]], mass=4.0)
    assert state.inv_mass[0] == pytest.approx(0.25)

    infinite = make_state([[0.0, 0.0, 0.0]], mass=0.0)
    assert infinite.inv_mass[0] == 0.0
    assert infinite.pinned[0]


def test_pin_zeroes_inverse_mass_and_restores_position():
    state = make_state([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    state.positions[1] = (5.0, 5.0, 5.0)
    state.velocities[1] = (1.0, 1.0, 1.0)

    state.pin(1)

    assert state.pinned[1]
    assert state.inv_mass[1] == 0.0
    assert np.array_equal(state.positions[1], [1.0, 0.0, 0.0])
    assert np.array_equal(state.velocities[1], [0.0, 0.0, 0.0])
    assert np.array_equal(state.free_mask, [True, False])


def test_reset_restores_initial_positions():
    state = make_state([[0.0, 1.0, 0.0]])
    state.positions[0] = (3.0, 3.0, 3.0)
    state.velocities[0] = (1.0, 0.0, 0.0)

    state.reset()

    assert np.array_equal(state.positions[0], [0.0, 1.0, 0.0])
    assert np.array_equal(state.velocities[0], [0.0, 0.0, 0.0])


def test_rejects_pin_without_infinite_mass():
    with pytest.raises(ValueError):
        ParticleState(
            positions=np.zeros((1, 3)),
            velocities=np.zeros((1, 3)),
            forces=np.zeros((1, 3)),
            inv_mass=np.array([1.0]),
            pinned=np.array([True]),
        )


def test_rejects_bad_shapes():
    with pytest.raises(ValueError):
        make_state([0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        make_state([[0.0, 0.0, 0.0]], gravity=(0.0, -9.81))
