"""Tests for the per-tick equations of motion."""

import pytest

from physics_rl_environment.config import PhysicsConfig
from physics_rl_environment.dynamics import StandardDynamics
from physics_rl_environment.moves import Move


@pytest.fixture
def dynamics():
    return StandardDynamics(PhysicsConfig())


class TestDirection:
    @pytest.mark.parametrize("move,expected", [
        (Move(), 0.0),
        (Move(left=True), -1.0),
        (Move(right=True), 1.0),
        (Move(left=True, right=True), 0.0),
        (Move(right=True, up=True), 1.0),
    ])
    def test_direction(self, move, expected):
        assert StandardDynamics.direction(move) == expected


class TestHorizontal:
    def test_air_acceleration(self, dynamics):
        pc = dynamics.physics_config
        vx = dynamics.horizontal_velocity(0.0, 1.0, is_grounded=False)
        assert vx == pytest.approx(pc.move_accel * pc.air_control * pc.dt)

    def test_grounded_friction_applied(self, dynamics):
        pc = dynamics.physics_config
        vx = dynamics.horizontal_velocity(0.0, 1.0, is_grounded=True)
        assert vx == pytest.approx(pc.move_accel * pc.dt * (1 - 0.05 * pc.ground_friction))

    def test_speed_capped(self, dynamics):
        vx = 0.0
        for _ in range(1000):
            vx = dynamics.horizontal_velocity(vx, 1.0, is_grounded=False)
        assert vx == pytest.approx(dynamics.physics_config.move_speed)

    def test_cap_symmetric(self, dynamics):
        vx = 0.0
        for _ in range(1000):
            vx = dynamics.horizontal_velocity(vx, -1.0, is_grounded=False)
        assert vx == pytest.approx(-dynamics.physics_config.move_speed)

    def test_no_input_in_air_keeps_velocity(self, dynamics):
        assert dynamics.horizontal_velocity(3.0, 0.0, is_grounded=False) == 3.0

    def test_no_input_on_ground_decays(self, dynamics):
        assert 0.0 < dynamics.horizontal_velocity(3.0, 0.0, is_grounded=True) < 3.0

    def test_damping(self, dynamics):
        assert dynamics.get_damping(False) == 1.0
        assert dynamics.get_damping(True) == pytest.approx(1 - 0.05 * 0.3)


class TestVertical:
    def test_gravity(self, dynamics):
        pc = dynamics.physics_config
        assert dynamics.vertical_velocity(0.0, False, False) == pytest.approx(pc.gravity * pc.dt)

    def test_jump_from_ground(self, dynamics):
        pc = dynamics.physics_config
        vy = dynamics.vertical_velocity(0.0, True, True)
        assert vy == pytest.approx(pc.jump_impulse + pc.gravity * pc.dt)

    def test_no_jump_in_air(self, dynamics):
        assert dynamics.vertical_velocity(0.0, True, False) < 0.0

    def test_terminal_velocity(self, dynamics):
        pc = dynamics.physics_config
        assert dynamics.vertical_velocity(-100.0, False, False) == -pc.max_fall_speed
