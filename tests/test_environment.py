"""Tests for the deterministic Environment."""

import numpy as np
import pytest

from physics_rl_environment.agents import RandomAgent, RushAgent
from physics_rl_environment.environment import PLAYER_HANDLE, Environment
from physics_rl_environment.moves import IDLE, Move
from physics_rl_environment.world import Goal, Obstacle, World

RIGHT = Move(right=True)
LEFT = Move(left=True)


def hold(environment, move, ticks):
    for _ in range(ticks):
        environment.step(move)


class TestCreation:
    def test_create_returns_player_handle(self, flat_world):
        environment, handle = Environment.create(flat_world)
        assert handle == PLAYER_HANDLE
        assert environment.steps == 0

    def test_initial_state(self, environment):
        assert environment.position == (0.0, 0.0)
        assert environment.velocity == (0.0, 0.0)
        assert not environment.won()
        assert environment.distance_to_goals() == pytest.approx(9.0)

    def test_spawn_velocity(self):
        world = World(player_velocity=(2.0, 0.0))
        environment = Environment.from_world(world)
        environment.step(IDLE)
        assert environment.x == pytest.approx(2.0 / 60)


class TestStep:
    def test_settles_on_floor(self, environment):
        environment.step(IDLE)
        assert environment.is_grounded
        assert environment.y == 0.0
        assert environment.vy == 0.0

    def test_idle_stays_put(self, environment):
        hold(environment, IDLE, 100)
        assert environment.position == (0.0, 0.0)
        assert environment.steps == 100

    def test_lone_player_falls(self):
        environment = Environment.from_world(World())
        hold(environment, IDLE, 10)
        assert environment.y < 0.0
        assert not environment.is_grounded

    def test_spawn_on_floor_is_grounded(self, environment):
        assert environment.is_grounded

    def test_spawn_above_floor_is_airborne(self):
        world = World(player_position=(0.0, 0.5), obstacles=[Obstacle(0.0, -1.25, 20.0, 1.0)])
        assert not Environment.from_world(world).is_grounded

    def test_jump_on_first_tick_from_floor(self, environment):
        environment.step(Move(up=True))
        assert environment.y > 0.0
        assert not environment.is_grounded

    def test_jump_only_when_grounded(self, environment):
        environment.step(Move(up=True))
        rising_vy = environment.vy
        environment.step(Move(up=True))
        assert environment.vy < rising_vy

    def test_no_jump_when_spawned_in_air(self):
        environment = Environment.from_world(World())
        environment.step(Move(up=True))
        assert environment.vy < 0.0
        assert environment.y < 0.0

    def test_reset_restores_grounded(self, environment):
        environment.step(Move(up=True))
        environment.reset()
        assert environment.is_grounded
        assert environment.position == (0.0, 0.0)

    def test_jump_returns_to_floor(self, environment):
        environment.step(IDLE)
        environment.step(Move(up=True))
        hold(environment, IDLE, 120)
        assert environment.is_grounded
        assert environment.y == pytest.approx(0.0)

    def test_left_and_right_cancel(self, environment):
        environment.step(IDLE)
        hold(environment, Move(left=True, right=True), 30)
        assert environment.x == 0.0
        assert environment.vx == 0.0

    def test_thin_platform_catches_fast_fall(self):
        world = World(player_position=(0.0, 20.0), obstacles=[Obstacle(0.0, 0.0, 10.0, 0.01)])
        environment = Environment.from_world(world)
        hold(environment, IDLE, 300)
        assert environment.is_grounded
        assert environment.y == pytest.approx(0.005 + 0.75)

    def test_wall_blocks(self, wall_world):
        environment = Environment.from_world(wall_world)
        hold(environment, RIGHT, 300)
        assert environment.player_bb.right == pytest.approx(5.0)
        assert environment.vx == 0.0
        assert not environment.won()
        assert environment.distance_to_goals() > 0.0


class TestGoal:
    def test_holding_right_wins(self, environment):
        for _ in range(300):
            environment.step(RIGHT)
            if environment.won():
                break
        assert environment.won()
        assert environment.distance_to_goals() == 0.0

    def test_holding_left_moves_away(self, environment):
        previous = environment.distance_to_goals()
        for _ in range(300):
            environment.step(LEFT)
            assert not environment.won()
            assert environment.distance_to_goals() >= previous
            previous = environment.distance_to_goals()
        assert previous > 9.0

    def test_won_iff_distance_zero(self, flat_world):
        environment = Environment.from_world(flat_world)
        agent = RushAgent()
        for _ in range(400):
            environment.step(agent(environment))
            assert environment.won() == (environment.distance_to_goals() == 0.0)

    def test_spawn_inside_goal(self):
        world = World(goals=[Goal(0.0, 0.0)])
        environment = Environment.from_world(world)
        assert environment.won()
        assert environment.distance_to_goals() == 0.0

    def test_stepping_after_win(self, environment):
        hold(environment, RIGHT, 300)
        environment.step(IDLE)

    def test_nearest_of_several_goals(self):
        world = World(
            obstacles=[Obstacle(0.0, -1.25, 200.0, 1.0)],
            goals=[Goal(20.0, 0.0), Goal(-5.0, 0.0)],
        )
        environment = Environment.from_world(world)
        assert environment.nearest_goal() == 1
        assert environment.distance_to_goals() == pytest.approx(4.0)

    def test_no_goals(self, no_goals_world):
        environment = Environment.from_world(no_goals_world)
        hold(environment, RIGHT, 10)
        assert environment.distance_to_goals() is None
        assert environment.nearest_goal() is None
        assert environment.state() is None
        assert not environment.won()


class TestDeterminism:
    def test_same_moves_same_trajectory(self, flat_world):
        a = Environment.from_world(flat_world)
        b = Environment.from_world(flat_world)
        agent_a, agent_b = RandomAgent(seed=7), RandomAgent(seed=7)
        for _ in range(500):
            a.step(agent_a(a))
            b.step(agent_b(b))
            assert a.snapshot() == b.snapshot()

    def test_reset_replays(self, environment):
        agent = RandomAgent(seed=1)
        moves = [agent(environment) for _ in range(200)]
        for move in moves:
            environment.step(move)
        first = environment.snapshot()
        environment.reset()
        assert environment.steps == 0
        for move in moves:
            environment.step(move)
        assert environment.snapshot() == first


class TestQueries:
    def test_state_relative_to_goal(self, environment):
        state = environment.state()
        assert state.dtype == np.float32
        np.testing.assert_allclose(state, [-10.0, 0.0, 0.0, 0.0])

    def test_snapshot_keys(self, environment):
        assert set(environment.snapshot()) == {
            "steps", "position", "velocity", "grounded", "won", "distance_to_goals",
        }

    def test_copy_independent(self, environment):
        clone = environment.copy()
        hold(clone, RIGHT, 30)
        assert environment.steps == 0
        assert environment.x == 0.0
        assert clone.x > 0.0

    def test_repr(self, environment):
        assert "Environment(steps=0" in repr(environment)
