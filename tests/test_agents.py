"""Tests for reference agents."""

import pytest

from physics_rl_environment.agents import AGENTS, IdleAgent, RandomAgent, RushAgent, SequenceAgent
from physics_rl_environment.algorithm import Agent
from physics_rl_environment.moves import IDLE, Move


RIGHT = Move(right=True)
JUMP = Move(up=True)


class TestSequenceAgent:
    def test_repeats_each_move(self, environment):
        agent = SequenceAgent([RIGHT, JUMP], repeat_move=2)
        moves = [agent(environment) for _ in range(6)]
        assert moves == [RIGHT, RIGHT, JUMP, JUMP, IDLE, IDLE]

    def test_reset_rewinds(self, environment):
        agent = SequenceAgent([RIGHT, JUMP], repeat_move=1)
        agent(environment)
        agent.reset()
        assert agent(environment) == RIGHT

    def test_copy_is_independent(self, environment):
        agent = SequenceAgent([RIGHT, JUMP], repeat_move=1)
        clone = agent.copy()
        clone(environment)
        assert agent(environment) == RIGHT

    def test_invalid_repeat(self):
        with pytest.raises(ValueError):
            SequenceAgent([RIGHT], repeat_move=0)

    def test_describe(self):
        info = SequenceAgent([RIGHT, JUMP], repeat_move=5).describe()
        assert info["moves"] == [2, 4]
        assert info["repeat_move"] == 5


class TestScriptedAgents:
    def test_idle(self, environment):
        assert IdleAgent()(environment) == IDLE

    def test_rush_always_right(self, environment):
        agent = RushAgent()
        for _ in range(100):
            move = agent(environment)
            assert move.right and not move.left
            environment.step(move)

    def test_rush_jumps_when_stalled(self, environment):
        agent = RushAgent()
        environment.step(IDLE)  # land
        assert agent(environment).up

    def test_random_seeded_is_reproducible(self, environment):
        a, b = RandomAgent(seed=3), RandomAgent(seed=3)
        assert [a(environment) for _ in range(50)] == [b(environment) for _ in range(50)]

    def test_random_reset_rewinds(self, environment):
        agent = RandomAgent(seed=3)
        first = [agent(environment) for _ in range(20)]
        agent.reset()
        assert [agent(environment) for _ in range(20)] == first

    def test_random_varies(self, environment):
        agent = RandomAgent(seed=0)
        assert len({agent(environment) for _ in range(100)}) > 1


class TestRegistry:
    @pytest.mark.parametrize("name", ["idle", "rush", "random"])
    def test_registry_builds_agents(self, name, environment):
        agent = AGENTS[name]()
        assert isinstance(agent, Agent)
        assert isinstance(agent(environment), Move)
        assert agent.describe()["name"] == name
