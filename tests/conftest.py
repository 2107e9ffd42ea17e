"""Pytest configuration and shared fixtures."""

import pytest

from physics_rl_environment.agents import SequenceAgent
from physics_rl_environment.config import PhysicsConfig
from physics_rl_environment.environment import Environment
from physics_rl_environment.levels import get_world
from physics_rl_environment.moves import Move


@pytest.fixture
def physics_config():
    """Default physics attributes."""
    return PhysicsConfig()


@pytest.fixture
def flat_world():
    """Flat floor, single goal 10 units to the right."""
    return get_world("flat")


@pytest.fixture
def wall_world():
    """Goal behind an unjumpable wall."""
    return get_world("wall")


@pytest.fixture
def no_goals_world():
    return get_world("no_goals")


@pytest.fixture
def environment(flat_world):
    """Fresh Environment on the flat level."""
    return Environment.from_world(flat_world)


@pytest.fixture
def right_agent():
    """Holds right and never jumps: reaches the flat level's goal along the floor."""
    return SequenceAgent([Move(right=True)], repeat_move=10000)
