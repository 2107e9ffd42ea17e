"""Gymnasium environment wrapper for a World.

Provides the standard Gym API on top of Environment so off-the-shelf RL
code can train against a level.

Observation space: Box(4,) float32 from ``Environment.state()``:
    [0-1] player position relative to the nearest goal center
    [2-3] player velocity (vx, vy)

Action space: Discrete(8), decoded with ``Move.from_index``
(bit 0 = left, bit 1 = right, bit 2 = up).

Reward = weighted sum of raw signals (stored in info['reward_signals']):
    goal:     1.0 when the goal is reached
    progress: decrease in distance to the goals this tick
    step:     1.0 every step
"""

from typing import Any, Dict, Optional

import gymnasium
import numpy as np
from gymnasium import spaces

from .environment import Environment
from .errors import ConfigError
from .levels import get_world
from .moves import Move
from .world import World


class PhysicsEnv(gymnasium.Env):
    """Gymnasium wrapper for a single level."""

    metadata = {"render_modes": []}

    def __init__(
        self,
        world: Optional[World] = None,
        max_episode_steps: int = 1000,
        reward_weights: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.world = world if world is not None else get_world("flat")
        if not self.world.has_goals:
            raise ConfigError("PhysicsEnv needs a world with at least one goal")
        self.max_episode_steps = max_episode_steps

        self.reward_weights = reward_weights or {
            "goal": 100.0,
            "progress": 1.0,
            "step": -0.01,
        }

        self.action_space = spaces.Discrete(8)
        self.observation_space = spaces.Box(
            low=-np.inf, high=np.inf, shape=(4,), dtype=np.float32,
        )

        self._environment: Optional[Environment] = None
        self._prev_distance = 0.0

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)
        self._environment = Environment.from_world(self.world)
        self._prev_distance = self._environment.distance_to_goals()
        return self._environment.state(), self._get_info()

    def step(self, action):
        assert self._environment is not None, "Must call reset() before step()"

        move = Move.from_index(int(action))
        self._environment.step(move)

        reward_signals = self._compute_rewards()
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = self._environment.won()
        truncated = self._environment.steps >= self.max_episode_steps

        info = self._get_info()
        info["reward_signals"] = reward_signals
        return self._environment.state(), float(reward), terminated, truncated, info

    def _compute_rewards(self) -> Dict[str, float]:
        distance = self._environment.distance_to_goals()
        signals = {
            "progress": self._prev_distance - distance,
            "goal": 1.0 if self._environment.won() else 0.0,
            "step": 1.0,
        }
        self._prev_distance = distance
        return signals

    def _get_info(self) -> Dict[str, Any]:
        snapshot = self._environment.snapshot()
        return {
            "episode_steps": snapshot["steps"],
            "player_position": snapshot["position"],
            "grounded": snapshot["grounded"],
            "distance_to_goals": snapshot["distance_to_goals"],
            "won": snapshot["won"],
        }
