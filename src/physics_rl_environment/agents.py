"""Reference agents.

SequenceAgent replays a fixed list of moves, the candidate representation
used by search-based algorithms. The scripted agents are baselines for
evaluation and tests.
"""

from typing import Any, Dict, Optional, Sequence

import numpy as np

from .algorithm import Agent
from .environment import Environment
from .moves import IDLE, Move


class SequenceAgent(Agent):
    """Plays each move of ``moves`` for ``repeat_move`` ticks, then idles."""

    name = "sequence"

    def __init__(self, moves: Sequence[Move], repeat_move: int = 20):
        if repeat_move < 1:
            raise ValueError(f"repeat_move must be at least 1, got {repeat_move}")
        self.moves = tuple(moves)
        self.repeat_move = repeat_move
        self._curr = 0

    def reset(self):
        self._curr = 0

    def get_move(self, environment: Environment) -> Move:
        index = self._curr // self.repeat_move
        if index < len(self.moves):
            self._curr += 1
            return self.moves[index]
        return IDLE

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "length": len(self.moves),
            "repeat_move": self.repeat_move,
            "moves": [m.to_index() for m in self.moves],
        }


class IdleAgent(Agent):
    """Never presses anything."""

    name = "idle"

    def get_move(self, environment):
        return IDLE


class RushAgent(Agent):
    """Always hold right, jump when stalled on the ground or on a timer.

    Fast completions on open levels, a useful upper bound for search.
    """

    name = "rush"

    def __init__(self, jump_interval: int = 25, stall_speed: float = 0.5):
        self.jump_interval = jump_interval
        self.stall_speed = stall_speed
        self._step = 0

    def reset(self):
        self._step = 0

    def get_move(self, environment):
        self._step += 1
        should_jump = environment.is_grounded and (
            self._step % self.jump_interval == 0
            or abs(environment.vx) < self.stall_speed
        )
        return Move(right=True, up=should_jump)

    def describe(self):
        return {"name": self.name, "jump_interval": self.jump_interval}


class RandomAgent(Agent):
    """Uniform random left/right each tick, occasional jumps.

    Broad state coverage, good baseline. Seeded agents are reproducible:
    ``reset`` rewinds the generator to its seed.
    """

    name = "random"

    def __init__(self, seed: Optional[int] = None, jump_probability: float = 0.15):
        self.seed = seed
        self.jump_probability = jump_probability
        self.rng = np.random.default_rng(seed)

    def reset(self):
        if self.seed is not None:
            self.rng = np.random.default_rng(self.seed)

    def get_move(self, environment):
        left, right = self.rng.random(2) < 0.5
        up = self.rng.random() < self.jump_probability
        return Move(left=bool(left), right=bool(right), up=bool(up))

    def describe(self):
        return {"name": self.name, "seed": self.seed, "jump_probability": self.jump_probability}


AGENTS = {
    "sequence": SequenceAgent,
    "idle": IdleAgent,
    "rush": RushAgent,
    "random": RandomAgent,
}
