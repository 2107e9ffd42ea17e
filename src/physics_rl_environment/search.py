"""Random-search reference algorithm and its scoreboard consumer.

Each candidate is a random SequenceAgent, scored with :func:`evaluate` and
sent as a ``(score, agent)`` message. Lower scores are better: the score is
the closest distance to a goal the candidate achieved, 0.0 when it won.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .agents import SequenceAgent
from .algorithm import Agent, Algorithm, TrainingDetails
from .channel import Receiver, Sender
from .moves import Move
from .training import evaluate
from .world import World

LOGGER = logging.getLogger(__name__)

ScoreMessage = Tuple[float, Agent]


@dataclass
class RandomSearchConfig:
    """Hyperparameters for random search."""

    number_of_steps: int = 1000  # Ticks each candidate is evaluated for.
    number_of_candidates: int = 0  # Stop after this many candidates, 0 = until cancelled.
    repeat_move: int = 20  # Ticks each sampled move is held for.
    seed: Optional[int] = None

    RANGES: ClassVar[Dict[str, Tuple[int, int]]] = {
        "number_of_steps": (1, 100000),
        "number_of_candidates": (0, 100000),
        "repeat_move": (1, 100),
    }


class ScoreboardTrainingDetails(TrainingDetails[Agent, ScoreMessage]):
    """Keeps every (score, agent) message in arrival order."""

    def __init__(self, receiver: Receiver, max_batch: Optional[int] = None):
        super().__init__(receiver, max_batch)
        self.agents: List[ScoreMessage] = []

    def on_message(self, message: ScoreMessage) -> None:
        score, agent = message
        self.agents.append((float(score), agent))

    def best(self) -> Optional[ScoreMessage]:
        """Lowest-score entry, the earliest one on ties."""
        if not self.agents:
            return None
        return min(self.agents, key=lambda entry: entry[0])

    def history(self) -> pd.DataFrame:
        """Scores in arrival order with the running best."""
        scores = [score for score, _ in self.agents]
        frame = pd.DataFrame({"candidate": range(len(scores)), "score": scores})
        frame["best_so_far"] = frame["score"].cummin()
        return frame

    def details(self, select: Union[None, int, str] = None) -> Optional[Agent]:
        """Return the agent at index ``select``, or the best one for ``"best"``.

        Indices outside the board select nothing.
        """
        if select is None:
            return None
        if select == "best":
            best = self.best()
            return best[1] if best is not None else None
        if not 0 <= select < len(self.agents):
            return None
        return self.agents[select][1]


class RandomSearchAlgorithm(Algorithm[Agent, ScoreMessage, ScoreboardTrainingDetails]):
    """Samples random move sequences until cancelled or out of budget."""

    name = "random_search"
    config_class = RandomSearchConfig

    def sample_agent(self, rng: np.random.Generator) -> SequenceAgent:
        config = self.config
        length = config.number_of_steps // config.repeat_move
        moves = [Move.from_index(int(i)) for i in rng.integers(0, 8, size=length)]
        return SequenceAgent(moves, repeat_move=config.repeat_move)

    def train(self, world: World, sender: Sender) -> None:
        config = self.config
        rng = np.random.default_rng(config.seed)
        candidate = 0
        while not config.number_of_candidates or candidate < config.number_of_candidates:
            agent = self.sample_agent(rng)
            score = evaluate(world, agent, config.number_of_steps)
            if not sender.send((score, agent)):
                LOGGER.debug("Receiver dropped after %d candidates, stopping", candidate)
                return
            candidate += 1

    def training_details_receiver(self, receiver: Receiver) -> ScoreboardTrainingDetails:
        return ScoreboardTrainingDetails(receiver)


ALGORITHMS = {
    "random_search": RandomSearchAlgorithm,
}
