"""Training driver: evaluation helpers, the training thread and the poll loop.

The driver wires an Algorithm to its TrainingDetails:

    thread, receiver = spawn_training_thread(algorithm, world)
    details = algorithm.training_details_receiver(receiver)
    while ...:
        details.receive_messages()
        agent = details.details(selection)
        if agent is not None:
            trajectory = rollout(world, agent, number_of_steps)

TrainingSession packages those steps, ``run`` is the complete headless loop.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from .algorithm import Agent, Algorithm, TrainingDetails
from .channel import DEFAULT_CAPACITY, Receiver, channel
from .environment import Environment
from .errors import ConfigError
from .moves import Move
from .world import World

LOGGER = logging.getLogger(__name__)

DEFAULT_NUMBER_OF_STEPS = 1000


def evaluate(world: World, agent: Agent, number_of_steps: int) -> float:
    """Score an agent on a fresh Environment: the closest it got to a goal.

    A copy of the agent is used, so the caller's agent is not advanced. The
    run stops early once the goal is reached (score 0.0).

    Raises:
        ConfigError: if the world has no goals to measure distance to.
    """
    if not world.has_goals:
        raise ConfigError("cannot score an agent on a world without goals")

    agent = agent.copy()
    agent.reset()
    environment = Environment.from_world(world)
    score = environment.distance_to_goals()
    for _ in range(number_of_steps):
        if environment.won():
            break
        environment.step(agent.get_move(environment))
        score = min(score, environment.distance_to_goals())
    return score


@dataclass
class Trajectory:
    """Per-tick record of an agent driving an Environment."""

    moves: List[Move] = field(default_factory=list)
    states: List[Dict[str, Any]] = field(default_factory=list)
    won: bool = False

    @property
    def steps(self) -> int:
        return len(self.moves)

    @property
    def final_state(self) -> Optional[Dict[str, Any]]:
        return self.states[-1] if self.states else None

    def to_frame(self) -> pd.DataFrame:
        """One row per tick (after the step), initial state excluded."""
        rows = []
        for move, state in zip(self.moves, self.states[1:]):
            x, y = state["position"]
            vx, vy = state["velocity"]
            rows.append({
                "step": state["steps"],
                "left": move.left,
                "right": move.right,
                "up": move.up,
                "x": x,
                "y": y,
                "vx": vx,
                "vy": vy,
                "grounded": state["grounded"],
                "distance_to_goals": state["distance_to_goals"],
                "won": state["won"],
            })
        return pd.DataFrame(rows, columns=[
            "step", "left", "right", "up", "x", "y", "vx", "vy",
            "grounded", "distance_to_goals", "won",
        ])


def rollout(
    world: World,
    agent: Agent,
    number_of_steps: int,
    stop_on_win: bool = True,
) -> Trajectory:
    """Drive a copy of ``agent`` on a fresh Environment built from ``world``.

    Args:
        world: Level to play.
        agent: Policy; a reset copy is used so stored agents stay untouched.
        number_of_steps: Maximum ticks to simulate.
        stop_on_win: Stop stepping once the goal is reached.
    """
    agent = agent.copy()
    agent.reset()
    environment = Environment.from_world(world)
    trajectory = Trajectory(states=[environment.snapshot()])
    for _ in range(number_of_steps):
        if stop_on_win and environment.won():
            break
        move = agent.get_move(environment)
        environment.step(move)
        trajectory.moves.append(move)
        trajectory.states.append(environment.snapshot())
    trajectory.won = environment.won()
    return trajectory


def spawn_training_thread(
    algorithm: Algorithm,
    world: World,
    capacity: Optional[int] = DEFAULT_CAPACITY,
) -> Tuple[threading.Thread, Receiver]:
    """Start ``algorithm.train`` on a daemon thread.

    The thread owns private copies of the algorithm and the world. Its
    sender is closed when ``train`` returns, so the receiver observes
    disconnection once every message has been read.

    Returns:
        (thread, receiver): the running thread and the consuming end.
    """
    sender, receiver = channel(capacity)
    algorithm = algorithm.copy()
    world = world.copy()

    def _train() -> None:
        LOGGER.info("Training started: %s", algorithm.name)
        try:
            algorithm.train(world, sender)
        except Exception:
            LOGGER.exception("Training thread for %s crashed", algorithm.name)
        finally:
            sender.close()
        LOGGER.info("Training finished: %s", algorithm.name)

    thread = threading.Thread(target=_train, name=f"train-{algorithm.name}", daemon=True)
    thread.start()
    return thread, receiver


class TrainingSession:
    """One training run: the background thread plus its TrainingDetails.

    Usage:
        with TrainingSession(algorithm, world) as session:
            while not session.finished:
                session.poll()
                agent = session.select("best")
    """

    def __init__(
        self,
        algorithm: Algorithm,
        world: World,
        capacity: Optional[int] = DEFAULT_CAPACITY,
    ):
        self.algorithm = algorithm
        self.world = world
        self.capacity = capacity
        self.details: Optional[TrainingDetails] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> TrainingDetails:
        """Spawn the training thread. Calling it on a live session is a no-op."""
        if self.details is not None and self.running:
            return self.details
        self._thread, receiver = spawn_training_thread(
            self.algorithm, self.world, self.capacity
        )
        self.details = self.algorithm.training_details_receiver(receiver)
        return self.details

    def _require_details(self) -> TrainingDetails:
        if self.details is None:
            raise RuntimeError("TrainingSession.start() has not been called")
        return self.details

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def finished(self) -> bool:
        """Training returned and every message was received."""
        return self.details is not None and self.details.finished

    def poll(self) -> int:
        """Receive one batch of messages. Never blocks."""
        return self._require_details().receive_messages()

    def select(self, select: Any = None) -> Optional[Agent]:
        return self._require_details().details(select)

    def visualize(self, agent: Agent, number_of_steps: int = DEFAULT_NUMBER_OF_STEPS) -> Trajectory:
        """Run ``agent`` on a fresh Environment of the session's world."""
        return rollout(self.world, agent, number_of_steps)

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Cancel training by dropping the receiver and wait for the thread.

        Returns:
            True if the training thread has exited.
        """
        if self.details is not None:
            self.details.close()
        if self._thread is not None:
            self._thread.join(timeout)
            return not self._thread.is_alive()
        return True

    def __enter__(self) -> "TrainingSession":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop(timeout=5.0)


Presenter = Callable[[TrainingDetails], Optional[Agent]]


def run(
    algorithm: Algorithm,
    world: World,
    presenter: Presenter,
    number_of_steps: Optional[int] = None,
    poll_interval: float = 0.01,
    timeout: Optional[float] = None,
) -> Optional[Trajectory]:
    """Headless driver loop.

    Spawns training, then repeatedly drains messages and asks ``presenter``
    for a selection. The first agent it returns is played on a fresh
    Environment and its trajectory returned; training is cancelled at that
    point. Returns None if training ends (or ``timeout`` seconds pass) with
    no selection.
    """
    if number_of_steps is None:
        number_of_steps = getattr(algorithm.config, "number_of_steps", DEFAULT_NUMBER_OF_STEPS)
    deadline = math.inf if timeout is None else time.monotonic() + timeout

    with TrainingSession(algorithm, world) as session:
        while True:
            session.poll()
            agent = presenter(session.details)
            if agent is not None:
                LOGGER.info("Visualizing selected agent: %s", agent.describe())
                return session.visualize(agent, number_of_steps)
            if session.finished or time.monotonic() >= deadline:
                return None
            time.sleep(poll_interval)
