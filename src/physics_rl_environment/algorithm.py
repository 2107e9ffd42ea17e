"""Capability interfaces for agents, training algorithms and their consumers.

An Algorithm runs on a dedicated thread and streams messages through a
Sender. A TrainingDetails owns the matching Receiver on the consumer side,
accumulates messages and can hand out a previously produced Agent. Closing
(or dropping) the TrainingDetails' receiver is the only way to cancel a
training run: the algorithm's next ``send`` returns False and it must return.
"""

import copy
import dataclasses
import itertools
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, Optional, Tuple, Type, TypeVar

from .channel import Receiver, Sender
from .environment import Environment
from .errors import ConfigError
from .moves import Move
from .world import World

AgentT = TypeVar("AgentT", bound="Agent")
MessageT = TypeVar("MessageT")
DetailsT = TypeVar("DetailsT", bound="TrainingDetails")


class Agent(ABC):
    """A policy mapping the current Environment to a Move.

    Agents may keep internal state between calls (replay cursors, RNGs,
    recurrent memory) but must never mutate the Environment. ``copy`` must
    return a fully independent agent: consumers keep historical agents while
    training continues.
    """

    name: str = "agent"

    def __call__(self, environment: Environment) -> Move:
        return self.get_move(environment)

    @abstractmethod
    def get_move(self, environment: Environment) -> Move:
        """Choose the move for the current tick."""

    def reset(self) -> None:
        """Called before the agent drives a fresh Environment."""
        pass

    def copy(self) -> "Agent":
        return copy.deepcopy(self)

    def describe(self) -> Dict[str, Any]:
        """Inspection data for presenting the agent."""
        return {"name": self.name}


class TrainingDetails(ABC, Generic[AgentT, MessageT]):
    """Consumer-side accumulator of training messages.

    Only ever reads from its Receiver. ``receive_messages`` is safe to call
    from a UI loop: it takes at most ``max_batch`` messages that are already
    buffered and never waits for more.
    """

    max_batch: int = 1000

    def __init__(self, receiver: Receiver, max_batch: Optional[int] = None):
        self.receiver = receiver
        if max_batch is not None:
            self.max_batch = max_batch
        self.messages_received = 0

    def receive_messages(self) -> int:
        """Drain buffered messages into internal storage.

        Returns:
            Number of messages taken by this call.
        """
        taken = 0
        for message in itertools.islice(self.receiver.try_iter(), self.max_batch):
            self.on_message(message)
            taken += 1
        self.messages_received += taken
        return taken

    @abstractmethod
    def on_message(self, message: MessageT) -> None:
        """Store one received message."""

    @abstractmethod
    def details(self, select: Any = None) -> Optional[AgentT]:
        """Presentation hook.

        Args:
            select: Consumer's selection request, None when nothing was
                requested this frame.

        Returns:
            The selected agent, which stays in storage, or None.
        """

    @property
    def finished(self) -> bool:
        """Every producer is gone and every message has been received."""
        return self.receiver.disconnected and self.receiver.pending == 0

    def close(self) -> None:
        """Drop the receiver, which cancels the training run."""
        self.receiver.close()


class Algorithm(ABC, Generic[AgentT, MessageT, DetailsT]):
    """A training procedure producing a stream of messages.

    Subclasses set ``config_class`` to a dataclass of hyperparameters. A
    ``RANGES`` class attribute on that dataclass maps field names to
    (min, max) bounds used by :meth:`configure`.
    """

    name: str = "algorithm"
    config_class: ClassVar[Type[Any]]

    def __init__(self, config: Any = None):
        self.config = config if config is not None else self.config_class()

    def copy(self) -> "Algorithm":
        return type(self)(config=dataclasses.replace(self.config))

    @abstractmethod
    def train(self, world: World, sender: Sender) -> None:
        """Run the whole training procedure on the calling thread.

        Must return as soon as ``sender.send`` returns False.
        """

    @abstractmethod
    def training_details_receiver(self, receiver: Receiver) -> DetailsT:
        """Build the consumer paired with this algorithm's message type."""

    # ------------------------------------------------------------------
    # Configuration surface
    # ------------------------------------------------------------------

    def _ranges(self) -> Dict[str, Tuple[float, float]]:
        return dict(getattr(self.config, "RANGES", {}))

    def selection(self) -> Dict[str, Dict[str, Any]]:
        """Describe every editable hyperparameter with its value and range."""
        ranges = self._ranges()
        return {
            f.name: {"value": getattr(self.config, f.name), "range": ranges.get(f.name)}
            for f in dataclasses.fields(self.config)
        }

    def configure(self, **changes: Any) -> Any:
        """Update hyperparameters, clamping numeric values to their ranges.

        Raises:
            ConfigError: for a name that is not a hyperparameter.
        """
        names = {f.name for f in dataclasses.fields(self.config)}
        unknown = sorted(set(changes) - names)
        if unknown:
            raise ConfigError(f"Unknown {self.name} settings: {', '.join(unknown)}")

        ranges = self._ranges()
        updates = {}
        for key, value in changes.items():
            current = getattr(self.config, key)
            if key in ranges and value is not None:
                low, high = ranges[key]
                value = min(max(value, low), high)
                if isinstance(current, int) and not isinstance(current, bool):
                    value = int(value)
            updates[key] = value
        self.config = dataclasses.replace(self.config, **updates)
        return self.config

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.config == other.config

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"
