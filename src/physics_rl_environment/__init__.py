"""physics-rl-environment: deterministic 2D physics levels for training agents.

A World (static obstacles, goal regions, player spawn and physics attributes)
is simulated by an Environment one fixed tick per Move. Training algorithms
run on their own thread and stream results through a channel to a
TrainingDetails consumer, which a UI or headless driver polls without ever
blocking. Dropping the consumer cancels training.
"""

from .errors import PhysicsRLError, ConfigError
from .config import PhysicsConfig, CONFIGS
from .moves import Move, IDLE
from .world import World, Obstacle, Goal
from .levels import WORLDS, get_world
from .environment import Environment, PLAYER_HANDLE
from .channel import channel, Sender, Receiver, ChannelError, Empty, Disconnected
from .algorithm import Agent, Algorithm, TrainingDetails
from .agents import SequenceAgent, IdleAgent, RushAgent, RandomAgent, AGENTS
from .training import evaluate, rollout, spawn_training_thread, run, Trajectory, TrainingSession
from .search import RandomSearchAlgorithm, RandomSearchConfig, ScoreboardTrainingDetails, ALGORITHMS

__all__ = [
    "PhysicsRLError",
    "ConfigError",
    "PhysicsConfig",
    "CONFIGS",
    "Move",
    "IDLE",
    "World",
    "Obstacle",
    "Goal",
    "WORLDS",
    "get_world",
    "Environment",
    "PLAYER_HANDLE",
    "channel",
    "Sender",
    "Receiver",
    "ChannelError",
    "Empty",
    "Disconnected",
    "Agent",
    "Algorithm",
    "TrainingDetails",
    "SequenceAgent",
    "IdleAgent",
    "RushAgent",
    "RandomAgent",
    "AGENTS",
    "evaluate",
    "rollout",
    "spawn_training_thread",
    "run",
    "Trajectory",
    "TrainingSession",
    "RandomSearchAlgorithm",
    "RandomSearchConfig",
    "ScoreboardTrainingDetails",
    "ALGORITHMS",
]
