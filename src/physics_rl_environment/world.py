"""Immutable level description: obstacles, goals and the player spawn.

A World is produced by the level editor and handed to Environments and
training algorithms. It is never mutated afterwards, so it can be shared or
copied freely between simulations and threads.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import pymunk

from .config import PhysicsConfig
from .errors import ConfigError
from .physics import box


def _check_extent(kind: str, width: float, height: float) -> None:
    if not (width > 0 and height > 0):
        raise ConfigError(f"{kind} must have a positive extent, got {width}x{height}")


@dataclass(frozen=True)
class Obstacle:
    """Fixed rectangular block, centered at (x, y)."""

    x: float
    y: float
    width: float = 1.0
    height: float = 1.0

    def __post_init__(self):
        _check_extent("Obstacle", self.width, self.height)

    @property
    def bb(self) -> pymunk.BB:
        return box((self.x, self.y), self.width, self.height)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Goal:
    """Goal region, centered at (x, y). Touching it wins the level."""

    x: float
    y: float
    width: float = 1.0
    height: float = 1.0
    goal_id: int = 0

    def __post_init__(self):
        _check_extent("Goal", self.width, self.height)

    @property
    def bb(self) -> pymunk.BB:
        return box((self.x, self.y), self.width, self.height)

    @property
    def center(self) -> pymunk.Vec2d:
        return pymunk.Vec2d(self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "goal_id": self.goal_id,
        }


@dataclass(frozen=True)
class World:
    """Complete level: static geometry, goals, player spawn and physics.

    Sequences are normalized to tuples so the World stays hashable and
    immutable even when built from lists.
    """

    player_position: Tuple[float, float] = (0.0, 0.0)
    player_velocity: Tuple[float, float] = (0.0, 0.0)
    obstacles: Tuple[Obstacle, ...] = ()
    goals: Tuple[Goal, ...] = ()
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)

    def __post_init__(self):
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "player_position", tuple(float(v) for v in self.player_position))
        object.__setattr__(self, "player_velocity", tuple(float(v) for v in self.player_velocity))
        object.__setattr__(self, "obstacles", tuple(self.obstacles))
        object.__setattr__(self, "goals", tuple(self.goals))
        if len(self.player_position) != 2 or len(self.player_velocity) != 2:
            raise ConfigError("player position and velocity must be 2D")
        self.physics.validate()

    @property
    def has_goals(self) -> bool:
        return bool(self.goals)

    @property
    def player_bb(self) -> pymunk.BB:
        """Player bounding box at spawn."""
        return box(self.player_position, *self.physics.player_size)

    def copy(self) -> "World":
        """Return an equal World. Worlds are immutable, so this is cheap."""
        return World(
            player_position=self.player_position,
            player_velocity=self.player_velocity,
            obstacles=self.obstacles,
            goals=self.goals,
            physics=self.physics,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested plain dictionary."""
        return {
            "player_position": list(self.player_position),
            "player_velocity": list(self.player_velocity),
            "obstacles": [o.to_dict() for o in self.obstacles],
            "goals": [g.to_dict() for g in self.goals],
            "physics": self.physics.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "World":
        """Create from a dictionary produced by :meth:`to_dict`."""
        return cls(
            player_position=tuple(d.get("player_position", (0.0, 0.0))),
            player_velocity=tuple(d.get("player_velocity", (0.0, 0.0))),
            obstacles=tuple(Obstacle(**o) for o in d.get("obstacles", ())),
            goals=tuple(Goal(**g) for g in d.get("goals", ())),
            physics=PhysicsConfig.from_dict(d.get("physics", {})),
        )
