"""Live simulation of a World, advanced one fixed tick per player Move.

The Environment is the only mutable piece of the simulation. ``step`` is a
pure function of the prior state and the Move: no randomness and no wall
clock, so two Environments built from the same World and fed the same Moves
follow bit-identical trajectories.

Tick order:
    1. horizontal velocity from left/right intent (+ ground friction)
    2. jump (grounded only) and gravity
    3. swept x motion against obstacles, stopping at first contact
    4. swept y motion, landing on an obstacle makes the player grounded
    5. goal overlap test
"""

import copy
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pymunk

from .dynamics import StandardDynamics
from .moves import Move
from .physics import EPSILON, box, box_distance, boxes_overlap, sweep_x, sweep_y, translate
from .world import World


# Handle of the player body. An Environment simulates a single body.
PLAYER_HANDLE = 0


class Environment:
    """Mutable player state plus the static geometry of its World."""

    def __init__(self, world: World):
        self.world = world
        self.physics_config = world.physics
        self.dynamics = StandardDynamics(world.physics)

        self._obstacles: Tuple[pymunk.BB, ...] = tuple(o.bb for o in world.obstacles)
        self._goals: Tuple[pymunk.BB, ...] = tuple(g.bb for g in world.goals)

        self.reset()

    @classmethod
    def from_world(cls, world: World) -> "Environment":
        return cls(world)

    @classmethod
    def create(cls, world: World) -> Tuple["Environment", int]:
        """Build an Environment and return it with the player's body handle."""
        return cls(world), PLAYER_HANDLE

    def reset(self) -> None:
        """Put the player back at the World's spawn state."""
        self.x, self.y = self.world.player_position
        self.vx, self.vy = self.world.player_velocity
        self.is_grounded = self._resting_on_obstacle()
        self.steps = 0
        self._won = self._overlaps_goal()

    def _resting_on_obstacle(self) -> bool:
        """Whether the player's bottom edge rests on top of an obstacle."""
        return sweep_y(self.player_bb, -EPSILON, self._obstacles)[1]

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, move: Move) -> None:
        """Advance the simulation by exactly one tick.

        Never fails. Stepping an Environment that is already won is allowed
        and stays deterministic.
        """
        dynamics = self.dynamics
        dt = self.physics_config.dt

        self.vx = dynamics.horizontal_velocity(
            self.vx, dynamics.direction(move), self.is_grounded
        )
        self.vy = dynamics.vertical_velocity(self.vy, move.up, self.is_grounded)

        player = self.player_bb
        dx, blocked_x = sweep_x(player, self.vx * dt, self._obstacles)
        if blocked_x:
            self.vx = 0.0

        dy, blocked_y = sweep_y(translate(player, dx, 0.0), self.vy * dt, self._obstacles)
        if blocked_y:
            self.is_grounded = self.vy < 0
            self.vy = 0.0
        else:
            self.is_grounded = False

        self.x += dx
        self.y += dy
        self.steps += 1
        self._won = self._overlaps_goal()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def position(self) -> pymunk.Vec2d:
        return pymunk.Vec2d(self.x, self.y)

    @property
    def velocity(self) -> pymunk.Vec2d:
        return pymunk.Vec2d(self.vx, self.vy)

    @property
    def player_bb(self) -> pymunk.BB:
        return box((self.x, self.y), *self.physics_config.player_size)

    def won(self) -> bool:
        """Whether the player currently overlaps any goal region."""
        return self._won

    def _overlaps_goal(self) -> bool:
        player = self.player_bb
        return any(boxes_overlap(player, goal) for goal in self._goals)

    def distance_to_goals(self) -> Optional[float]:
        """Smallest gap between the player and any goal, None without goals.

        The gap is 0.0 exactly when the player overlaps a goal.
        """
        if not self._goals:
            return None
        player = self.player_bb
        return min(box_distance(player, goal) for goal in self._goals)

    def nearest_goal(self) -> Optional[int]:
        """Index of the goal closest to the player (first one on ties)."""
        if not self._goals:
            return None
        player = self.player_bb
        distances = [box_distance(player, goal) for goal in self._goals]
        return distances.index(min(distances))

    def state(self) -> Optional[np.ndarray]:
        """Observation vector [dx, dy, vx, vy] relative to the nearest goal center.

        Returns None when the World has no goals.
        """
        index = self.nearest_goal()
        if index is None:
            return None
        goal = self.world.goals[index]
        return np.array(
            [self.x - goal.x, self.y - goal.y, self.vx, self.vy], dtype=np.float32
        )

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the current state, for presentation and logs."""
        return {
            "steps": self.steps,
            "position": (self.x, self.y),
            "velocity": (self.vx, self.vy),
            "grounded": self.is_grounded,
            "won": self._won,
            "distance_to_goals": self.distance_to_goals(),
        }

    def copy(self) -> "Environment":
        """Independent copy; geometry is immutable and shared."""
        return copy.copy(self)

    def __repr__(self) -> str:
        return (
            f"Environment(steps={self.steps}, position=({self.x:.3f}, {self.y:.3f}), "
            f"velocity=({self.vx:.3f}, {self.vy:.3f}), won={self._won})"
        )
