"""Predefined levels for testing/demo.

Every level spawns the player resting on a floor whose top sits at
``-player_height / 2``, so the player's center starts at y = 0.
"""

from typing import Dict

from .config import PhysicsConfig
from .world import Goal, Obstacle, World


FLOOR_THICKNESS = 1.0


def _floor(left: float, right: float, physics: PhysicsConfig) -> Obstacle:
    """Floor slab spanning [left, right] with its top at -player_height/2."""
    top = -physics.player_height / 2
    return Obstacle(
        x=(left + right) / 2,
        y=top - FLOOR_THICKNESS / 2,
        width=right - left,
        height=FLOOR_THICKNESS,
    )


def flat_world(physics: PhysicsConfig = PhysicsConfig()) -> World:
    """Flat floor with a single goal 10 units to the right of the spawn."""
    return World(
        obstacles=(_floor(-100.0, 100.0, physics),),
        goals=(Goal(10.0, 0.0),),
        physics=physics,
    )


def step_world(physics: PhysicsConfig = PhysicsConfig()) -> World:
    """A one-unit ledge that must be jumped onto, goal on top of it."""
    top = -physics.player_height / 2
    return World(
        obstacles=(
            _floor(-100.0, 100.0, physics),
            Obstacle(x=8.0, y=top + 0.5, width=6.0, height=1.0),
        ),
        goals=(Goal(10.0, top + 1.0 + 0.75),),
        physics=physics,
    )


def gap_world(physics: PhysicsConfig = PhysicsConfig()) -> World:
    """Two floors separated by a pit, goal on the far side."""
    return World(
        obstacles=(
            _floor(-20.0, 4.0, physics),
            _floor(7.0, 30.0, physics),
        ),
        goals=(Goal(12.0, 0.0),),
        physics=physics,
    )


def wall_world(physics: PhysicsConfig = PhysicsConfig()) -> World:
    """Goal behind a wall taller than any jump: unreachable."""
    top = -physics.player_height / 2
    return World(
        obstacles=(
            _floor(-100.0, 100.0, physics),
            Obstacle(x=5.5, y=top + 10.0, width=1.0, height=20.0),
        ),
        goals=(Goal(10.0, 0.0),),
        physics=physics,
    )


def no_goals_world(physics: PhysicsConfig = PhysicsConfig()) -> World:
    """Floor only."""
    return World(obstacles=(_floor(-100.0, 100.0, physics),), physics=physics)


WORLDS = {
    "flat": flat_world,
    "step": step_world,
    "gap": gap_world,
    "wall": wall_world,
    "no_goals": no_goals_world,
}


def get_world(name: str, physics: PhysicsConfig = PhysicsConfig()) -> World:
    """Build a predefined level by name."""
    try:
        factory = WORLDS[name]
    except KeyError:
        raise KeyError(f"Unknown world {name!r}, known: {sorted(WORLDS)}") from None
    return factory(physics)


def all_worlds(physics: PhysicsConfig = PhysicsConfig()) -> Dict[str, World]:
    return {name: factory(physics) for name, factory in WORLDS.items()}
