"""Configuration system for the physics environment.

PhysicsConfig defines player attributes that parameterize the equations of motion.
The raw simulation constants (gravity, jump impulse, acceleration) are derived
from these attributes so that every preset reads in behavioral terms: how high
the player jumps, how fast it runs, how much it can steer in the air.

All values are in world units (the level editor's grid) and seconds.
"""

from dataclasses import dataclass
from typing import Tuple, Dict, Any, ClassVar, Optional
import random

from .errors import ConfigError


@dataclass(frozen=True)
class PhysicsConfig:
    """Player attributes that parameterize the equations of motion.

    The config is frozen: a World carries one and every Environment built from
    that World must see exactly the same constants.
    """

    # === PLAYER ATTRIBUTES (what we configure) ===

    jump_height: float = 3.0  # Apex height of a standing jump.
    jump_duration: float = 0.4  # Seconds from takeoff to apex.

    move_speed: float = 6.0  # Horizontal speed cap.
    accel_time: float = 0.15  # Seconds from rest to move_speed on the ground.

    air_control: float = 0.5  # Fraction of ground acceleration available mid-air (0-1).
    ground_friction: float = 0.3  # Grounded damping attribute (0 = ice, 1 = sticky).

    max_fall_speed: float = 30.0  # Terminal downward speed.
    tick_rate: int = 60  # Simulation ticks per second.

    player_width: float = 1.0
    player_height: float = 1.5

    # === DERIVED PHYSICS VALUES (computed for simulation) ===

    @property
    def gravity(self) -> float:
        """Vertical acceleration. Using h = ½gt² at apex gives g = 2h/t²."""
        return -2 * self.jump_height / (self.jump_duration ** 2)

    @property
    def jump_impulse(self) -> float:
        """Initial upward speed of a jump, v0 = g*t at apex."""
        return -self.gravity * self.jump_duration

    @property
    def move_accel(self) -> float:
        """Ground acceleration while a direction is held."""
        return self.move_speed / self.accel_time

    @property
    def dt(self) -> float:
        """Fixed tick duration in seconds."""
        return 1.0 / self.tick_rate

    @property
    def player_size(self) -> Tuple[float, float]:
        return self.player_width, self.player_height

    # === SAMPLING RANGES (behavioral, interpretable) ===

    JUMP_HEIGHT_RANGE: ClassVar[Tuple[float, float]] = (1.5, 5.0)
    JUMP_DURATION_RANGE: ClassVar[Tuple[float, float]] = (0.25, 0.6)
    MOVE_SPEED_RANGE: ClassVar[Tuple[float, float]] = (3.0, 10.0)
    ACCEL_TIME_RANGE: ClassVar[Tuple[float, float]] = (0.05, 0.3)
    AIR_CONTROL_RANGE: ClassVar[Tuple[float, float]] = (0.1, 0.9)
    GROUND_FRICTION_RANGE: ClassVar[Tuple[float, float]] = (0.0, 0.8)

    def validate(self) -> "PhysicsConfig":
        """Check the attributes describe a simulable player.

        Returns:
            self, so construction sites can chain the call.

        Raises:
            ConfigError: if any duration, speed, size or rate is not positive,
                or a fraction lies outside [0, 1].
        """
        positive = {
            "jump_height": self.jump_height,
            "jump_duration": self.jump_duration,
            "move_speed": self.move_speed,
            "accel_time": self.accel_time,
            "max_fall_speed": self.max_fall_speed,
            "tick_rate": self.tick_rate,
            "player_width": self.player_width,
            "player_height": self.player_height,
        }
        for name, value in positive.items():
            if not value > 0:
                raise ConfigError(f"{name} must be positive, got {value!r}")
        for name in ("air_control", "ground_friction"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value!r}")
        return self

    @classmethod
    def sample_full(cls, rng: Optional[random.Random] = None) -> "PhysicsConfig":
        """Sample all behavioral attributes from their ranges."""
        rng = rng or random.Random()
        return cls(
            jump_height=rng.uniform(*cls.JUMP_HEIGHT_RANGE),
            jump_duration=rng.uniform(*cls.JUMP_DURATION_RANGE),
            move_speed=rng.uniform(*cls.MOVE_SPEED_RANGE),
            accel_time=rng.uniform(*cls.ACCEL_TIME_RANGE),
            air_control=rng.uniform(*cls.AIR_CONTROL_RANGE),
            ground_friction=rng.uniform(*cls.GROUND_FRICTION_RANGE),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (configured attributes only)."""
        return {
            "jump_height": self.jump_height,
            "jump_duration": self.jump_duration,
            "move_speed": self.move_speed,
            "accel_time": self.accel_time,
            "air_control": self.air_control,
            "ground_friction": self.ground_friction,
            "max_fall_speed": self.max_fall_speed,
            "tick_rate": self.tick_rate,
            "player_width": self.player_width,
            "player_height": self.player_height,
        }

    def to_dict_with_derived(self) -> Dict[str, Any]:
        """Convert to dictionary including derived physics values."""
        return {
            **self.to_dict(),
            "gravity": self.gravity,
            "jump_impulse": self.jump_impulse,
            "move_accel": self.move_accel,
            "dt": self.dt,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PhysicsConfig":
        """Create from dictionary (ignores derived values and unknown keys)."""
        defaults = cls()
        return cls(**{
            key: type(default)(d.get(key, default))
            for key, default in defaults.to_dict().items()
        })


# Predefined configurations for testing/demo
CONFIGS = {
    # Default balanced feel
    "default": PhysicsConfig(),

    # High jump, floaty - easy platforming
    "floaty": PhysicsConfig(jump_height=4.5, jump_duration=0.55, air_control=0.7),

    # Low jump, snappy - precision platforming
    "tight": PhysicsConfig(jump_height=2.0, jump_duration=0.3, air_control=0.3),

    # Moon-like - very high, very slow
    "moon": PhysicsConfig(jump_height=5.0, jump_duration=0.8, air_control=0.8),

    # Heavy - low jump, fast fall
    "heavy": PhysicsConfig(jump_height=1.75, jump_duration=0.25, air_control=0.2),
}
