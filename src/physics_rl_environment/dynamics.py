"""Equations of motion applied once per tick.

The player uses constant gravity (parabolic jumps) and force-based horizontal
movement with a speed cap, the standard platformer feel. Velocities are
updated here; positions are integrated and collided by the Environment.
"""

from typing import Optional

from .config import PhysicsConfig
from .moves import Move


class StandardDynamics:
    """Constant gravity + force-based movement.

    All methods are pure functions of their arguments and the (frozen)
    physics config, which keeps stepping deterministic.
    """

    def __init__(self, physics_config: Optional[PhysicsConfig] = None):
        self.physics_config = physics_config or PhysicsConfig()

    @staticmethod
    def direction(move: Move) -> float:
        """Horizontal intent of a move.

        Holding both left and right cancels out: no acceleration that tick.
        """
        return float(move.right) - float(move.left)

    def get_damping(self, is_grounded: bool) -> float:
        """Multiplier applied to vx each tick (1.0 = no damping)."""
        if is_grounded:
            return 1.0 - 0.05 * self.physics_config.ground_friction
        return 1.0

    def horizontal_velocity(self, vx: float, direction: float, is_grounded: bool) -> float:
        """Return vx after one tick of input acceleration and friction."""
        pc = self.physics_config
        if direction != 0.0:
            control = 1.0 if is_grounded else pc.air_control
            driven = vx + direction * pc.move_accel * control * pc.dt
            # Cap only in the driven direction, never speed up past move_speed.
            if direction > 0 and vx < pc.move_speed:
                vx = min(driven, pc.move_speed)
            elif direction < 0 and vx > -pc.move_speed:
                vx = max(driven, -pc.move_speed)
        return vx * self.get_damping(is_grounded)

    def vertical_velocity(self, vy: float, jump: bool, is_grounded: bool) -> float:
        """Return vy after an optional jump and one tick of gravity.

        Jumping is only possible from the ground.
        """
        pc = self.physics_config
        if jump and is_grounded:
            vy = pc.jump_impulse
        vy += pc.gravity * pc.dt
        return max(vy, -pc.max_fall_speed)
