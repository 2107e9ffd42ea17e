"""Exception types shared across the package."""


class PhysicsRLError(Exception):
    """Base class for all errors raised by physics_rl_environment."""


class ConfigError(PhysicsRLError, ValueError):
    """Invalid configuration, level geometry or algorithm settings."""
