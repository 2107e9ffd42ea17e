"""Player input for a single tick."""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Move:
    """Three independent intents: left, right and up (jump).

    The default Move is idle. Moves map to a discrete index with the bit
    encoding left=1, right=2, up=4, giving 8 possible actions.
    """

    left: bool = False
    right: bool = False
    up: bool = False

    def to_index(self) -> int:
        return int(self.left) | (int(self.right) << 1) | (int(self.up) << 2)

    @classmethod
    def from_index(cls, index: int) -> "Move":
        if not 0 <= index < 8:
            raise ValueError(f"Move index must be in [0, 8), got {index}")
        return cls(left=bool(index & 1), right=bool(index & 2), up=bool(index & 4))

    @classmethod
    def all(cls) -> List["Move"]:
        """All 8 moves, ordered by index."""
        return [cls.from_index(i) for i in range(8)]

    def to_dict(self) -> Dict[str, bool]:
        return {"left": self.left, "right": self.right, "up": self.up}


IDLE = Move()
