"""Relative state and actuator command types.

RelativeState is sampled externally every control tick and is the only
input to the phase functions. AxisCommand is what a phase emits: one
normalized intensity per translation axis.

Example:
    >>> from autodock.state import AxisCommand, RelativeState
    >>>
    >>> state = RelativeState.from_vectors(
    ...     position=(3.0, -1.5, 40.0),   # target port is 40 m ahead
    ...     velocity=(0.0, 0.0, -2.0),    # closing at 2 m/s
    ... )
    >>> AxisCommand(fore=0.5, lateral=-0.1, vertical=0.0)
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

# =============================================================================
# Relative State
# =============================================================================


@beartype
@dataclass
class RelativeState:
    """Position and velocity of the target port relative to the own vessel.

    Frame is target-port relative with +Z along the approach axis; Z is the
    remaining distance to close.

    Attributes:
        position: [x, y, z] relative position [m]
        velocity: [vx, vy, vz] relative velocity [m/s]
    """
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]

    def __post_init__(self) -> None:
        """Validate and freeze vectors."""
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)

        if self.position.shape != (3,):
            raise ValueError(f"Position must be shape (3,), got {self.position.shape}")
        if self.velocity.shape != (3,):
            raise ValueError(f"Velocity must be shape (3,), got {self.velocity.shape}")
        if not np.all(np.isfinite(self.position)):
            raise ValueError(f"Position must be finite, got {self.position}")
        if not np.all(np.isfinite(self.velocity)):
            raise ValueError(f"Velocity must be finite, got {self.velocity}")

        self.position.flags.writeable = False
        self.velocity.flags.writeable = False

    @classmethod
    def from_vectors(
        cls,
        position: Sequence[float] | NDArray[np.float64],
        velocity: Sequence[float] | NDArray[np.float64],
    ) -> "RelativeState":
        """Create from any pair of 3-element sequences."""
        return cls(
            position=np.asarray(position, dtype=np.float64),
            velocity=np.asarray(velocity, dtype=np.float64),
        )

    @property
    def distance(self) -> float:
        """Straight-line distance to the target port [m]."""
        return float(np.linalg.norm(self.position))


# =============================================================================
# Axis Command
# =============================================================================


@beartype
@dataclass(frozen=True)
class AxisCommand:
    """Normalized translation command for one control tick.

    Attributes:
        fore: Forward/backward intensity [-1, 1]
        lateral: Right/left intensity [-1, 1]
        vertical: Up/down intensity [-1, 1]
    """
    fore: float = 0.0
    lateral: float = 0.0
    vertical: float = 0.0

    def __post_init__(self) -> None:
        """Validate command bounds."""
        for name in ("fore", "lateral", "vertical"):
            value = getattr(self, name)
            if not math.isfinite(value) or abs(value) > 1.0:
                raise ValueError(f"{name} must be a finite value in [-1, 1], got {value}")

    def with_fore(self, fore: float) -> "AxisCommand":
        """Copy with only the fore axis replaced."""
        return replace(self, fore=fore)

    def as_array(self) -> NDArray[np.float64]:
        """Command as [lateral, vertical, fore], matching RelativeState axes."""
        return np.array([self.lateral, self.vertical, self.fore])
