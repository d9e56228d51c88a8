"""Control primitives for docking.

Provides the PID controller the docking control laws are built from.
"""

from autodock.control.pid import (
    PIDController,
    PIDGains,
)

__all__ = [
    "PIDController",
    "PIDGains",
]
