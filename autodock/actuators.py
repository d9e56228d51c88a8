"""Actuator sinks.

A sink receives exactly one AxisCommand per control tick and applies it to
the vessel's translation controls. Each command fully replaces the previous
one.
"""

from dataclasses import dataclass, field
from typing import Protocol

from autodock.state import AxisCommand


class ActuatorSink(Protocol):
    """Anything that can apply a translation command."""

    def apply(self, command: AxisCommand) -> None:
        """Apply a command for the current tick."""
        ...


@dataclass
class CommandRecorder:
    """Sink that keeps every command it receives.

    Attributes:
        history: Commands in the order they were applied
    """
    history: list[AxisCommand] = field(default_factory=list)

    def apply(self, command: AxisCommand) -> None:
        self.history.append(command)

    @property
    def last(self) -> AxisCommand | None:
        """Most recent command, or None before the first tick."""
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
