"""In-memory vessel and port model.

Plain implementations of the Vessel and DockingPort protocols, for driving
the matching logic without a live simulation (offline checks, replays,
tests).

Example:
    >>> from autodock.model import Ship
    >>>
    >>> station = Ship(name="Station", mass=40.0, position=(0.0, 0.0, 0.0))
    >>> station.add_port("Clamp-O-Tron", mass=0.05, facing=(1.0, 0.0, 0.0))
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from autodock.ports import PortState

Vector = Sequence[float] | NDArray[np.float64]


@beartype
@dataclass(eq=False)
class Port:
    """A docking port on a Ship.

    Attributes:
        name: Part name
        mass: Part mass [t]
        state: Coupling state
        targetable: Whether the port can be selected as a target
        facing: Direction out of the port face (normalized on creation)
        position: Port position [m]
        vessel: Owning ship
    """
    name: str
    mass: float
    state: PortState | str = PortState.READY
    targetable: bool = True
    facing: Vector = (0.0, 0.0, 1.0)
    position: Vector = (0.0, 0.0, 0.0)
    vessel: "Ship | None" = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Normalize vectors."""
        self.facing = np.asarray(self.facing, dtype=np.float64)
        self.position = np.asarray(self.position, dtype=np.float64)
        norm = np.linalg.norm(self.facing)
        if self.facing.shape != (3,) or norm == 0.0:
            raise ValueError(f"facing must be a non-zero 3-vector, got {self.facing}")
        self.facing = self.facing / norm
        if self.position.shape != (3,):
            raise ValueError(f"position must be shape (3,), got {self.position.shape}")


@beartype
@dataclass(eq=False)
class Ship:
    """A vessel with an ordered list of docking ports.

    Attributes:
        name: Vessel name
        mass: Total mass [t]
        position: Vessel position [m]
        roll: Roll angle [deg]
        ports: Docking ports, in enumeration order
    """
    name: str
    mass: float
    position: Vector = (0.0, 0.0, 0.0)
    roll: float = 0.0
    ports: list[Port] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Normalize position and claim ports."""
        self.position = np.asarray(self.position, dtype=np.float64)
        if self.position.shape != (3,):
            raise ValueError(f"position must be shape (3,), got {self.position.shape}")
        self.roll = self.roll % 360.0
        for port in self.ports:
            port.vessel = self

    @property
    def docking_ports(self) -> list[Port]:
        """Docking ports, in enumeration order."""
        return list(self.ports)

    def add_port(
        self,
        name: str,
        mass: float,
        facing: Vector = (0.0, 0.0, 1.0),
        state: PortState | str = PortState.READY,
        targetable: bool = True,
        position: Vector | None = None,
    ) -> Port:
        """Attach a new port to this ship and return it."""
        port = Port(
            name=name,
            mass=mass,
            state=state,
            targetable=targetable,
            facing=facing,
            position=self.position if position is None else position,
            vessel=self,
        )
        self.ports.append(port)
        return port
