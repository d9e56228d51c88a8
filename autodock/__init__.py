"""Autodock - PID docking control for a powered vessel.

This package provides the reactive control logic for rendezvous and
docking: the back-off, alignment and final-approach control laws, the
port matching used to pick a docking pair, and the completion predicate.

Sampling relative state from a simulation and applying the commands to the
vessel are left to the caller; see DockingSession for the per-tick entry
point.

Example:
    >>> from autodock import DockingSession, Phase, RelativeState
    >>>
    >>> session = DockingSession(vessel=own_ship, target=station)
    >>> session.choose_ports()
    >>> state = RelativeState.from_vectors((1.2, -0.4, 30.0), (0.0, 0.0, -1.5))
    >>> command = session.run(Phase.APPROACH, state)
    >>> print(f"fore={command.fore:+.2f} lateral={command.lateral:+.2f}")
"""

__version__ = "0.1.0"

from autodock.actuators import ActuatorSink, CommandRecorder
from autodock.bank import ControlLawBank
from autodock.config import ControlGains, DockingConfig
from autodock.control import PIDController, PIDGains
from autodock.model import Port, Ship
from autodock.phases import (
    Phase,
    align,
    approach,
    approach_speed_setpoint,
    back,
    desired_velocity,
    roll_corrected,
    taper_scale,
)
from autodock.ports import (
    DockingPort,
    PortPair,
    PortState,
    Vessel,
    choose_departure_port,
    choose_ports,
    is_docked,
)
from autodock.session import DockingSession
from autodock.state import AxisCommand, RelativeState

__all__ = [
    # Configuration
    "DockingConfig",
    "ControlGains",
    # Control
    "PIDController",
    "PIDGains",
    "ControlLawBank",
    # State
    "RelativeState",
    "AxisCommand",
    # Phases
    "Phase",
    "back",
    "align",
    "approach",
    "taper_scale",
    "desired_velocity",
    "approach_speed_setpoint",
    "roll_corrected",
    # Ports
    "DockingPort",
    "Vessel",
    "PortState",
    "PortPair",
    "is_docked",
    "choose_ports",
    "choose_departure_port",
    # Model
    "Port",
    "Ship",
    # Session
    "DockingSession",
    "ActuatorSink",
    "CommandRecorder",
]
