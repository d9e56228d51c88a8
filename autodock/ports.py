"""Docking port matching and completion detection.

Selects which own port and which target port form the docking pair, picks a
port to undock from, and classifies a port's coupling state.

Ports and vessels are read-only views owned by the host simulation; this
module only needs the attributes declared on the DockingPort and Vessel
protocols below.

Example:
    >>> from autodock.ports import choose_ports, is_docked
    >>>
    >>> pair = choose_ports(own_vessel, target)
    >>> if pair is None:
    ...     ...  # nothing suitable, caller decides what to do
    >>> is_docked(pair.own)
    False
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from autodock.config import DockingConfig

logger = logging.getLogger(__name__)


# =============================================================================
# Port State
# =============================================================================


class PortState(str, Enum):
    """Coupling states reported by the simulation."""
    READY = "Ready"  # free, available for docking
    ACQUIRE = "Acquire"
    ACQUIRE_DOCKEE = "Acquire (dockee)"
    DISENGAGE = "Disengage"
    DISABLED = "Disabled"
    PRE_ATTACHED = "PreAttached"
    DOCKED_DOCKER = "Docked (docker)"
    DOCKED_DOCKEE = "Docked (dockee)"
    DOCKED_SAME_VESSEL = "Docked (same vessel)"


DOCKED_STATES = frozenset({
    PortState.PRE_ATTACHED,
    PortState.DOCKED_DOCKER,
    PortState.DOCKED_DOCKEE,
    PortState.DOCKED_SAME_VESSEL,
})


# =============================================================================
# Introspection Protocols
# =============================================================================


class DockingPort(Protocol):
    """Read-only view of a docking port."""
    name: str
    mass: float                     # [t]
    state: PortState | str
    targetable: bool
    facing: NDArray[np.float64]     # Unit vector out of the port face
    position: NDArray[np.float64]   # [m]
    vessel: "Vessel"


class Vessel(Protocol):
    """Read-only view of a vessel."""
    name: str
    mass: float                     # [t]
    position: NDArray[np.float64]   # [m]
    roll: float                     # [deg], in [0, 360)

    @property
    def docking_ports(self) -> Sequence[DockingPort]:
        """Docking-capable parts, in enumeration order."""
        ...


# =============================================================================
# Port Pair
# =============================================================================


@dataclass(frozen=True, eq=False)
class PortPair:
    """Chosen (own, target) docking ports.

    Holds references only; the ports belong to their vessels. A pair can go
    stale, so callers re-check is_valid() when the target may have changed.

    Attributes:
        own: Port on the own vessel
        target: Port on the target vessel
    """
    own: DockingPort
    target: DockingPort

    def is_valid(self, config: DockingConfig | None = None) -> bool:
        """True while both ports are targetable and their masses still match."""
        config = config or DockingConfig()
        return (
            self.own.targetable
            and self.target.targetable
            and masses_compatible(self.own, self.target, config)
        )


# =============================================================================
# Completion Predicate
# =============================================================================


def port_state(value: "DockingPort | PortState | str") -> PortState | None:
    """Parse a port (or raw state value) into a PortState.

    Returns None for values the simulation reports that are not recognized.
    """
    raw = getattr(value, "state", value)
    try:
        return PortState(raw)
    except ValueError:
        return None


def is_docked(value: "DockingPort | PortState | str") -> bool:
    """True when a port is coupled (pre-attached or docked in any role)."""
    return port_state(value) in DOCKED_STATES


# =============================================================================
# Matching
# =============================================================================


def angle_between(a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
    """Angle between two vectors [deg]; 180 when either is zero."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    norms = np.linalg.norm(a) * np.linalg.norm(b)
    if norms == 0.0:
        return 180.0
    cos_angle = np.clip(np.dot(a, b) / norms, -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))


def masses_compatible(a: DockingPort, b: DockingPort, config: DockingConfig) -> bool:
    """True when two ports are close enough in mass to be the same size."""
    return abs(a.mass - b.mass) < config.port_mass_tolerance


def is_vessel_target(target: "Vessel | DockingPort", config: DockingConfig) -> bool:
    """Classify a target by mass: heavier than the threshold is a whole vessel."""
    return target.mass > config.vessel_mass_threshold


def own_port(vessel: Vessel) -> DockingPort | None:
    """Pick the own vessel's docking port.

    Takes the last enumerated port belonging to the vessel. Ownership is
    checked with ==, so hosts that hand out a fresh handle per access still
    match. Vessels with several ports get an arbitrary one, which is logged.
    """
    ports = [port for port in vessel.docking_ports if port.vessel == vessel]
    if not ports:
        return None
    if len(ports) > 1:
        logger.warning(
            "%s has %d docking ports; using the last one (%s)",
            vessel.name, len(ports), ports[-1].name,
        )
    return ports[-1]


def best_target_port(
    own: DockingPort,
    own_vessel: Vessel,
    target_vessel: Vessel,
    config: DockingConfig,
) -> DockingPort | None:
    """Search a target vessel for the free port facing the own vessel best.

    Candidates must match the own port's mass, be targetable and be ready.
    The winner minimizes the angle between its facing vector and the line
    from the target vessel back to the own vessel; the running best starts
    at 180 degrees, so a port facing directly away never qualifies.

    Args:
        own: Own docking port
        own_vessel: Own vessel
        target_vessel: Vessel to dock with
        config: Docking configuration

    Returns:
        Best candidate, or None if no port qualifies
    """
    line_of_sight = np.asarray(own_vessel.position) - np.asarray(target_vessel.position)

    best = None
    best_angle = 180.0
    for candidate in target_vessel.docking_ports:
        if not masses_compatible(own, candidate, config):
            continue
        if not candidate.targetable:
            continue
        if port_state(candidate) is not PortState.READY:
            continue

        angle = angle_between(line_of_sight, candidate.facing)
        if angle < best_angle:
            best, best_angle = candidate, angle

    if best is not None:
        logger.debug("%s: best port %s at %.1f deg", target_vessel.name, best.name, best_angle)
    return best


def choose_ports(
    vessel: Vessel,
    target: "Vessel | DockingPort | None",
    config: DockingConfig | None = None,
) -> PortPair | None:
    """Select the own port and the target port to dock.

    A target lighter than the vessel mass threshold is taken to already be a
    port and is used as is; otherwise the target vessel's ports are searched.

    Args:
        vessel: Own vessel
        target: Currently selected target (vessel or port)
        config: Docking configuration

    Returns:
        Matched pair, or None when either side has no suitable port
    """
    config = config or DockingConfig()
    if target is None:
        logger.info("no target selected")
        return None

    own = own_port(vessel)
    if own is None:
        logger.info("%s has no docking port", vessel.name)
        return None

    if is_vessel_target(target, config):
        target_port = best_target_port(own, vessel, target, config)
    else:
        target_port = target

    if target_port is None:
        logger.info("%s has no port matching %s", target.name, own.name)
        return None

    logger.info("matched %s -> %s", own.name, target_port.name)
    return PortPair(own=own, target=target_port)


def choose_departure_port(vessel: Vessel) -> DockingPort | None:
    """First docking port on the vessel that is currently coupled."""
    for port in vessel.docking_ports:
        if is_docked(port):
            logger.info("departing from %s (%s)", port.name, port_state(port).value)
            return port
    return None
