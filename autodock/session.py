"""Docking session context.

A DockingSession bundles everything one docking attempt shares between
ticks: configuration, the control-law bank, the own vessel, the current
target selection and the actuator sink. The driving loop owns the session
and calls into it once per tick.

Example:
    >>> from autodock import DockingSession, Phase, RelativeState
    >>>
    >>> session = DockingSession(vessel=own_ship, target=station)
    >>> if session.choose_ports() is None:
    ...     raise SystemExit("no compatible docking ports")
    >>>
    >>> while not session.is_docked():
    ...     state = sample_relative_state(session.target)   # external
    ...     session.run(Phase.ALIGN, state)
"""

import logging

from autodock.actuators import ActuatorSink, CommandRecorder
from autodock.bank import ControlLawBank
from autodock.config import DockingConfig
from autodock.phases import Phase, align, approach, back
from autodock.ports import (
    DockingPort,
    PortPair,
    Vessel,
    choose_departure_port,
    choose_ports,
    is_docked,
)
from autodock.state import AxisCommand, RelativeState

logger = logging.getLogger(__name__)


class DockingSession:
    """State shared across the ticks of one docking attempt.

    The control-law bank is created once here and never rebuilt, so loop
    history carries across phase switches.

    Attributes:
        config: Docking configuration
        bank: The session's five PID loops
        vessel: Own vessel
        target: Current target selection (vessel or port)
        sink: Where emitted commands go
        pair: Last successful port match, if any
        command: Last emitted command
    """

    def __init__(
        self,
        vessel: Vessel,
        target: "Vessel | DockingPort | None" = None,
        sink: ActuatorSink | None = None,
        config: DockingConfig | None = None,
    ) -> None:
        self.config = config or DockingConfig()
        self.bank = ControlLawBank(self.config)
        self.vessel = vessel
        self.target = target
        self.sink = sink if sink is not None else CommandRecorder()
        self.pair: PortPair | None = None
        self.command = AxisCommand()

    @property
    def roll(self) -> float:
        """Own vessel roll [deg]."""
        return float(self.vessel.roll)

    # -------------------------------------------------------------------------
    # Port selection
    # -------------------------------------------------------------------------

    def choose_ports(self) -> DockingPort | None:
        """Match docking ports and retarget the session onto the target port.

        Returns:
            The own port on success, None when no pair could be formed (the
            current target is left unchanged)
        """
        pair = choose_ports(self.vessel, self.target, self.config)
        if pair is None:
            return None
        self.pair = pair
        self.target = pair.target
        return pair.own

    def choose_departure_port(self) -> DockingPort | None:
        """Own port to undock from, or None if nothing is docked."""
        return choose_departure_port(self.vessel)

    def pair_is_valid(self) -> bool:
        """True while the matched pair is still usable."""
        return self.pair is not None and self.pair.is_valid(self.config)

    def is_docked(self, port: DockingPort | None = None) -> bool:
        """Whether a port (default: the matched own port) is coupled."""
        if port is None:
            if self.pair is None:
                return False
            port = self.pair.own
        return is_docked(port)

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def back(self, state: RelativeState) -> AxisCommand:
        """Run one back-off tick."""
        return self._emit(back(self.bank, state, self.command))

    def align(self, state: RelativeState) -> AxisCommand:
        """Run one alignment tick."""
        return self._emit(align(self.bank, state, self.roll))

    def approach(self, state: RelativeState) -> AxisCommand:
        """Run one final-approach tick."""
        return self._emit(approach(self.bank, state, self.roll))

    def run(self, phase: Phase, state: RelativeState) -> AxisCommand:
        """Run one tick of the given phase."""
        if phase is Phase.BACK:
            return self.back(state)
        if phase is Phase.ALIGN:
            return self.align(state)
        if phase is Phase.APPROACH:
            return self.approach(state)
        raise ValueError(f"Unknown phase: {phase!r}")

    def _emit(self, command: AxisCommand) -> AxisCommand:
        self.command = command
        self.sink.apply(command)
        return command
