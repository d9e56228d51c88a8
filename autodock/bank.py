"""Control-law bank for the docking phases.

Holds the five PID loops shared by every phase function. The bank is
built once per docking attempt and handed by reference to each phase call;
it deliberately has no reset, since clearing integral history between
ticks reintroduces transient overshoot.

Example:
    >>> from autodock.config import DockingConfig
    >>> from autodock.bank import ControlLawBank
    >>>
    >>> bank = ControlLawBank(DockingConfig())
    >>> bank.forward.seek(-1.0, -0.4, bank.dt)
"""

from beartype import beartype

from autodock.config import DockingConfig
from autodock.control.pid import PIDController, PIDGains

# =============================================================================
# Control-Law Bank
# =============================================================================


@beartype
class ControlLawBank:
    """Five long-lived PID loops.

    Attributes:
        config: Docking configuration the loops were built from
        velocity_x: Align-phase lateral velocity loop
        velocity_y: Align-phase vertical velocity loop
        position_x: Approach-phase lateral position loop
        position_y: Approach-phase vertical position loop
        forward: Forward-speed loop shared by all phases
    """

    __slots__ = (
        "config",
        "velocity_x",
        "velocity_y",
        "position_x",
        "position_y",
        "forward",
    )

    def __init__(self, config: DockingConfig | None = None) -> None:
        self.config = config if config is not None else DockingConfig()
        gains = self.config.gains

        self.velocity_x = self._build(gains.velocity)
        self.velocity_y = self._build(gains.velocity)
        self.position_x = self._build(gains.position)
        self.position_y = self._build(gains.position)
        self.forward = self._build(gains.forward)

    def _build(self, pid_gains: PIDGains) -> PIDController:
        gains = self.config.gains
        return PIDController.from_gains(
            pid_gains,
            output_limits=gains.output_limits,
            integral_limits=gains.integral_limits,
        )

    @property
    def dt(self) -> float:
        """Control period [s]."""
        return self.config.tick

    @property
    def controllers(self) -> tuple[PIDController, ...]:
        """All five loops, in declaration order."""
        return (
            self.velocity_x,
            self.velocity_y,
            self.position_x,
            self.position_y,
            self.forward,
        )
