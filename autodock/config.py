"""Configuration for docking control.

All distances are in meters, speeds in m/s, masses in metric tons and
angles in degrees.

Example:
    >>> from autodock.config import DockingConfig, ControlGains
    >>> from autodock.control import PIDGains
    >>>
    >>> config = DockingConfig(
    ...     dock_limit=3.0,
    ...     gains=ControlGains(forward=PIDGains(kp=0.8, ki=0.05, kd=0.0)),
    ... )
"""

from dataclasses import dataclass, field

from beartype import beartype

from autodock.control.pid import PIDGains

# =============================================================================
# Controller Gains
# =============================================================================


@beartype
@dataclass
class ControlGains:
    """Gain schedule for the control-law bank.

    Velocity gains drive the alignment phase (tracking a desired lateral
    velocity), position gains drive final approach (holding zero offset),
    and forward gains drive the shared closing-speed loop.

    Attributes:
        velocity: Gains for the align-phase X/Y velocity loops
        position: Gains for the approach-phase X/Y position loops
        forward: Gains for the shared forward-speed loop
        output_limits: (min, max) normalized actuator range
        integral_limit: Symmetric clamp on each loop's integral term
    """
    # Position loops lean on the derivative term to damp the approach;
    # the integral stays small so a settled offset does not wind up.
    velocity: PIDGains = field(default_factory=lambda: PIDGains(kp=1.0, ki=0.1, kd=0.0))
    position: PIDGains = field(default_factory=lambda: PIDGains(kp=0.4, ki=0.01, kd=1.2))
    forward: PIDGains = field(default_factory=lambda: PIDGains(kp=1.0, ki=0.1, kd=0.0))
    output_limits: tuple[float, float] = (-1.0, 1.0)
    integral_limit: float = 5.0

    def __post_init__(self) -> None:
        """Validate limits."""
        low, high = self.output_limits
        if low >= high:
            raise ValueError(f"output_limits must satisfy min < max, got {self.output_limits}")
        if low < -1.0 or high > 1.0:
            raise ValueError(
                f"output_limits must lie within the normalized range [-1, 1], got {self.output_limits}"
            )
        if self.integral_limit <= 0:
            raise ValueError(f"integral_limit must be positive, got {self.integral_limit}")

    @property
    def integral_limits(self) -> tuple[float, float]:
        """Integral clamp as a (min, max) pair."""
        return (-self.integral_limit, self.integral_limit)


# =============================================================================
# Docking Configuration
# =============================================================================


@beartype
@dataclass
class DockingConfig:
    """Docking maneuver configuration.

    Attributes:
        dock_scale: Distance over which lateral corrections taper [m]
        dock_limit: Maximum commanded relative speed [m/s]
        dock_creep: Creep speed for the forward axis [m/s]
        dock_start: Distance inside which alignment holds station [m]
        dock_final: Distance inside which approach uses touch speed [m]
        dock_touch: Terminal closing speed [m/s]
        approach_speed_fraction: Forward speed cap during approach relative to align
        back_speed_limit: Forward speed the back-off phase settles to [m/s]
        roll_flip_deg: Roll below which lateral/vertical commands invert [deg]
        vessel_mass_threshold: Targets heavier than this are whole vessels [t]
        port_mass_tolerance: Allowed mass difference between matched ports [t]
        tick: Control period passed to every controller [s]
        gains: Controller gains
    """
    dock_scale: float = 50.0
    dock_limit: float = 5.0
    dock_creep: float = 1.0
    dock_start: float = 25.0
    dock_final: float = 2.5
    dock_touch: float = 0.2
    approach_speed_fraction: float = 0.5
    back_speed_limit: float = 0.0
    roll_flip_deg: float = 180.0
    vessel_mass_threshold: float = 2.0
    port_mass_tolerance: float = 0.1
    tick: float = 0.1
    gains: ControlGains = field(default_factory=ControlGains)

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("dock_scale", "dock_limit", "dock_creep", "dock_touch", "tick"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.dock_creep > self.dock_limit:
            raise ValueError(
                f"dock_creep ({self.dock_creep}) must not exceed dock_limit ({self.dock_limit})"
            )
        if self.dock_final < 0 or self.dock_start < 0:
            raise ValueError("dock_start and dock_final must be non-negative")
        if not 0.0 < self.approach_speed_fraction <= 1.0:
            raise ValueError(
                f"approach_speed_fraction must be in (0, 1], got {self.approach_speed_fraction}"
            )
        if not 0.0 <= self.roll_flip_deg <= 360.0:
            raise ValueError(f"roll_flip_deg must be in [0, 360], got {self.roll_flip_deg}")
        if self.vessel_mass_threshold <= 0:
            raise ValueError(
                f"vessel_mass_threshold must be positive, got {self.vessel_mass_threshold}"
            )
        if self.port_mass_tolerance < 0:
            raise ValueError(
                f"port_mass_tolerance must be non-negative, got {self.port_mass_tolerance}"
            )
