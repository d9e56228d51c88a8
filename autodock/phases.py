"""Docking phase control laws.

Each phase turns one RelativeState sample into one AxisCommand. Phases are
stateless apart from the shared ControlLawBank, so a driving loop may switch
between them from one tick to the next without resetting anything.

Phases:
    back: Null out forward/backward relative velocity
    align: Drive lateral offsets to zero at a distance-tapered rate while
        creeping forward
    approach: Hold the port centerline and close the remaining distance,
        slowing to touch speed at the end

Example:
    >>> from autodock.bank import ControlLawBank
    >>> from autodock.phases import align
    >>> from autodock.state import RelativeState
    >>>
    >>> bank = ControlLawBank()
    >>> state = RelativeState.from_vectors((4.0, -2.0, 60.0), (0.0, 0.0, -2.0))
    >>> command = align(bank, state, roll=90.0)
"""

import logging
from enum import Enum

import numpy as np
from beartype import beartype

from autodock.bank import ControlLawBank
from autodock.config import DockingConfig
from autodock.state import AxisCommand, RelativeState

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Docking maneuver phases."""
    BACK = "back"
    ALIGN = "align"
    APPROACH = "approach"


# =============================================================================
# Setpoint Shaping
# =============================================================================


@beartype
def taper_scale(offset: float, scale: float) -> float:
    """Linear taper of |offset| over scale, saturating at 1."""
    return min(abs(offset) / scale, 1.0)


@beartype
def desired_velocity(offset: float, config: DockingConfig) -> float:
    """Velocity that reduces |offset|, tapered inside dock_scale.

    Zero offset asks for zero velocity; the sign of zero is never taken.

    Args:
        offset: Lateral or vertical offset [m]
        config: Docking configuration

    Returns:
        Desired relative velocity along the same axis [m/s]
    """
    if offset == 0.0:
        return 0.0
    direction = -float(np.sign(offset))
    return direction * config.dock_limit * taper_scale(offset, config.dock_scale)


@beartype
def is_coasting(velocity_z: float, config: DockingConfig) -> bool:
    """True when already closing faster than creep but slower than the limit."""
    return bool(-config.dock_limit < velocity_z < -config.dock_creep)


@beartype
def approach_speed_setpoint(distance: float, config: DockingConfig) -> float:
    """Forward-speed setpoint for the approach phase.

    Inside dock_final the setpoint is the fixed touch speed. Outside it the
    closing speed tapers with distance but never drops below creep.

    Args:
        distance: Remaining distance along the approach axis [m]
        config: Docking configuration

    Returns:
        Forward velocity setpoint [m/s] (negative closes the gap)
    """
    if distance < config.dock_final:
        return -config.dock_touch
    scale = taper_scale(distance, config.dock_scale) * config.approach_speed_fraction
    return -max(config.dock_creep, config.dock_limit * scale)


@beartype
def roll_corrected(
    lateral: float,
    vertical: float,
    roll: float,
    config: DockingConfig,
) -> tuple[float, float]:
    """Re-express port-frame lateral/vertical commands in the vessel body frame.

    The port frame is only defined up to a half turn about the approach axis,
    so below roll_flip_deg both axes invert.

    Args:
        lateral: Port-frame lateral command
        vertical: Port-frame vertical command
        roll: Own vessel roll [deg]
        config: Docking configuration

    Returns:
        (lateral, vertical) in body frame
    """
    if roll % 360.0 < config.roll_flip_deg:
        return -lateral, -vertical
    return lateral, vertical


# =============================================================================
# Phase Functions
# =============================================================================


@beartype
def back(
    bank: ControlLawBank,
    state: RelativeState,
    previous: AxisCommand | None = None,
) -> AxisCommand:
    """Back-off: null forward/backward relative velocity.

    Only the fore axis is computed; lateral and vertical keep whatever the
    previous command held.

    Args:
        bank: Session control-law bank
        state: Current relative state
        previous: Last emitted command (defaults to all zero)

    Returns:
        Command for this tick
    """
    config = bank.config
    fore = -bank.forward.seek(config.back_speed_limit, state.velocity[2], bank.dt)
    logger.debug("back: vz=%.3f fore=%.3f", state.velocity[2], fore)
    return (previous or AxisCommand()).with_fore(fore)


@beartype
def align(bank: ControlLawBank, state: RelativeState, roll: float) -> AxisCommand:
    """Alignment: center on the approach axis while creeping forward.

    Beyond dock_start a vessel already coasting in at between creep and limit
    speed is left alone (the forward loop still advances so its history stays
    current). Otherwise the forward loop drives toward creep speed, and
    inside dock_start it holds station.

    Args:
        bank: Session control-law bank
        state: Current relative state
        roll: Own vessel roll [deg]

    Returns:
        Command for this tick
    """
    config = bank.config
    x, y, z = state.position
    vx, vy, vz = state.velocity

    if z > config.dock_start:
        if is_coasting(vz, config):
            bank.forward.seek(-config.dock_creep, vz, bank.dt)
            fore = 0.0
        else:
            fore = -bank.forward.seek(-config.dock_creep, vz, bank.dt)
    else:
        fore = -bank.forward.seek(0.0, vz, bank.dt)

    want_x = desired_velocity(x, config)
    want_y = desired_velocity(y, config)
    lateral = bank.velocity_x.seek(want_x, vx, bank.dt)
    vertical = bank.velocity_y.seek(want_y, vy, bank.dt)
    lateral, vertical = roll_corrected(lateral, vertical, roll, config)

    logger.debug(
        "align: z=%.2f want=(%.3f, %.3f) cmd=(%.3f, %.3f, %.3f)",
        z, want_x, want_y, fore, lateral, vertical,
    )
    return AxisCommand(fore=fore, lateral=lateral, vertical=vertical)


@beartype
def approach(bank: ControlLawBank, state: RelativeState, roll: float) -> AxisCommand:
    """Final approach: hold the centerline and close at a capped speed.

    Lateral axes switch from velocity shaping to position holding, using the
    position-tuned loops.

    Args:
        bank: Session control-law bank
        state: Current relative state
        roll: Own vessel roll [deg]

    Returns:
        Command for this tick
    """
    config = bank.config
    x, y, z = state.position
    vz = state.velocity[2]

    setpoint = approach_speed_setpoint(z, config)
    fore = -bank.forward.seek(setpoint, vz, bank.dt)

    lateral = bank.position_x.seek(0.0, x, bank.dt)
    vertical = bank.position_y.seek(0.0, y, bank.dt)
    lateral, vertical = roll_corrected(lateral, vertical, roll, config)

    logger.debug(
        "approach: z=%.2f vz_set=%.3f cmd=(%.3f, %.3f, %.3f)",
        z, setpoint, fore, lateral, vertical,
    )
    return AxisCommand(fore=fore, lateral=lateral, vertical=vertical)
