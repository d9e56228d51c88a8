"""Tests for the docking phase control laws.

These tests verify command bounds, setpoint shaping and the roll-dependent
axis flip.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from autodock.bank import ControlLawBank
from autodock.config import DockingConfig
from autodock.phases import (
    align,
    approach,
    approach_speed_setpoint,
    back,
    desired_velocity,
    is_coasting,
    roll_corrected,
    taper_scale,
)
from autodock.state import AxisCommand, RelativeState

# =============================================================================
# Setpoint Shaping Tests
# =============================================================================


class TestSetpointShaping:
    """Test taper and desired-velocity helpers."""

    def test_taper_is_linear_inside_scale(self) -> None:
        """Taper grows linearly with distance."""
        assert_allclose(taper_scale(25.0, 50.0), 0.5)
        assert_allclose(taper_scale(-10.0, 50.0), 0.2)

    @pytest.mark.parametrize("offset", [50.0, 75.0, -50.0, -1000.0])
    def test_taper_saturates(self, offset: float) -> None:
        """Offsets at or beyond dock_scale give full correction."""
        assert taper_scale(offset, 50.0) == 1.0

    def test_zero_offset_wants_zero_velocity(self) -> None:
        """No offset means no desired velocity (no division by zero)."""
        assert desired_velocity(0.0, DockingConfig()) == 0.0

    def test_desired_velocity_reduces_offset(self) -> None:
        """Desired velocity points back toward the axis."""
        config = DockingConfig()
        assert_allclose(desired_velocity(10.0, config), -1.0)
        assert_allclose(desired_velocity(-10.0, config), 1.0)
        assert_allclose(desired_velocity(-100.0, config), 5.0)

    def test_coasting_band_is_open(self) -> None:
        """Coasting band excludes creep and limit speeds themselves."""
        config = DockingConfig()
        assert is_coasting(-3.0, config)
        assert not is_coasting(-1.0, config)
        assert not is_coasting(-5.0, config)
        assert not is_coasting(-6.0, config)
        assert not is_coasting(0.0, config)

    @pytest.mark.parametrize("distance", [2.4999, 1.0, 0.0, -3.0])
    def test_approach_terminal_floor(self, distance: float) -> None:
        """Inside dock_final the setpoint is exactly touch speed."""
        assert approach_speed_setpoint(distance, DockingConfig()) == -0.2

    def test_approach_forward_cap(self) -> None:
        """Outside dock_final speed is within [creep, limit] and non-decreasing."""
        config = DockingConfig()
        distances = np.linspace(2.5, 200.0, 400)
        speeds = np.array([-approach_speed_setpoint(float(d), config) for d in distances])

        assert np.all(speeds >= config.dock_creep)
        assert np.all(speeds <= config.dock_limit)
        assert np.all(np.diff(speeds) >= 0.0)
        assert_allclose(speeds[distances >= 50.0], 2.5)

    def test_approach_speed_tapers_to_creep(self) -> None:
        """Just outside dock_final the setpoint is creep speed."""
        assert approach_speed_setpoint(2.5, DockingConfig()) == -1.0


class TestRollCorrection:
    """Test the roll-dependent lateral/vertical flip."""

    def test_flip_below_half_turn(self) -> None:
        """Below 180 degrees both axes invert."""
        assert roll_corrected(0.3, -0.4, 90.0, DockingConfig()) == (-0.3, 0.4)

    def test_no_flip_above_half_turn(self) -> None:
        """At or above 180 degrees commands pass through."""
        config = DockingConfig()
        assert roll_corrected(0.3, -0.4, 180.0, config) == (0.3, -0.4)
        assert roll_corrected(0.3, -0.4, 270.0, config) == (0.3, -0.4)

    def test_roll_is_wrapped(self) -> None:
        """Roll outside [0, 360) is wrapped first."""
        assert roll_corrected(0.3, -0.4, 450.0, DockingConfig()) == (-0.3, 0.4)


# =============================================================================
# Phase Function Tests
# =============================================================================


def _state(position, velocity) -> RelativeState:
    return RelativeState.from_vectors(position, velocity)


class TestBack:
    """Test the back-off phase."""

    def test_nulls_forward_velocity(self) -> None:
        """Drifting forward produces a backward command."""
        bank = ControlLawBank()
        command = back(bank, _state((0.0, 0.0, 10.0), (0.0, 0.0, -0.5)))
        assert command.fore < 0.0
        assert bank.forward.last_setpoint == 0.0

    def test_keeps_previous_lateral_axes(self) -> None:
        """Lateral and vertical are left as the caller set them."""
        bank = ControlLawBank()
        previous = AxisCommand(fore=0.3, lateral=0.4, vertical=-0.2)
        command = back(bank, _state((5.0, 5.0, 10.0), (0.0, 0.0, 0.5)), previous)

        assert command.lateral == 0.4
        assert command.vertical == -0.2
        assert_allclose(command.fore, 0.505)

    def test_does_not_touch_lateral_loops(self) -> None:
        """Only the forward loop is advanced."""
        bank = ControlLawBank()
        back(bank, _state((5.0, 5.0, 10.0), (1.0, 1.0, 0.5)))
        assert bank.velocity_x.last_setpoint is None
        assert bank.position_x.last_setpoint is None


class TestAlign:
    """Test the alignment phase."""

    def test_coasting_commands_no_thrust(self) -> None:
        """Already closing between creep and limit: no fore thrust."""
        bank = ControlLawBank()
        command = align(bank, _state((0.0, 0.0, 40.0), (0.0, 0.0, -3.0)), 270.0)

        assert command.fore == 0.0
        assert bank.forward.last_setpoint == -1.0
        # Forward loop history still advanced: error = -1 - (-3) = 2
        assert_allclose(bank.forward.integral, 0.2)

    def test_far_and_slow_creeps_forward(self) -> None:
        """Beyond dock_start and not coasting: drive toward creep speed."""
        bank = ControlLawBank()
        command = align(bank, _state((0.0, 0.0, 40.0), (0.0, 0.0, 0.0)), 270.0)
        assert command.fore == 1.0
        assert bank.forward.last_setpoint == -1.0

    def test_too_fast_is_corrected(self) -> None:
        """Closing faster than the limit is actively slowed."""
        bank = ControlLawBank()
        command = align(bank, _state((0.0, 0.0, 40.0), (0.0, 0.0, -8.0)), 270.0)
        assert command.fore == -1.0

    def test_inside_start_holds_station(self) -> None:
        """Inside dock_start the forward setpoint is zero."""
        bank = ControlLawBank()
        command = align(bank, _state((0.0, 0.0, 10.0), (0.0, 0.0, -2.0)), 270.0)
        assert bank.forward.last_setpoint == 0.0
        assert command.fore == -1.0

    def test_lateral_setpoints_from_offsets(self) -> None:
        """Velocity loops chase the tapered desired velocity."""
        bank = ControlLawBank()
        align(bank, _state((10.0, -100.0, 40.0), (0.0, 0.0, -2.0)), 270.0)
        assert_allclose(bank.velocity_x.last_setpoint, -1.0)
        assert_allclose(bank.velocity_y.last_setpoint, 5.0)

    def test_centered_wants_zero_velocity(self) -> None:
        """Zero offset gives a zero velocity setpoint."""
        bank = ControlLawBank()
        command = align(bank, _state((0.0, 0.0, 40.0), (0.0, 0.0, -2.0)), 270.0)
        assert bank.velocity_x.last_setpoint == 0.0
        assert bank.velocity_y.last_setpoint == 0.0
        assert command.lateral == 0.0
        assert command.vertical == 0.0

    def test_does_not_touch_position_loops(self) -> None:
        """Alignment only drives the velocity loops."""
        bank = ControlLawBank()
        align(bank, _state((1.0, 1.0, 40.0), (0.0, 0.0, 0.0)), 270.0)
        assert bank.position_x.last_setpoint is None
        assert bank.position_y.last_setpoint is None


class TestApproach:
    """Test the final-approach phase."""

    @pytest.mark.parametrize("z", [2.4, 1.0, 0.1, 0.0])
    def test_terminal_setpoint(self, z: float) -> None:
        """Inside dock_final the forward loop targets -0.2 m/s."""
        bank = ControlLawBank()
        approach(bank, _state((0.0, 0.0, z), (0.0, 0.0, -0.1)), 270.0)
        assert bank.forward.last_setpoint == -0.2

    def test_forward_setpoint_far(self) -> None:
        """Far out the setpoint is half the alignment limit."""
        bank = ControlLawBank()
        approach(bank, _state((0.0, 0.0, 80.0), (0.0, 0.0, -1.0)), 270.0)
        assert bank.forward.last_setpoint == -2.5

    def test_holds_centerline(self) -> None:
        """Position loops push back toward zero offset."""
        bank = ControlLawBank()
        command = approach(bank, _state((2.0, -2.0, 10.0), (0.0, 0.0, -1.0)), 270.0)

        assert bank.position_x.last_setpoint == 0.0
        assert bank.position_y.last_setpoint == 0.0
        assert command.lateral < 0.0
        assert command.vertical > 0.0

    def test_does_not_touch_velocity_loops(self) -> None:
        """Approach only drives the position loops."""
        bank = ControlLawBank()
        approach(bank, _state((1.0, 1.0, 10.0), (0.3, 0.3, -1.0)), 270.0)
        assert bank.velocity_x.last_setpoint is None
        assert bank.velocity_y.last_setpoint is None


# =============================================================================
# Cross-Phase Properties
# =============================================================================


class TestRollFlip:
    """Lateral/vertical invert across the 180 degree roll boundary."""

    @pytest.mark.parametrize("phase", [align, approach])
    def test_flip_across_boundary(self, phase) -> None:
        """Commands at 179.9 and 180.1 degrees are exact negations."""
        state = _state((10.0, -20.0, 40.0), (0.2, -0.1, -0.5))
        below = phase(ControlLawBank(), state, 179.9)
        above = phase(ControlLawBank(), state, 180.1)

        assert below.lateral == -above.lateral
        assert below.vertical == -above.vertical
        assert below.fore == above.fore
        assert above.lateral != 0.0


class TestCommandBounds:
    """Every emitted command stays within the normalized range."""

    def test_random_states(self) -> None:
        """Random positions and velocities never escape [-1, 1]."""
        rng = np.random.default_rng(42)
        bank = ControlLawBank()
        previous = AxisCommand()

        for _ in range(300):
            state = RelativeState(
                position=rng.uniform(-500.0, 500.0, 3),
                velocity=rng.uniform(-50.0, 50.0, 3),
            )
            roll = float(rng.uniform(0.0, 360.0))
            commands = [
                back(bank, state, previous),
                align(bank, state, roll),
                approach(bank, state, roll),
            ]
            for command in commands:
                assert np.all(np.abs(command.as_array()) <= 1.0)
            previous = commands[-1]

    def test_extreme_states(self) -> None:
        """Huge offsets and speeds still produce bounded commands."""
        bank = ControlLawBank()
        state = _state((1e9, -1e9, 1e9), (-1e6, 1e6, -1e6))
        for command in (align(bank, state, 10.0), approach(bank, state, 200.0)):
            assert np.all(np.abs(command.as_array()) <= 1.0)

    def test_overflowing_jumps_then_normal_tick(self) -> None:
        """Opposite near-max samples on consecutive ticks do not poison the bank."""
        bank = ControlLawBank()
        commands = [
            back(bank, _state((0.0, 0.0, 10.0), (0.0, 0.0, 1e308))),
            back(bank, _state((0.0, 0.0, 10.0), (0.0, 0.0, -1e308))),
            approach(bank, _state((1e308, -1e308, 10.0), (0.0, 0.0, -1.0)), 270.0),
            approach(bank, _state((-1e308, 1e308, 10.0), (0.0, 0.0, -1.0)), 270.0),
            approach(bank, _state((0.5, -0.5, 10.0), (0.0, 0.0, -1.0)), 270.0),
            align(bank, _state((2.0, 2.0, 40.0), (0.0, 0.0, 0.0)), 270.0),
        ]
        for command in commands:
            assert np.all(np.isfinite(command.as_array()))
            assert np.all(np.abs(command.as_array()) <= 1.0)
        for ctrl in bank.controllers:
            assert np.isfinite(ctrl.integral)


class TestSharedBank:
    """Phases share one bank across ticks."""

    def test_forward_history_carries_across_phases(self) -> None:
        """Switching phase does not reset the forward loop."""
        bank = ControlLawBank()
        state = _state((0.0, 0.0, 10.0), (0.0, 0.0, 0.0))
        align(bank, state, 270.0)
        integral_after_align = bank.forward.integral
        approach(bank, state, 270.0)

        # approach setpoint -1 with vz 0 adds -0.1 to the integral
        assert_allclose(bank.forward.integral, integral_after_align - 0.1)
