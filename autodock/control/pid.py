"""PID controller primitive.

Provides the single-axis controller every docking control law is built from:
- Anti-windup for the integral term
- Derivative filtering
- Output saturation (every output is clamped)

Example:
    >>> from autodock.control import PIDController
    >>>
    >>> # Forward speed controller with a normalized actuator range
    >>> ctrl = PIDController.create(kp=1.0, ki=0.1, kd=0.0, minimum=-1.0, maximum=1.0)
    >>>
    >>> # One control tick: hold -1 m/s closing speed
    >>> command = -ctrl.seek(-1.0, measured_speed, dt=0.1)
"""

from dataclasses import dataclass, field

import numpy as np
from beartype import beartype

# =============================================================================
# PID Gains
# =============================================================================


@beartype
@dataclass
class PIDGains:
    """PID controller gains.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
    """
    kp: float = 1.0
    ki: float = 0.0
    kd: float = 0.0


# =============================================================================
# PID Controller
# =============================================================================


@beartype
@dataclass
class PIDController:
    """General-purpose PID controller.

    Implements the parallel PID form:
        u = kp * e + ki * integral(e) + kd * de/dt

    Controllers are long-lived: the integral and derivative history carry
    across ticks, so one instance must be driven by exactly one loop.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        output_limits: (min, max) output limits
        integral_limits: (min, max) integral term limits (anti-windup)
        derivative_filter: Low-pass filter coefficient for derivative (0-1)
    """
    kp: float = 1.0
    ki: float = 0.0
    kd: float = 0.0
    output_limits: tuple[float, float] | None = None
    integral_limits: tuple[float, float] | None = None
    derivative_filter: float = 0.1  # Filter coefficient (0 = no filter)

    # Internal state
    _integral: float = field(default=0.0, init=False, repr=False)
    _prev_error: float | None = field(default=None, init=False, repr=False)
    _prev_derivative: float = field(default=0.0, init=False, repr=False)
    _last_setpoint: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.output_limits and self.output_limits[0] >= self.output_limits[1]:
            raise ValueError(
                f"output minimum must be below maximum, got {self.output_limits}"
            )
        if self.integral_limits and self.integral_limits[0] >= self.integral_limits[1]:
            raise ValueError(
                f"integral minimum must be below maximum, got {self.integral_limits}"
            )
        if not 0.0 <= self.derivative_filter <= 1.0:
            raise ValueError(
                f"derivative_filter must be in [0, 1], got {self.derivative_filter}"
            )

    @classmethod
    def create(
        cls,
        kp: float,
        ki: float,
        kd: float,
        minimum: float,
        maximum: float,
        integral_limits: tuple[float, float] | None = None,
    ) -> "PIDController":
        """Create a controller with the given gains and output clamp.

        Raises:
            ValueError: If minimum is not strictly below maximum
        """
        return cls(
            kp=kp,
            ki=ki,
            kd=kd,
            output_limits=(minimum, maximum),
            integral_limits=integral_limits,
        )

    @classmethod
    def from_gains(
        cls,
        gains: PIDGains,
        output_limits: tuple[float, float] | None = None,
        integral_limits: tuple[float, float] | None = None,
    ) -> "PIDController":
        """Create controller from PIDGains object."""
        return cls(
            kp=gains.kp,
            ki=gains.ki,
            kd=gains.kd,
            output_limits=output_limits,
            integral_limits=integral_limits,
        )

    @beartype
    def reset(self) -> None:
        """Reset controller state (integral and derivative history)."""
        self._integral = 0.0
        self._prev_error = None
        self._prev_derivative = 0.0
        self._last_setpoint = None

    @beartype
    def update(self, error: float, dt: float) -> float:
        """Compute PID control output.

        Args:
            error: Current error (setpoint - measurement)
            dt: Time step [s]

        Returns:
            Control output
        """
        if dt <= 0:
            return 0.0

        # Proportional term
        p_term = self.kp * error

        # Integral term with anti-windup; an overflowing step is dropped
        integral = self._integral + error * dt
        if np.isfinite(integral):
            self._integral = integral
        if self.integral_limits:
            self._integral = float(np.clip(
                self._integral,
                self.integral_limits[0],
                self.integral_limits[1]
            ))
        i_term = self.ki * self._integral

        # Derivative term with filtering; history must stay finite
        if self._prev_error is not None:
            raw_derivative = (error - self._prev_error) / dt
            # Low-pass filter
            alpha = self.derivative_filter
            derivative = (
                alpha * raw_derivative +
                (1 - alpha) * self._prev_derivative
            )
            if np.isfinite(derivative):
                self._prev_derivative = float(derivative)
        d_term = self.kd * self._prev_derivative if self.kd else 0.0

        self._prev_error = float(error)

        # Total output
        output = p_term + i_term + d_term

        # Output saturation
        if self.output_limits:
            output = np.clip(output, self.output_limits[0], self.output_limits[1])

        return float(output)

    @beartype
    def seek(self, setpoint: float, measured: float, dt: float) -> float:
        """Advance one tick toward a setpoint.

        The internal state advances even when the caller ignores the
        returned value.

        Args:
            setpoint: Target value for this tick
            measured: Current measured value
            dt: Time step [s]

        Returns:
            Control output, clamped to output_limits
        """
        self._last_setpoint = float(setpoint)
        return self.update(setpoint - measured, dt)

    @property
    def last_setpoint(self) -> float | None:
        """Setpoint passed to the most recent seek() call."""
        return self._last_setpoint

    @property
    def integral(self) -> float:
        """Accumulated integral of the error."""
        return self._integral

    @property
    def gains(self) -> PIDGains:
        """Get current gains as PIDGains object."""
        return PIDGains(kp=self.kp, ki=self.ki, kd=self.kd)
