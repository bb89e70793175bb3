"""
Crane dynamics model: time stepping, limits and damping
"""

from dataclasses import fields, replace
import logging
from typing import Optional, Tuple

from crane3d.dynamics import integrate
from crane3d.errors import ConfigurationError, DivergedError
from crane3d.friction import axis_accelerations
from crane3d.params import FormulationKind, ModelParameters
from crane3d.state import PhysicalState, StateSnapshot
from crane3d.validation import validate_finite, validate_non_negative, validate_positive

logger = logging.getLogger(__name__)

REST_THRESHOLD = 1e-9  # velocities and angles below this snap to rest


def _clamp_axis(position: float, velocity: float, lower: float, upper: float) -> Tuple[float, float]:
    """Clamp a position into [lower, upper], stopping motion that points out of the range"""
    if position <= lower:
        return lower, max(velocity, 0.0)
    if position >= upper:
        return upper, min(velocity, 0.0)
    return position, velocity


def apply_limits(state: PhysicalState, params: ModelParameters) -> PhysicalState:
    """
    Keep rail, cart and line inside their mechanical limits

    A clamped axis loses its outward velocity so no energy is carried across the
    end stop.
    """
    rail, rail_velocity = _clamp_axis(
        state.rail_offset, state.rail_velocity, params.rail_limit_min, params.rail_limit_max
    )
    cart, cart_velocity = _clamp_axis(
        state.cart_offset, state.cart_velocity, params.cart_limit_min, params.cart_limit_max
    )
    line, line_velocity = _clamp_axis(
        state.line_length, state.line_velocity, params.line_limit_min, params.line_limit_max
    )
    return replace(
        state,
        rail_offset=rail,
        cart_offset=cart,
        line_length=line,
        rail_velocity=rail_velocity,
        cart_velocity=cart_velocity,
        line_velocity=line_velocity,
    )


def _settle(value: float) -> float:
    return 0.0 if abs(value) < REST_THRESHOLD else value


def dampen(state: PhysicalState) -> PhysicalState:
    """Snap numerically insignificant velocities and swing to rest to stop long-run drift"""
    alfa_velocity = _settle(state.alfa_velocity)
    beta_velocity = _settle(state.beta_velocity)
    return replace(
        state,
        rail_velocity=_settle(state.rail_velocity),
        cart_velocity=_settle(state.cart_velocity),
        line_velocity=_settle(state.line_velocity),
        alfa_velocity=alfa_velocity,
        beta_velocity=beta_velocity,
        alfa=_settle(state.alfa) if alfa_velocity == 0.0 else state.alfa,
        beta=_settle(state.beta) if beta_velocity == 0.0 else state.beta,
    )


class DynamicsModel:
    """
    3-DOF gantry crane: a rail moving along X, a cart moving along Y on the rail,
    and a payload hanging from the cart on a variable-length lift-line.

    Parameters live in ``params`` and may be changed freely between updates;
    changes take effect on the next sub-step.
    """

    def __init__(
        self,
        params: Optional[ModelParameters] = None,
        state: Optional[PhysicalState] = None
    ) -> None:
        """
        Initialize model

        Args:
            params: Crane parameters, defaults to ModelParameters()
            state: Initial physical state, clamped into the limits; defaults to rest

        Raises:
            ConfigurationError: If state has a non-finite field or a non-positive line length
        """
        self.params = params if params is not None else ModelParameters()
        self._state = self._accept_state(state) if state is not None else PhysicalState.at_rest(self.params)
        self._time_bank = 0.0  # simulation time not yet integrated (s)
        self._step_count = 0

    @property
    def physical_state(self) -> PhysicalState:
        """Copy of the full internal state, velocities included"""
        return replace(self._state)

    @physical_state.setter
    def physical_state(self, state: PhysicalState) -> None:
        self._state = self._accept_state(state)

    @property
    def step_count(self) -> int:
        """Number of sub-steps integrated since construction or reset"""
        return self._step_count

    @property
    def pending_time(self) -> float:
        """Banked time smaller than one fixed step, carried to the next update"""
        return self._time_bank

    def reset(self, state: Optional[PhysicalState] = None) -> None:
        """Return to rest (or the given state) and clear the time bank"""
        self._state = self._accept_state(state) if state is not None else PhysicalState.at_rest(self.params)
        self._time_bank = 0.0
        self._step_count = 0

    def get_state(self) -> StateSnapshot:
        """
        Returns:
            Current state of the crane: rail, cart, lift-line and payload swing
        """
        return self._state.snapshot()

    def update_fixed(
        self,
        fixed_step: float,
        elapsed_time: float,
        rail_force: float,
        cart_force: float,
        line_force: float
    ) -> StateSnapshot:
        """
        Update the model using a fixed time step

        Elapsed time is banked and integrated in whole steps of ``fixed_step``;
        the remainder is carried over to the next call.

        Args:
            fixed_step: Size of the fixed time step, e.g. 0.01 (s)
            elapsed_time: Time since last update (s)
            rail_force: Force driving the rail with the cart (N)
            cart_force: Force driving the cart along the rail (N)
            line_force: Force winding the lift-line, positive lengthens it (N)

        Returns:
            New state of the crane

        Raises:
            ConfigurationError: Invalid parameters or arguments; state is unchanged
            DivergedError: Integration became non-finite; state is unchanged
        """
        try:
            self._validate(fixed_step, "fixed_step", rail_force, cart_force, line_force)
            validate_non_negative(elapsed_time, "elapsed_time")
        except ConfigurationError as exc:
            logger.warning("Rejected update: %s", exc)
            raise

        formulation = self.params.formulation
        # Limits may have been tightened since the last call
        state = apply_limits(self._state, self.params)
        time_bank = self._time_bank + elapsed_time
        steps = 0
        while time_bank >= fixed_step:
            state = self._step(state, formulation, fixed_step, rail_force, cart_force, line_force)
            time_bank -= fixed_step
            steps += 1

        self._state = state
        self._time_bank = time_bank
        self._step_count += steps
        logger.debug(
            "update_fixed: %d sub-steps of %.4g s (%s), %.4g s carried over",
            steps, fixed_step, formulation.name, time_bank
        )
        return state.snapshot()

    def update(
        self,
        delta_time: float,
        rail_force: float,
        cart_force: float,
        line_force: float
    ) -> StateSnapshot:
        """
        Update the model using delta_time as the time step.

        The formulations are explicit integrators, so this can be unstable when
        delta_time is large or varies between calls; prefer update_fixed.

        Args:
            delta_time: Time since last update (s)
            rail_force: Force driving the rail with the cart (N)
            cart_force: Force driving the cart along the rail (N)
            line_force: Force winding the lift-line, positive lengthens it (N)

        Returns:
            New state of the crane
        """
        try:
            self._validate(delta_time, "delta_time", rail_force, cart_force, line_force)
        except ConfigurationError as exc:
            logger.warning("Rejected update: %s", exc)
            raise

        state = self._step(
            self._state, self.params.formulation, delta_time, rail_force, cart_force, line_force
        )
        self._state = state
        self._step_count += 1
        return state.snapshot()

    def _validate(
        self, step: float, step_name: str, rail_force: float, cart_force: float, line_force: float
    ) -> None:
        self.params.validate()
        validate_positive(step, step_name)
        validate_finite(rail_force, "rail_force")
        validate_finite(cart_force, "cart_force")
        validate_finite(line_force, "line_force")

    def _step(
        self,
        state: PhysicalState,
        formulation: FormulationKind,
        dt: float,
        rail_force: float,
        cart_force: float,
        line_force: float
    ) -> PhysicalState:
        """Integrate one sub-step, then enforce limits and damping"""
        acc = axis_accelerations(state, self.params, formulation, rail_force, cart_force, line_force, dt)
        try:
            state = integrate(state, self.params, formulation, acc, dt)
        except DivergedError as exc:
            logger.warning("Integration diverged (%s): %s", formulation.name, exc)
            raise
        # Checked before clamping, which would hide an infinite position at a limit
        if not state.is_finite():
            logger.warning("Integration diverged (%s): non-finite state %s", formulation.name, state)
            raise DivergedError(
                f"{formulation.name} produced a non-finite state after a {dt} s step"
            )
        return dampen(apply_limits(state, self.params))

    def _accept_state(self, state: PhysicalState) -> PhysicalState:
        """
        Copy of a host-supplied state, moved inside the mechanical limits

        Raises:
            ConfigurationError: A field is not finite or the line length is not positive
        """
        try:
            for field in fields(state):
                validate_finite(getattr(state, field.name), f"state.{field.name}")
            validate_positive(state.line_length, "state.line_length")
        except ConfigurationError as exc:
            logger.warning("Rejected state: %s", exc)
            raise
        return apply_limits(state, self.params)
