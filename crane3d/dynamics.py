"""
Crane dynamics formulations

Every formulation maps (state, params, accelerations, dt) to the state one step
later. Integration is semi-implicit Euler: velocities are advanced with the
accelerations of the current state, positions with the new velocities.

Linear formulations (small angles, line length frozen):

    LINEAR   X'' = N_rail
             Y'' = N_cart
    LINEAR2  X'' = N_rail + mu2 * g * beta
             Y'' = N_cart + mu1 * g * alfa

    both     alfa'' = -(g * alfa + Y'') / R - c * alfa'
             beta'' = -(g * beta + X'') / R - c * beta'

Non-linear formulations come from the Lagrangian of the rail, the cart and a
point-mass payload in the coordinates q = (X, Y, R, alfa, beta):

    M(q) q'' = Q + m J^T (g_vec - a_c)
    M(q)     = diag(M_rail, M_cart, 0, 0, 0) + m J^T J

where J is the payload Jacobian, a_c the velocity-product acceleration and
Q = (M_rail N_rail, M_cart N_cart, m N_line, 0, 0). The gravity component along
the line is already part of N_line, so it is not added twice.
"""

from dataclasses import replace
from typing import Callable, Dict

import numpy as np

from crane3d.errors import DivergedError
from crane3d.friction import DrivingAccelerations
from crane3d.geometry import payload_jacobian, velocity_product_acceleration
from crane3d.params import FormulationKind, ModelParameters
from crane3d.state import PhysicalState

Formulation = Callable[[PhysicalState, ModelParameters, DrivingAccelerations, float], PhysicalState]

# Index of each generalized coordinate
RAIL, CART, LINE, ALFA, BETA = range(5)
SWING_COORDINATES = [RAIL, CART, ALFA, BETA]


def _advance(state: PhysicalState, accel: np.ndarray, dt: float, line_fixed: bool) -> PhysicalState:
    """Semi-implicit Euler step of all coordinates"""
    line_velocity = 0.0 if line_fixed else state.line_velocity + float(accel[LINE]) * dt
    rail_velocity = state.rail_velocity + float(accel[RAIL]) * dt
    cart_velocity = state.cart_velocity + float(accel[CART]) * dt
    alfa_velocity = state.alfa_velocity + float(accel[ALFA]) * dt
    beta_velocity = state.beta_velocity + float(accel[BETA]) * dt
    return replace(
        state,
        rail_offset=state.rail_offset + rail_velocity * dt,
        cart_offset=state.cart_offset + cart_velocity * dt,
        line_length=state.line_length + line_velocity * dt,
        alfa=state.alfa + alfa_velocity * dt,
        beta=state.beta + beta_velocity * dt,
        rail_velocity=rail_velocity,
        cart_velocity=cart_velocity,
        line_velocity=line_velocity,
        alfa_velocity=alfa_velocity,
        beta_velocity=beta_velocity,
    )


def _linear_swing(
    state: PhysicalState, params: ModelParameters, rail_accel: float, cart_accel: float, dt: float
) -> PhysicalState:
    """Damped small-angle pendulum driven by the carriage accelerations"""
    g = params.gravity
    c = params.swing_damping
    r = state.line_length
    accel = np.zeros(5)
    accel[RAIL] = rail_accel
    accel[CART] = cart_accel
    accel[ALFA] = -(g * state.alfa + cart_accel) / r - c * state.alfa_velocity
    accel[BETA] = -(g * state.beta + rail_accel) / r - c * state.beta_velocity
    return _advance(state, accel, dt, line_fixed=True)


def linear_model(
    state: PhysicalState, params: ModelParameters, acc: DrivingAccelerations, dt: float
) -> PhysicalState:
    """Carriages move under their net accelerations; the pendulum follows without reacting"""
    return _linear_swing(state, params, acc.rail.net, acc.cart.net, dt)


def linear_model2(
    state: PhysicalState, params: ModelParameters, acc: DrivingAccelerations, dt: float
) -> PhysicalState:
    """Linearized model where the swinging payload pulls back on the rail and cart"""
    g = params.gravity
    rail_accel = acc.rail.net + params.rail_mass_ratio * g * state.beta
    cart_accel = acc.cart.net + params.cart_mass_ratio * g * state.alfa
    return _linear_swing(state, params, rail_accel, cart_accel, dt)


def lagrangian_accelerations(
    state: PhysicalState, params: ModelParameters, acc: DrivingAccelerations, line_fixed: bool
) -> np.ndarray:
    """
    Solve the coupled equations of motion for the generalized accelerations

    Args:
        state: Current physical state
        params: Crane parameters
        acc: Per-axis net accelerations
        line_fixed: Hold R constant and solve only for (X, Y, alfa, beta)

    Returns:
        Accelerations of (X, Y, R, alfa, beta); the R entry is 0 when line_fixed

    Raises:
        DivergedError: If the mass matrix is singular
    """
    m = params.payload_mass
    line_velocity = 0.0 if line_fixed else state.line_velocity
    jacobian = payload_jacobian(state.line_length, state.alfa, state.beta)
    coriolis = velocity_product_acceleration(
        state.line_length, state.alfa, state.beta,
        line_velocity, state.alfa_velocity, state.beta_velocity,
    )
    gravity = np.array([0.0, 0.0, -params.gravity])

    mass = m * jacobian.T @ jacobian
    mass[RAIL, RAIL] += params.rail_inertia
    mass[CART, CART] += params.cart_inertia

    rhs = m * jacobian.T @ (gravity - coriolis)
    rhs[RAIL] += params.rail_inertia * acc.rail.net
    rhs[CART] += params.cart_inertia * acc.cart.net
    rhs[LINE] = m * (acc.line.net - jacobian[:, LINE] @ coriolis)

    accel = np.zeros(5)
    try:
        if line_fixed:
            reduced = np.ix_(SWING_COORDINATES, SWING_COORDINATES)
            accel[SWING_COORDINATES] = np.linalg.solve(mass[reduced], rhs[SWING_COORDINATES])
        else:
            accel[:] = np.linalg.solve(mass, rhs)
    except np.linalg.LinAlgError as exc:
        raise DivergedError(
            f"Singular mass matrix at alfa={state.alfa:.6g}, beta={state.beta:.6g}, "
            f"R={state.line_length:.6g}"
        ) from exc
    return accel


def non_linear_constant_line(
    state: PhysicalState, params: ModelParameters, acc: DrivingAccelerations, dt: float
) -> PhysicalState:
    """Full non-linear coupling of rail, cart and swing with a fixed line length"""
    accel = lagrangian_accelerations(state, params, acc, line_fixed=True)
    return _advance(state, accel, dt, line_fixed=True)


def non_linear_complete(
    state: PhysicalState, params: ModelParameters, acc: DrivingAccelerations, dt: float
) -> PhysicalState:
    """Full non-linear coupling of rail, cart, winch and swing"""
    accel = lagrangian_accelerations(state, params, acc, line_fixed=False)
    return _advance(state, accel, dt, line_fixed=False)


# NON_LINEAR_ORIGINAL shares the equations of NON_LINEAR_COMPLETE; it differs in
# the dry friction folded into its net accelerations (see crane3d.friction).
FORMULATIONS: Dict[FormulationKind, Formulation] = {
    FormulationKind.LINEAR: linear_model,
    FormulationKind.LINEAR2: linear_model2,
    FormulationKind.NON_LINEAR_CONSTANT_LINE: non_linear_constant_line,
    FormulationKind.NON_LINEAR_COMPLETE: non_linear_complete,
    FormulationKind.NON_LINEAR_ORIGINAL: non_linear_complete,
}


def integrate(
    state: PhysicalState,
    params: ModelParameters,
    formulation: FormulationKind,
    acc: DrivingAccelerations,
    dt: float,
) -> PhysicalState:
    """Advance the state by one step using the selected formulation"""
    return FORMULATIONS[formulation](state, params, acc, dt)
