"""
Driving and friction accelerations of the actuated axes
"""

import math
from typing import NamedTuple

from crane3d.params import FormulationKind, ModelParameters
from crane3d.state import PhysicalState

STICTION_VELOCITY = 1e-9  # m/s, below this an axis is treated as standing still


class AxisAcceleration(NamedTuple):
    """Accelerations of one actuated axis for a single sub-step (m/s²)"""

    drive: float
    friction: float
    net: float


class DrivingAccelerations(NamedTuple):
    """Per-axis accelerations fed to a formulation"""

    rail: AxisAcceleration
    cart: AxisAcceleration
    line: AxisAcceleration


def opposing_friction(velocity: float, drive: float, friction: float, dt: float) -> float:
    """
    Friction acceleration opposing the motion of an axis

    Friction opposes the velocity the axis would reach under its drive alone, and
    is never larger than needed to bring that velocity to exactly zero within the
    step. A resting axis therefore stays put while |drive| <= friction, and a
    sliding axis stops at zero instead of reversing.

    Args:
        velocity: Current axis velocity (m/s)
        drive: Driving acceleration (m/s²)
        friction: Friction acceleration magnitude (m/s²)
        dt: Step size (s)

    Returns:
        Signed friction acceleration, to be subtracted from the drive
    """
    free_velocity = velocity + drive * dt
    if abs(free_velocity) <= friction * dt:
        return free_velocity / dt
    return math.copysign(friction, free_velocity)


def axis_acceleration(
    force: float, inertia: float, friction_force: float, velocity: float, dt: float, load: float = 0.0
) -> AxisAcceleration:
    """
    Accelerations of one axis from an applied force

    Args:
        force: Applied actuator force (N)
        inertia: Mass moved by the actuator (kg)
        friction_force: Friction force magnitude (N)
        velocity: Current axis velocity (m/s)
        dt: Step size (s)
        load: Additional driving acceleration carried by the axis (m/s²)
    """
    drive = force / inertia + load
    friction = opposing_friction(velocity, drive, friction_force / inertia, dt)
    return AxisAcceleration(drive, friction, drive - friction)


def dry_friction_force(params: ModelParameters, normal_load: float, velocity: float) -> float:
    """Dry friction of the rail/cart interface: static breakaway at rest, kinetic when sliding"""
    if abs(velocity) < STICTION_VELOCITY:
        return params.static_friction * normal_load
    return params.kinetic_friction * normal_load


def axis_accelerations(
    state: PhysicalState,
    params: ModelParameters,
    formulation: FormulationKind,
    rail_force: float,
    cart_force: float,
    line_force: float,
    dt: float,
) -> DrivingAccelerations:
    """
    Compute driving, friction and net accelerations of the rail, cart and winch

    Args:
        state: Current physical state
        params: Crane parameters
        formulation: Formulation the accelerations are prepared for
        rail_force: Force driving the rail with the cart (N)
        cart_force: Force driving the cart along the rail (N)
        line_force: Force winding the lift-line, positive lengthens it (N)
        dt: Step size (s)

    Returns:
        DrivingAccelerations for rail, cart and line
    """
    rail_friction = params.rail_friction
    cart_friction = params.cart_friction
    if formulation is FormulationKind.NON_LINEAR_ORIGINAL:
        g = params.gravity
        rail_load = (params.rail_inertia + params.payload_mass) * g
        cart_load = (params.cart_inertia + params.payload_mass) * g
        rail_friction += dry_friction_force(params, rail_load, state.rail_velocity)
        cart_friction += dry_friction_force(params, cart_load, state.cart_velocity)

    rail = axis_acceleration(rail_force, params.rail_inertia, rail_friction, state.rail_velocity, dt)
    cart = axis_acceleration(cart_force, params.cart_inertia, cart_friction, state.cart_velocity, dt)

    if formulation.models_line:
        # The winch carries the static line load of the hanging payload
        line_load = params.gravity * math.cos(state.alfa) * math.cos(state.beta)
        line = axis_acceleration(
            line_force, params.payload_mass, params.winding_friction, state.line_velocity, dt, line_load
        )
    else:
        line = AxisAcceleration(0.0, 0.0, 0.0)

    return DrivingAccelerations(rail, cart, line)
