"""
Payload forward kinematics

Coordinate system of the crane:
    X: outermost movement of the rail, considered as forward
    Y: left-right movement of the cart along the rail
    Z: up-down, measured upward from the cart plane

Swing angles are measured from the vertical. alfa deflects the payload along
the cart (Y) axis, beta along the rail (X) axis:

    payload = (X + R cos(alfa) sin(beta),
               Y + R sin(alfa),
               -R cos(alfa) cos(beta))

Generalized coordinates are ordered (X, Y, R, alfa, beta) throughout.
"""

from typing import Tuple
import numpy as np


def payload_offset(line_length: float, alfa: float, beta: float) -> Tuple[float, float, float]:
    """
    Payload position relative to the cart

    Args:
        line_length: Lift-line length R (m)
        alfa: Swing angle along the cart axis (rad)
        beta: Swing angle along the rail axis (rad)

    Returns:
        Tuple of (dx, dy, dz) in meters
    """
    ca, sa = np.cos(alfa), np.sin(alfa)
    cb, sb = np.cos(beta), np.sin(beta)
    return (
        float(line_length * ca * sb),
        float(line_length * sa),
        float(-line_length * ca * cb),
    )


def payload_position(
    rail_offset: float, cart_offset: float, line_length: float, alfa: float, beta: float
) -> Tuple[float, float, float]:
    """Payload position in the frame of the crane construction"""
    dx, dy, dz = payload_offset(line_length, alfa, beta)
    return rail_offset + dx, cart_offset + dy, dz


def payload_jacobian(line_length: float, alfa: float, beta: float) -> np.ndarray:
    """
    Jacobian of the payload position with respect to (X, Y, R, alfa, beta)

    Returns:
        3x5 matrix, column j is d(payload)/d(q_j)
    """
    r = line_length
    ca, sa = np.cos(alfa), np.sin(alfa)
    cb, sb = np.cos(beta), np.sin(beta)
    return np.array([
        [1.0, 0.0, ca * sb, -r * sa * sb, r * ca * cb],
        [0.0, 1.0, sa, r * ca, 0.0],
        [0.0, 0.0, -ca * cb, r * sa * cb, r * ca * sb],
    ])


def velocity_product_acceleration(
    line_length: float,
    alfa: float,
    beta: float,
    line_velocity: float,
    alfa_velocity: float,
    beta_velocity: float,
) -> np.ndarray:
    """
    Payload acceleration caused by the current velocities alone

    This is the d(J)/dt * q_dot term of payload acceleration = J q_ddot + d(J)/dt q_dot,
    i.e. the centripetal and Coriolis contributions of line winding and swing.

    Returns:
        Acceleration vector (3,) in m/s²
    """
    r = line_length
    ca, sa = np.cos(alfa), np.sin(alfa)
    cb, sb = np.cos(beta), np.sin(beta)
    rd, ad, bd = line_velocity, alfa_velocity, beta_velocity

    # Second partial derivatives of the payload position
    d_r_alfa = np.array([-sa * sb, ca, sa * cb])
    d_r_beta = np.array([ca * cb, 0.0, ca * sb])
    d_alfa_alfa = np.array([-r * ca * sb, -r * sa, r * ca * cb])
    d_alfa_beta = np.array([-r * sa * cb, 0.0, -r * sa * sb])
    d_beta_beta = np.array([-r * ca * sb, 0.0, r * ca * cb])

    return (
        2.0 * rd * ad * d_r_alfa
        + 2.0 * rd * bd * d_r_beta
        + ad * ad * d_alfa_alfa
        + 2.0 * ad * bd * d_alfa_beta
        + bd * bd * d_beta_beta
    )
