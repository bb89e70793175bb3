"""
Simulation state representation
"""

from dataclasses import dataclass, fields
import math
from typing import TYPE_CHECKING

import numpy as np

from crane3d.geometry import payload_position

if TYPE_CHECKING:
    from crane3d.params import ModelParameters

DEFAULT_LINE_LENGTH = 0.5  # m, keeps the pendulum away from R = 0


@dataclass
class PhysicalState:
    """Positions, angles and their rates"""

    rail_offset: float = 0.0  # X: rail with cart from the center of the frame (m)
    cart_offset: float = 0.0  # Y: cart from the center of the rail (m)
    line_length: float = DEFAULT_LINE_LENGTH  # R: lift-line length (m)
    alfa: float = 0.0  # Swing along the cart axis (rad)
    beta: float = 0.0  # Swing along the rail axis (rad)
    rail_velocity: float = 0.0  # m/s
    cart_velocity: float = 0.0  # m/s
    line_velocity: float = 0.0  # m/s
    alfa_velocity: float = 0.0  # rad/s
    beta_velocity: float = 0.0  # rad/s

    @classmethod
    def at_rest(cls, params: "ModelParameters") -> "PhysicalState":
        """Rest state with the default line length moved inside the line limits"""
        line_length = min(max(DEFAULT_LINE_LENGTH, params.line_limit_min), params.line_limit_max)
        return cls(line_length=line_length)

    def is_finite(self) -> bool:
        """True when every field is a finite number"""
        return all(math.isfinite(getattr(self, f.name)) for f in fields(self))

    def snapshot(self) -> "StateSnapshot":
        """Immutable copy of the observable part of the state"""
        x, y, z = payload_position(
            self.rail_offset, self.cart_offset, self.line_length, self.alfa, self.beta
        )
        return StateSnapshot(
            alfa=self.alfa,
            beta=self.beta,
            rail_offset=self.rail_offset,
            cart_offset=self.cart_offset,
            line_length=self.line_length,
            payload_x=x,
            payload_y=y,
            payload_z=z,
        )


@dataclass(frozen=True)
class StateSnapshot:
    """Output state of the crane model"""

    alfa: float
    beta: float
    rail_offset: float
    cart_offset: float
    line_length: float
    payload_x: float
    payload_y: float
    payload_z: float

    @property
    def payload_position(self) -> np.ndarray:
        """Payload coordinates as an array [x, y, z]"""
        return np.array([self.payload_x, self.payload_y, self.payload_z])

    def format(self) -> str:
        """Human readable multi-line rendering for logs and debugging"""
        return (
            f"alfa:    {math.degrees(self.alfa):8.3f} deg\n"
            f"beta:    {math.degrees(self.beta):8.3f} deg\n"
            f"rail:    {self.rail_offset:8.3f} m\n"
            f"cart:    {self.cart_offset:8.3f} m\n"
            f"line:    {self.line_length:8.3f} m\n"
            f"payload: ({self.payload_x:.3f}, {self.payload_y:.3f}, {self.payload_z:.3f})"
        )

    def __str__(self) -> str:
        return self.format()
