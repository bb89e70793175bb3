"""
Crane physical parameters and formulation selector
"""

from dataclasses import dataclass
from enum import Enum

from crane3d.errors import ConfigurationError
from crane3d.validation import (
    validate_limits,
    validate_non_negative,
    validate_positive,
)


class FormulationKind(Enum):
    """Selects the governing equations used for integration"""

    # Decoupled pendulum, small-angle linearization; lift-line ignored
    LINEAR = "linear"
    # Linearized model with payload reaction on rail and cart; lift-line ignored
    LINEAR2 = "linear2"
    # Non-linear model with constant line length; line force ignored
    NON_LINEAR_CONSTANT_LINE = "non_linear_constant_line"
    # Non-linear model with all three forces
    NON_LINEAR_COMPLETE = "non_linear_complete"
    # Non-linear model with all three forces and dry rail/cart friction
    NON_LINEAR_ORIGINAL = "non_linear_original"

    @property
    def models_line(self) -> bool:
        """Whether line length is integrated by this formulation"""
        return self in (FormulationKind.NON_LINEAR_COMPLETE, FormulationKind.NON_LINEAR_ORIGINAL)


@dataclass
class ModelParameters:
    """Physical parameters of the crane"""

    formulation: FormulationKind = FormulationKind.LINEAR
    payload_mass: float = 1.000  # kg (Mc)
    cart_mass: float = 1.155  # kg (Mw)
    rail_mass: float = 2.200  # kg (Ms, moving rail without the cart)
    gravity: float = 9.81  # m/s²
    # Friction forces opposing motion of each actuated axis
    rail_friction: float = 100.0  # N (Tx)
    cart_friction: float = 82.0  # N (Ty)
    winding_friction: float = 75.0  # N (Tr)
    # Dry steel-steel coefficients for the rail/cart interface
    static_friction: float = 0.7
    kinetic_friction: float = 0.6
    # Swing damping used by the linear formulations
    swing_damping: float = 0.1  # 1/s
    # Mechanical limits (inclusive)
    rail_limit_min: float = -30.0  # m
    rail_limit_max: float = 30.0  # m
    cart_limit_min: float = -35.0  # m
    cart_limit_max: float = 35.0  # m
    line_limit_min: float = 5.0  # m
    line_limit_max: float = 90.0  # m

    @property
    def rail_inertia(self) -> float:
        """Mass moved by the rail drive (rail carries the cart)"""
        return self.rail_mass + self.cart_mass

    @property
    def cart_inertia(self) -> float:
        """Mass moved by the cart drive"""
        return self.cart_mass

    @property
    def cart_mass_ratio(self) -> float:
        """mu1: payload to cart mass ratio"""
        return self.payload_mass / self.cart_inertia

    @property
    def rail_mass_ratio(self) -> float:
        """mu2: payload to rail-with-cart mass ratio"""
        return self.payload_mass / self.rail_inertia

    def validate(self) -> None:
        """
        Check that the parameters describe a physically usable crane

        Raises:
            ConfigurationError: On the first invalid field found
        """
        if not isinstance(self.formulation, FormulationKind):
            raise ConfigurationError(f"Unknown formulation: {self.formulation!r}")

        validate_positive(self.payload_mass, "payload_mass")
        validate_positive(self.cart_mass, "cart_mass")
        validate_positive(self.rail_mass, "rail_mass")
        validate_non_negative(self.gravity, "gravity")
        validate_non_negative(self.rail_friction, "rail_friction")
        validate_non_negative(self.cart_friction, "cart_friction")
        validate_non_negative(self.winding_friction, "winding_friction")
        validate_non_negative(self.static_friction, "static_friction")
        validate_non_negative(self.kinetic_friction, "kinetic_friction")
        validate_non_negative(self.swing_damping, "swing_damping")
        if self.kinetic_friction > self.static_friction:
            raise ConfigurationError(
                f"kinetic_friction {self.kinetic_friction} exceeds "
                f"static_friction {self.static_friction}"
            )

        validate_limits(self.rail_limit_min, self.rail_limit_max, "rail")
        validate_limits(self.cart_limit_min, self.cart_limit_max, "cart")
        validate_limits(self.line_limit_min, self.line_limit_max, "line")
        # Zero line length makes the pendulum equations singular
        validate_positive(self.line_limit_min, "line_limit_min")
