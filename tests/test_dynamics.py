"""
Unit tests for the dynamics formulations.

Tests each formulation's single-step behaviour given prepared axis accelerations.
"""

import numpy as np
import pytest

from crane3d import FormulationKind, ModelParameters, PhysicalState
from crane3d.dynamics import (
    ALFA,
    BETA,
    CART,
    FORMULATIONS,
    LINE,
    RAIL,
    integrate,
    lagrangian_accelerations,
)
from crane3d.friction import AxisAcceleration, DrivingAccelerations

STILL = AxisAcceleration(0.0, 0.0, 0.0)


def _net(rail: float = 0.0, cart: float = 0.0, line: float = 0.0) -> DrivingAccelerations:
    return DrivingAccelerations(
        AxisAcceleration(rail, 0.0, rail),
        AxisAcceleration(cart, 0.0, cart),
        AxisAcceleration(line, 0.0, line),
    )


class TestFormulationDispatch:
    """Test suite for the formulation table"""

    def test_every_formulation_has_a_handler(self) -> None:
        """Test that all five formulations are dispatchable"""
        assert set(FORMULATIONS) == set(FormulationKind)

    @pytest.mark.parametrize("formulation", list(FormulationKind))
    def test_rest_is_equilibrium(self, formulation: FormulationKind) -> None:
        """Test that a hanging payload at rest stays at rest without forces"""
        state = PhysicalState(line_length=5.0)
        params = ModelParameters()

        new_state = integrate(state, params, formulation, _net(), 0.01)

        assert new_state == state

    @pytest.mark.parametrize("formulation", list(FormulationKind))
    def test_input_state_not_mutated(self, formulation: FormulationKind) -> None:
        """Test that formulations return a new state and leave their input alone"""
        state = PhysicalState(line_length=5.0, alfa=0.1, beta=-0.05)
        before = PhysicalState(**vars(state))

        integrate(state, ModelParameters(), formulation, _net(2.0, 1.0, 0.5), 0.01)

        assert state == before

    @pytest.mark.parametrize("formulation", list(FormulationKind))
    def test_state_fields_are_plain_floats(self, formulation: FormulationKind) -> None:
        """Test that integrated states hold Python floats, not numpy scalars"""
        state = PhysicalState(line_length=5.0, alfa=0.1, beta=-0.05, line_velocity=0.2)

        new_state = integrate(state, ModelParameters(), formulation, _net(2.0, 1.0, 0.5), 0.01)

        for name, value in vars(new_state).items():
            assert type(value) is float, name


class TestLinearModels:
    """Test suite for LINEAR and LINEAR2"""

    @pytest.fixture
    def params(self) -> ModelParameters:
        """Create default crane parameters for testing"""
        return ModelParameters()

    @pytest.mark.parametrize("formulation", [FormulationKind.LINEAR, FormulationKind.LINEAR2])
    def test_line_length_frozen(self, params: ModelParameters, formulation: FormulationKind) -> None:
        """Test that linear models ignore line dynamics entirely"""
        state = PhysicalState(line_length=5.0, line_velocity=1.0)

        new_state = integrate(state, params, formulation, _net(line=50.0), 0.01)

        assert new_state.line_length == 5.0
        assert new_state.line_velocity == 0.0

    def test_cart_acceleration_swings_payload_back(self, params: ModelParameters) -> None:
        """Test that accelerating the cart makes the payload lag behind"""
        state = PhysicalState(line_length=5.0)

        new_state = integrate(state, params, FormulationKind.LINEAR, _net(cart=2.0), 0.01)

        assert new_state.cart_velocity > 0
        assert new_state.alfa_velocity < 0
        assert new_state.alfa < 0
        assert new_state.beta == 0.0

    def test_rail_acceleration_swings_beta(self, params: ModelParameters) -> None:
        """Test that accelerating the rail swings the payload along the rail axis"""
        state = PhysicalState(line_length=5.0)

        new_state = integrate(state, params, FormulationKind.LINEAR, _net(rail=2.0), 0.01)

        assert new_state.beta_velocity < 0
        assert new_state.alfa == 0.0

    def test_semi_implicit_euler_step(self, params: ModelParameters) -> None:
        """Test that positions advance with the updated velocities"""
        dt = 0.1
        state = PhysicalState(line_length=5.0)

        new_state = integrate(state, params, FormulationKind.LINEAR, _net(rail=3.0), dt)

        assert abs(new_state.rail_velocity - 3.0 * dt) < 1e-12
        assert abs(new_state.rail_offset - 3.0 * dt * dt) < 1e-12

    def test_linear_ignores_payload_reaction(self, params: ModelParameters) -> None:
        """Test that in LINEAR a swinging payload does not move the carriages"""
        state = PhysicalState(line_length=5.0, alfa=0.2, beta=0.1)

        new_state = integrate(state, params, FormulationKind.LINEAR, _net(), 0.01)

        assert new_state.rail_velocity == 0.0
        assert new_state.cart_velocity == 0.0

    def test_linear2_payload_pulls_carriages(self, params: ModelParameters) -> None:
        """Test that in LINEAR2 the line tension pulls rail and cart toward the payload"""
        state = PhysicalState(line_length=5.0, alfa=0.2, beta=0.1)
        dt = 0.01

        new_state = integrate(state, params, FormulationKind.LINEAR2, _net(), dt)

        g = params.gravity
        assert abs(new_state.cart_velocity - params.cart_mass_ratio * g * 0.2 * dt) < 1e-12
        assert abs(new_state.rail_velocity - params.rail_mass_ratio * g * 0.1 * dt) < 1e-12

    def test_swing_damping_slows_swing(self, params: ModelParameters) -> None:
        """Test that swing damping reduces swing velocity"""
        undamped = ModelParameters(swing_damping=0.0)
        state = PhysicalState(line_length=5.0, alfa_velocity=1.0)

        damped_state = integrate(state, params, FormulationKind.LINEAR, _net(), 0.01)
        free_state = integrate(state, undamped, FormulationKind.LINEAR, _net(), 0.01)

        assert damped_state.alfa_velocity < free_state.alfa_velocity


class TestNonLinearModels:
    """Test suite for the Lagrangian formulations"""

    @pytest.fixture
    def params(self) -> ModelParameters:
        """Create default crane parameters for testing"""
        return ModelParameters()

    @pytest.fixture
    def anchored(self) -> ModelParameters:
        """Carriages so heavy the payload cannot move them"""
        return ModelParameters(rail_mass=1e9, cart_mass=1e9)

    def test_pendulum_limit_alfa(self, anchored: ModelParameters) -> None:
        """Test that with anchored carriages alfa follows the exact pendulum equation"""
        state = PhysicalState(line_length=4.0, alfa=0.6)

        accel = lagrangian_accelerations(state, anchored, _net(), line_fixed=True)

        assert abs(accel[ALFA] + anchored.gravity * np.sin(0.6) / 4.0) < 1e-6
        assert accel[LINE] == 0.0

    def test_pendulum_limit_beta(self, anchored: ModelParameters) -> None:
        """Test that with anchored carriages beta follows the exact pendulum equation"""
        state = PhysicalState(line_length=4.0, beta=-0.4)

        accel = lagrangian_accelerations(state, anchored, _net(), line_fixed=True)

        assert abs(accel[BETA] - anchored.gravity * np.sin(0.4) / 4.0) < 1e-6
        assert abs(accel[ALFA]) < 1e-9

    def test_payload_pulls_cart(self, params: ModelParameters) -> None:
        """Test that a deflected payload accelerates the cart toward it"""
        state = PhysicalState(line_length=5.0, alfa=0.3)

        accel = lagrangian_accelerations(state, params, _net(), line_fixed=True)

        assert accel[CART] > 0
        assert abs(accel[RAIL]) < 1e-12

    def test_carriage_acceleration_swings_payload_back(self, params: ModelParameters) -> None:
        """Test that pushing the rail swings the payload backwards along the rail axis"""
        state = PhysicalState(line_length=5.0)

        accel = lagrangian_accelerations(state, params, _net(rail=3.0), line_fixed=True)

        # A vertical line transmits no horizontal force at that instant
        assert abs(accel[RAIL] - 3.0) < 1e-9
        assert abs(accel[BETA] + 3.0 / 5.0) < 1e-9

    def test_constant_line_holds_length(self, params: ModelParameters) -> None:
        """Test that the constant-line formulation never changes line length"""
        state = PhysicalState(line_length=5.0, line_velocity=0.5, alfa=0.2)

        new_state = integrate(state, params, FormulationKind.NON_LINEAR_CONSTANT_LINE, _net(line=20.0), 0.01)

        assert new_state.line_length == 5.0
        assert new_state.line_velocity == 0.0

    @pytest.mark.parametrize("formulation", [
        FormulationKind.NON_LINEAR_COMPLETE,
        FormulationKind.NON_LINEAR_ORIGINAL,
    ])
    def test_line_force_lengthens_line(self, params: ModelParameters, formulation: FormulationKind) -> None:
        """Test that positive net line acceleration lowers the payload"""
        state = PhysicalState(line_length=5.0)

        new_state = integrate(state, params, formulation, _net(line=4.0), 0.01)

        assert abs(new_state.line_velocity - 4.0 * 0.01) < 1e-12
        assert new_state.line_length > 5.0

    def test_swing_pays_out_free_line(self, params: ModelParameters) -> None:
        """Test that with no net line force a swinging payload pulls the line out by R * w²"""
        state = PhysicalState(line_length=5.0, alfa_velocity=1.0)

        accel = lagrangian_accelerations(state, params, _net(), line_fixed=False)

        assert abs(accel[LINE] - 5.0) < 1e-9
