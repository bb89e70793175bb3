"""
3D gantry crane dynamics

This package simulates a rail-mounted cart carrying a payload on a
variable-length lift-line, for use as a physics core inside a host application.
"""

from crane3d.errors import ConfigurationError, CraneModelError, DivergedError
from crane3d.params import FormulationKind, ModelParameters
from crane3d.state import PhysicalState, StateSnapshot
from crane3d.model import DynamicsModel
from crane3d.simulator import STATE_COLUMNS, CraneSimulator
from crane3d.analysis import SwingAnalyzer
from crane3d.comparison import run_formulation_comparison

__all__ = [
    "ConfigurationError",
    "CraneModelError",
    "DivergedError",
    "FormulationKind",
    "ModelParameters",
    "PhysicalState",
    "StateSnapshot",
    "DynamicsModel",
    "STATE_COLUMNS",
    "CraneSimulator",
    "SwingAnalyzer",
    "run_formulation_comparison",
]
