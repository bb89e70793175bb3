"""
Test suite for the 3D crane dynamics model.

This package contains unit tests organized by component:
- test_params.py: Tests for ModelParameters and its validation
- test_geometry.py: Tests for payload kinematics
- test_friction.py: Tests for driving and friction accelerations
- test_dynamics.py: Tests for the five dynamics formulations
- test_model.py: Tests for time stepping and the update contract
- test_limits.py: Tests for mechanical limits and damping
- test_simulation.py: Tests for trajectory recording
- test_analysis.py: Tests for swing analysis
- test_integration.py: Integration tests for formulation comparison runs
"""
