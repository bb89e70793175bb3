"""
Trajectory recording on top of the crane model
"""

import logging
from typing import Callable, Optional, Tuple, Union

import numpy as np

from crane3d.model import DynamicsModel
from crane3d.params import ModelParameters
from crane3d.state import PhysicalState, StateSnapshot
from crane3d.validation import validate_positive

logger = logging.getLogger(__name__)

Forces = Tuple[float, float, float]
ForceProfile = Union[Forces, Callable[[float], Forces]]

STATE_COLUMNS = (
    "rail_offset",
    "cart_offset",
    "line_length",
    "alfa",
    "beta",
    "payload_x",
    "payload_y",
    "payload_z",
)


def snapshot_row(snapshot: StateSnapshot) -> np.ndarray:
    """Flatten a snapshot into a row ordered as STATE_COLUMNS"""
    return np.array([getattr(snapshot, name) for name in STATE_COLUMNS])


class CraneSimulator:
    """Drives a DynamicsModel with a force profile and records its trajectory"""

    def __init__(
        self,
        params: ModelParameters,
        fixed_step: float = 0.01,
        initial_state: Optional[PhysicalState] = None
    ) -> None:
        """
        Initialize simulator

        Args:
            params: Crane parameters, formulation included
            fixed_step: Integration step handed to update_fixed (s)
            initial_state: State to start from, defaults to rest
        """
        self.params = params
        self.fixed_step = fixed_step
        self.initial_state = initial_state
        self.model = DynamicsModel(params, initial_state)

    def simulate(
        self,
        duration: float = 10.0,
        force_profile: ForceProfile = (0.0, 0.0, 0.0),
        frame_time: Optional[float] = None
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Run simulation from the initial state

        The model is advanced one frame at a time through update_fixed, the way a
        host frame loop would drive it.

        Args:
            duration: Simulated time (s)
            force_profile: Constant (rail, cart, line) forces, or a callable
                returning them for the frame start time
            frame_time: Host frame interval (s), defaults to the fixed step

        Returns:
            Tuple of (time_array, state_history, force_history); state columns
            follow STATE_COLUMNS, force columns are (rail, cart, line)
        """
        validate_positive(duration, "duration")
        frame = frame_time if frame_time is not None else self.fixed_step
        validate_positive(frame, "frame_time")

        self.model.reset(self.initial_state)
        n_frames = int(round(duration / frame))
        t = np.arange(n_frames + 1) * frame
        states = np.zeros((n_frames + 1, len(STATE_COLUMNS)))
        forces = np.zeros((n_frames + 1, 3))

        states[0] = snapshot_row(self.model.get_state())
        forces[0] = self._forces_at(force_profile, 0.0)
        for i in range(1, n_frames + 1):
            rail, cart, line = forces[i - 1]
            snapshot = self.model.update_fixed(self.fixed_step, frame, rail, cart, line)
            states[i] = snapshot_row(snapshot)
            forces[i] = self._forces_at(force_profile, t[i])

        logger.info(
            "Simulated %.2f s with %s: %d frames, %d sub-steps",
            duration, self.params.formulation.name, n_frames, self.model.step_count
        )
        return t, states, forces

    @staticmethod
    def _forces_at(force_profile: ForceProfile, t: float) -> np.ndarray:
        if callable(force_profile):
            return np.asarray(force_profile(t), dtype=float)
        return np.asarray(force_profile, dtype=float)
