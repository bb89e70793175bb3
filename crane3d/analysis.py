"""
Swing analysis of recorded trajectories
"""

from typing import Any, Dict
import numpy as np
from scipy.signal import find_peaks

from crane3d.params import ModelParameters
from crane3d.simulator import STATE_COLUMNS

_COLUMN = {name: i for i, name in enumerate(STATE_COLUMNS)}


def count_limit_hits(position: np.ndarray, lower: float, upper: float) -> int:
    """Number of times a position arrives at one of its limits"""
    at_limit = (position <= lower) | (position >= upper)
    if len(at_limit) < 2:
        return 0
    return int(np.sum(at_limit[1:] & ~at_limit[:-1]))


class SwingAnalyzer:
    """Analyzes simulation results for payload swing and end-stop contacts"""

    def __init__(self, params: ModelParameters, settle_tolerance: float = 0.01) -> None:
        """
        Initialize swing analyzer

        Args:
            params: Crane parameters the trajectory was recorded with
            settle_tolerance: Residual swing below which the payload counts as settled (rad)
        """
        self.params = params
        self.settle_tolerance = settle_tolerance
        self.residual_fraction = 0.2  # tail of the run used for residual swing

    def analyze(self, t: np.ndarray, state: np.ndarray) -> Dict[str, Any]:
        """
        Analyze a recorded trajectory

        Args:
            t: Time array
            state: State history [N x len(STATE_COLUMNS)]

        Returns:
            Dictionary with analysis results
        """
        alfa = state[:, _COLUMN["alfa"]]
        beta = state[:, _COLUMN["beta"]]
        line = state[:, _COLUMN["line_length"]]

        # Deflection of the lift-line from the vertical
        deflection = np.arccos(np.clip(np.cos(alfa) * np.cos(beta), -1.0, 1.0))
        swing_max = float(np.max(deflection))
        tail_start = min(int(len(t) * (1.0 - self.residual_fraction)), len(t) - 1)
        residual_swing = float(np.max(deflection[tail_start:]))

        # Period from successive maxima of the dominant swing axis
        dominant = alfa if np.max(np.abs(alfa)) >= np.max(np.abs(beta)) else beta
        amplitude = float(np.max(np.abs(dominant)))
        swing_period = float("nan")
        if amplitude > 0.0:
            peaks, _ = find_peaks(dominant, prominence=0.05 * amplitude)
            if len(peaks) >= 2:
                swing_period = float(np.mean(np.diff(t[peaks])))

        g = self.params.gravity
        mean_line = float(np.mean(line))
        natural_period = 2.0 * np.pi * np.sqrt(mean_line / g) if g > 0 else float("nan")

        return {
            "alfa_max": float(np.max(np.abs(alfa))),
            "beta_max": float(np.max(np.abs(beta))),
            "swing_max": swing_max,
            "residual_swing": residual_swing,
            "swing_period": swing_period,
            "natural_period": float(natural_period),
            "rail_limit_hits": count_limit_hits(
                state[:, _COLUMN["rail_offset"]], self.params.rail_limit_min, self.params.rail_limit_max
            ),
            "cart_limit_hits": count_limit_hits(
                state[:, _COLUMN["cart_offset"]], self.params.cart_limit_min, self.params.cart_limit_max
            ),
            "line_limit_hits": count_limit_hits(
                line, self.params.line_limit_min, self.params.line_limit_max
            ),
            "is_settled": residual_swing < self.settle_tolerance,
        }
