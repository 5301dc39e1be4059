"""
Loudness curve: per-sample dB magnitude smoothed by a trailing moving average.

- Sample magnitude: 20 * log10(|x|), with 0 -> 0.0
- -32768 is clamped to the magnitude of 32767 (no 16-bit positive counterpart)
- Window is causal: output i averages the last min(W, i + 1) magnitudes
"""

import logging
import math
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)

SAMPLE_MIN = -32768
SAMPLE_MAX = 32767

DEFAULT_WINDOW_SIZE = 100


def calculate_sample_volume(sample: int) -> float:
    """Loudness of a single 16-bit sample in dB (0 for silence)."""
    if sample == 0:
        return 0.0
    if sample == SAMPLE_MIN:
        sample = SAMPLE_MAX
    return math.log10(abs(sample)) * 20.0


# Indexed by sample - SAMPLE_MIN; same values as calculate_sample_volume
_VOLUME_TABLE = np.array(
    [calculate_sample_volume(s) for s in range(SAMPLE_MIN, SAMPLE_MAX + 1)],
    dtype=np.float64,
)


def sample_volumes(samples: Sequence[int]) -> np.ndarray:
    """Vectorized calculate_sample_volume over a whole sequence."""
    indices = np.asarray(samples, dtype=np.int32) - SAMPLE_MIN
    return _VOLUME_TABLE[indices]


def smooth_volumes(samples: Sequence[int], window_size: int) -> List[float]:
    """
    Smooth per-sample loudness with a trailing moving average.

    Uses a running sum: each step subtracts the magnitude leaving the window,
    then adds the incoming one. With W=1 the output is exactly the
    per-sample magnitude.

    Args:
        samples: Signed 16-bit samples
        window_size: Averaging window W (>= 1)

    Returns:
        Loudness curve, same length as samples

    Raises:
        ValueError: window_size < 1
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")

    volumes = sample_volumes(samples).tolist()
    smoothed = []
    total = 0.0

    for i, volume in enumerate(volumes):
        if i >= window_size:
            total -= volumes[i - window_size]
        total += volume

        current_window = i + 1 if i + 1 < window_size else window_size
        smoothed.append(total / current_window)

    logger.debug(f"Smoothed {len(smoothed)} samples (window={window_size})")
    return smoothed
