"""
Peak detection on a loudness curve.

A peak is an interior index i (1 <= i <= n - 2) with
curve[i] > threshold, curve[i] > curve[i - 1] and curve[i] > curve[i + 1].
Plateaus are not peaks; the first and last index are never candidates.
"""

import logging
from functools import partial
from typing import List, Sequence, Tuple

import numpy as np

from ..parallel import Mapper, sequential_map

logger = logging.getLogger(__name__)


def _split_range(start: int, stop: int, partitions: int) -> List[Tuple[int, int]]:
    """Split [start, stop) into up to `partitions` contiguous ordered ranges."""
    length = stop - start
    partitions = max(1, min(partitions, length))
    step, extra = divmod(length, partitions)

    ranges = []
    lo = start
    for p in range(partitions):
        hi = lo + step + (1 if p < extra else 0)
        ranges.append((lo, hi))
        lo = hi
    return ranges


def _peaks_in_range(volumes: np.ndarray, threshold: float, bounds: Tuple[int, int]) -> List[int]:
    lo, hi = bounds
    current = volumes[lo:hi]
    mask = (
        (current > threshold)
        & (current > volumes[lo - 1:hi - 1])
        & (current > volumes[lo + 1:hi + 1])
    )
    return (np.flatnonzero(mask) + lo).tolist()


def detect_peaks(
    volumes: Sequence[float],
    threshold: float,
    mapper: Mapper = sequential_map,
    partitions: int = 1,
) -> List[int]:
    """
    Find strict local maxima above threshold.

    The interior index range is cut into ordered partitions which the
    mapper may evaluate concurrently; results are concatenated in
    partition order.

    Args:
        volumes: Loudness curve
        threshold: Minimum loudness (exclusive) for a peak
        mapper: Work distribution strategy
        partitions: Number of index ranges to hand to the mapper

    Returns:
        Ascending list of peak indices
    """
    curve = np.asarray(volumes, dtype=np.float64)
    if curve.size < 3:
        return []

    ranges = _split_range(1, curve.size - 1, partitions)
    results = mapper(partial(_peaks_in_range, curve, threshold), ranges)

    peaks = [index for chunk in results for index in chunk]
    logger.debug(f"Detected {len(peaks)} peaks above {threshold} in {curve.size} values")
    return peaks
