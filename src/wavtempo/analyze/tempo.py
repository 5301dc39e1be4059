"""
Tempo estimation from loudness peak spacing.

BPM = (sample_rate / mean_peak_gap) * 60. No outlier rejection or
half/double-time correction is applied. Fewer than two peaks gives 0.0.

Long signals are cut into fixed-size chunks (one second by default) and
each chunk is estimated independently, so chunks can be mapped in parallel.
"""

import logging
from functools import partial
from typing import List, Optional, Sequence

import numpy as np

from ..parallel import Mapper, sequential_map
from .loudness import DEFAULT_WINDOW_SIZE, smooth_volumes
from .peaks import detect_peaks

logger = logging.getLogger(__name__)


def calculate_average_interval(peaks: Sequence[int]) -> Optional[float]:
    """
    Mean distance in samples between consecutive peaks.

    Returns:
        Mean gap, or None when fewer than two peaks are given
    """
    if len(peaks) < 2:
        return None

    total_interval = int(np.diff(np.asarray(peaks, dtype=np.int64)).sum())
    return total_interval / (len(peaks) - 1)


def calculate_tempo(peaks: Sequence[int], rate: int) -> float:
    """Convert peak spacing into beats per minute (0.0 if underdetermined)."""
    interval = calculate_average_interval(peaks)
    if interval is None:
        return 0.0
    return (rate / interval) * 60.0


def process_chunk(
    samples: Sequence[int],
    rate: int,
    threshold: float,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> float:
    """
    Estimate the tempo of one chunk of a single channel.

    Args:
        samples: Signed 16-bit samples of one channel
        rate: Sample rate in Hz
        threshold: Minimum smoothed loudness (dB) for a peak
        window_size: Smoothing window in samples

    Returns:
        Tempo in BPM, 0.0 when fewer than two peaks are found
    """
    volumes = smooth_volumes(samples, window_size)
    peaks = detect_peaks(volumes, threshold)
    return calculate_tempo(peaks, rate)


def chunk_samples(samples: Sequence[int], chunk_size: int) -> List[Sequence[int]]:
    """Cut samples into consecutive chunks; the last one may be shorter."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    return [samples[i:i + chunk_size] for i in range(0, len(samples), chunk_size)]


def estimate_tempo(
    samples: Sequence[int],
    rate: int,
    threshold: float,
    chunk_size: Optional[int] = None,
    window_size: int = DEFAULT_WINDOW_SIZE,
    mapper: Mapper = sequential_map,
) -> List[float]:
    """
    Per-chunk tempo estimates for one channel.

    Args:
        samples: Signed 16-bit samples of one channel
        rate: Sample rate in Hz
        threshold: Minimum smoothed loudness (dB) for a peak
        chunk_size: Samples per chunk (default: rate, i.e. one second)
        window_size: Smoothing window in samples
        mapper: Work distribution strategy for the chunks

    Returns:
        One BPM value per chunk, in chunk order
    """
    if chunk_size is None:
        chunk_size = rate

    chunks = chunk_samples(samples, chunk_size)
    logger.debug(f"Estimating tempo over {len(chunks)} chunk(s) of {chunk_size} samples")

    worker = partial(process_chunk, rate=rate, threshold=threshold, window_size=window_size)
    tempos = mapper(worker, chunks)

    detected = [t for t in tempos if t > 0.0]
    if detected:
        logger.info(
            f"Tempo: {len(detected)}/{len(tempos)} chunks with peaks, "
            f"range {min(detected):.1f} - {max(detected):.1f} BPM"
        )
    else:
        logger.info(f"Tempo: no chunk out of {len(tempos)} had two or more peaks")

    return tempos
