"""
Signal analysis: loudness curve, peak detection and tempo estimation.

Pipeline per analysis chunk:
- loudness.smooth_volumes  : samples -> smoothed dB curve
- peaks.detect_peaks       : curve -> interior local maxima above threshold
- tempo.calculate_tempo    : peak spacing + sample rate -> BPM
"""

__all__ = ["loudness", "peaks", "tempo"]
