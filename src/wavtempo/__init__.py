# wavtempo: loudness curve and tempo estimation for 16-bit PCM WAV files
# Package: src.wavtempo

__version__ = "0.1.0"
__author__ = "wavtempo Contributors"
__description__ = "Loudness smoothing and peak-based BPM estimation for WAV audio"

# Module structure:
#   - wavtempo.container : WAV header decoding and sample demultiplexing
#   - wavtempo.analyze   : loudness smoothing, peak detection, tempo estimation
#   - wavtempo.parallel  : pluggable work distribution (sequential / threads / processes)
#   - wavtempo.config    : Configuration management

from .container import (
    MalformedContainerError,
    UnsupportedSampleFormatError,
    Wav,
    WavError,
    open_wav,
)

__all__ = [
    "MalformedContainerError",
    "UnsupportedSampleFormatError",
    "Wav",
    "WavError",
    "open_wav",
]
