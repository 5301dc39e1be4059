"""Shared fixtures: build small PCM WAV files on disk."""

import struct

import pytest


def build_wav_bytes(samples, channels=1, rate=8000, bits_per_sample=16):
    """Canonical 44-byte RIFF/WAVE header followed by little-endian int16 samples."""
    data = struct.pack(f"<{len(samples)}h", *samples)
    block_align = channels * bits_per_sample // 8
    header = struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + len(data),
        b"WAVE",
        b"fmt ",
        16,
        1,  # PCM
        channels,
        rate,
        (rate * block_align) & 0xFFFFFFFF,
        block_align & 0xFFFF,
        bits_per_sample,
        b"data",
        len(data),
    )
    return header + data


@pytest.fixture
def write_wav(tmp_path):
    """Factory fixture: write_wav(samples, channels=1, rate=8000, ...) -> Path."""
    counter = {"n": 0}

    def _write(samples, channels=1, rate=8000, bits_per_sample=16, trailing=b""):
        counter["n"] += 1
        path = tmp_path / f"test_{counter['n']}.wav"
        path.write_bytes(build_wav_bytes(samples, channels, rate, bits_per_sample) + trailing)
        return path

    return _write
