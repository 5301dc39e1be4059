#!/usr/bin/env python3
"""
Analyze WAV Tempo and Loudness Script

Usage:
  python src/scripts/analyze_wav.py path/to/file.wav [--config configs/wavtempo.toml]

- Reads one channel of a 16-bit PCM WAV file
- Prints one BPM estimate per chunk (default: one second)
- Prints the smoothed loudness curve of the whole channel
"""

import sys
import argparse
import logging
from pathlib import Path

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wavtempo.config import Config, ConfigError
from wavtempo.container import Wav, WavError
from wavtempo.parallel import get_mapper
from wavtempo.analyze.loudness import smooth_volumes
from wavtempo.analyze.tempo import estimate_tempo

logger = logging.getLogger(__name__)


def _parse_args(argv):
    parser = argparse.ArgumentParser(description="Estimate tempo and loudness of a WAV file")
    parser.add_argument("path", help="16-bit PCM WAV file")
    parser.add_argument("--config", default=None, help="Path to wavtempo.toml")
    parser.add_argument(
        "--no-volumes",
        action="store_true",
        help="Skip printing the smoothed loudness curve",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def analyze(path: str, config: Config, show_volumes: bool = True) -> int:
    """Run the analysis pipeline on one file and print results to stdout."""
    analysis = config["analysis"]
    parallel = config["parallel"]

    wav = Wav.open(path)
    logger.info(f"Opened {wav}")

    channel = analysis["channel"]
    if channel >= wav.channels:
        logger.error(f"Channel {channel} requested but file has {wav.channels} channel(s)")
        return 1

    samples = wav.read_samples()[channel]
    logger.info(f"Read {len(samples)} samples from channel {channel}")

    chunk_size = max(1, round(wav.rate * analysis["chunk_seconds"]))
    mapper = get_mapper(parallel["backend"], parallel["max_workers"])

    tempos = estimate_tempo(
        samples,
        wav.rate,
        analysis["threshold"],
        chunk_size=chunk_size,
        window_size=analysis["window_size"],
        mapper=mapper,
    )
    for tempo in tempos:
        print(f"BPM: {tempo:.2f}")

    if show_volumes:
        for volume in smooth_volumes(samples, analysis["window_size"]):
            print(f"Volume(dB): {volume:.2f}")

    return 0


def main(argv=None):
    """Main analysis entrypoint."""
    args = _parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
    )

    try:
        config = Config.load(args.config)
        logger.info(f"Config loaded: {config}")
        return analyze(args.path, config, show_volumes=not args.no_volumes)

    except KeyboardInterrupt:
        logger.warning("Analysis interrupted by user")
        return 130
    except (ConfigError, WavError, OSError) as e:
        logger.error(f"Analysis failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
