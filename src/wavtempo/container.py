"""
WAV container access: header decoding and sample demultiplexing.

Only the canonical 44-byte RIFF/WAVE header is understood:
- Bytes [0, 4) must be "RIFF", bytes [8, 12) must be "WAVE"
- Channel count, sample rate and bit depth are read from fixed offsets
- Sample data starts right after the header, little-endian signed 16-bit,
  interleaved per channel

Chunk-based headers (LIST/fact chunks, extensible fmt) are not parsed.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

HEADER_SIZE = 44
RIFF_MAGIC = b"RIFF"
WAVE_MAGIC = b"WAVE"

SAMPLE_WIDTH = 2
SUPPORTED_BITS_PER_SAMPLE = 16

# Must stay a multiple of SAMPLE_WIDTH
READ_BLOCK_SIZE = 64 * 1024

_SAMPLE_FORMAT = struct.Struct("<h")


class WavError(Exception):
    """Base class for WAV container errors."""
    pass


class MalformedContainerError(WavError):
    """Raised when the header is not a usable RIFF/WAVE header."""
    pass


class UnsupportedSampleFormatError(WavError):
    """Raised when the sample encoding cannot be decoded (bit depth != 16)."""
    pass


@dataclass(frozen=True)
class HeaderField:
    """A little-endian value stored at a fixed byte offset of the header."""

    name: str
    offset: int
    fmt: str  # struct format, e.g. "<H"

    def extract(self, buffer: bytes) -> int:
        return struct.unpack_from(self.fmt, buffer, self.offset)[0]


WAV_HEADER_FIELDS: Tuple[HeaderField, ...] = (
    HeaderField("channels", 22, "<H"),
    HeaderField("rate", 24, "<I"),
    HeaderField("bits_per_sample", 34, "<H"),
)


@dataclass(frozen=True)
class WavHeader:
    """Format fields recovered from the header."""

    channels: int
    bits_per_sample: int
    rate: int


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, retrying short reads until EOF."""
    buffer = b""
    while len(buffer) < size:
        chunk = stream.read(size - len(buffer))
        if not chunk:
            break
        buffer += chunk
    return buffer


def decode_header(
    stream: BinaryIO, fields: Sequence[HeaderField] = WAV_HEADER_FIELDS
) -> WavHeader:
    """
    Read and validate a 44-byte WAV header.

    Args:
        stream: Binary stream positioned at the start of the file
        fields: Field layout used to extract channels, rate and bit depth

    Returns:
        WavHeader with the decoded values

    Raises:
        MalformedContainerError: Header too short or magic markers missing
    """
    buffer = _read_exact(stream, HEADER_SIZE)

    if len(buffer) < HEADER_SIZE:
        raise MalformedContainerError(
            f"truncated header: expected {HEADER_SIZE} bytes, got {len(buffer)}"
        )

    if buffer[0:4] != RIFF_MAGIC or buffer[8:12] != WAVE_MAGIC:
        raise MalformedContainerError("not a wav file")

    values = {field.name: field.extract(buffer) for field in fields}

    return WavHeader(
        channels=values["channels"],
        bits_per_sample=values["bits_per_sample"],
        rate=values["rate"],
    )


def demultiplex(
    stream: BinaryIO,
    channels: int,
    dst: Optional[List[List[int]]] = None,
) -> List[List[int]]:
    """
    Distribute interleaved 16-bit samples round-robin into per-channel lists.

    The n-th sample read from the stream goes to dst[n % channels]. Reading
    stops at end of stream; a trailing odd byte is ignored.

    Args:
        stream: Binary stream positioned at the first sample
        channels: Number of interleaved channels
        dst: Optional per-channel lists to append to (one per channel)

    Returns:
        The per-channel lists (dst if given)
    """
    if channels < 1:
        raise ValueError(f"channels must be positive, got {channels}")

    if dst is None:
        dst = [[] for _ in range(channels)]
    elif len(dst) != channels:
        raise ValueError(f"expected {channels} channel lists, got {len(dst)}")

    total = 0
    carry = b""

    while True:
        block = stream.read(READ_BLOCK_SIZE)
        if not block:
            break

        if carry:
            block = carry + block

        usable = len(block) - (len(block) % SAMPLE_WIDTH)
        carry = block[usable:]

        for (sample,) in _SAMPLE_FORMAT.iter_unpack(block[:usable]):
            dst[total % channels].append(sample)
            total += 1

    if carry:
        logger.debug(f"Ignoring {len(carry)} trailing byte(s) at end of stream")

    logger.debug(f"Demultiplexed {total} samples into {channels} channel(s)")
    return dst


class Wav:
    """Read-only handle on a 16-bit PCM WAV file."""

    def __init__(self, path: Path, header: WavHeader):
        self._path = path
        self._header = header

    @classmethod
    def open(cls, path: Union[str, Path]) -> "Wav":
        """
        Open a WAV file and validate its header.

        Raises:
            OSError: File missing or unreadable
            MalformedContainerError: Not a usable WAV header
        """
        path = Path(path)

        with open(path, "rb") as f:
            header = decode_header(f)

        if header.channels == 0:
            raise MalformedContainerError(f"{path}: header declares zero channels")
        if header.rate == 0:
            raise MalformedContainerError(f"{path}: header declares zero sample rate")

        logger.debug(
            f"Opened {path.name}: {header.channels} ch, {header.rate} Hz, "
            f"{header.bits_per_sample} bit"
        )
        return cls(path, header)

    def read_samples(self, dst: Optional[List[List[int]]] = None) -> List[List[int]]:
        """
        Read all samples, one list per channel.

        Opens an independent stream and skips the header before decoding.

        Args:
            dst: Optional per-channel lists to fill (len must equal channels)

        Returns:
            Per-channel sample lists

        Raises:
            OSError: Read failure
            UnsupportedSampleFormatError: Bit depth is not 16
        """
        if self.bits_per_sample != SUPPORTED_BITS_PER_SAMPLE:
            raise UnsupportedSampleFormatError(
                f"{self._path}: {self.bits_per_sample}-bit samples are not supported "
                f"(only {SUPPORTED_BITS_PER_SAMPLE}-bit)"
            )

        with open(self._path, "rb") as f:
            f.seek(HEADER_SIZE)
            return demultiplex(f, self.channels, dst)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def rate(self) -> int:
        return self._header.rate

    @property
    def channels(self) -> int:
        return self._header.channels

    @property
    def bits_per_sample(self) -> int:
        return self._header.bits_per_sample

    def __repr__(self) -> str:
        return (
            f"Wav(path={str(self._path)!r}, channels={self.channels}, "
            f"rate={self.rate}, bits_per_sample={self.bits_per_sample})"
        )


def open_wav(path: Union[str, Path]) -> Wav:
    """Shorthand for Wav.open(path)."""
    return Wav.open(path)
