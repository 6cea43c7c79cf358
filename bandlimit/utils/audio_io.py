"""Audio file reading and writing through libsndfile (soundfile)."""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import soundfile as sf
import structlog

from bandlimit.core.constants import PCMConstants
from bandlimit.errors import AllocationError, AudioIOError


logger = structlog.get_logger(__name__)


@dataclass
class SampleBuffer:
    """Decoded PCM16 audio.

    Fields:
        samples: int16 array shaped (frames, channels)
        sample_rate: Sample rate in Hz
        container: libsndfile container format ("WAV", "FLAC", ...)
    """

    samples: np.ndarray
    sample_rate: int
    container: str = "WAV"

    @property
    def frames(self) -> int:
        return self.samples.shape[0]

    @property
    def channels(self) -> int:
        return self.samples.shape[1]

    def first_channel(self) -> np.ndarray:
        """Copy of channel 0 as a 1-D array."""
        return self.samples[:, 0].copy()


def read_audio(path: str | Path) -> SampleBuffer:
    """Decode an audio file into 16-bit PCM.

    Args:
        path: Input file in any container libsndfile can read

    Returns:
        SampleBuffer with all frames loaded

    Raises:
        AudioIOError: If the file cannot be opened or decoded
        AllocationError: If the sample buffer cannot be allocated
    """
    path = str(path)

    try:
        with sf.SoundFile(path) as f:
            samples = f.read(dtype="int16", always_2d=True)
            buffer = SampleBuffer(samples=samples, sample_rate=f.samplerate, container=f.format)
    except MemoryError as e:
        raise AllocationError(f"could not allocate input buffer for {path}") from e
    except (sf.SoundFileError, OSError) as e:
        raise AudioIOError(f"could not open input file: {path}", path) from e

    logger.info(
        "Read audio file",
        path=path,
        container=buffer.container,
        sample_rate=buffer.sample_rate,
        channels=buffer.channels,
        frames=buffer.frames
    )

    return buffer


def write_audio(path: str | Path, samples: np.ndarray, sample_rate: int, container: str = "WAV") -> None:
    """Encode mono 16-bit PCM into an audio file.

    Args:
        path: Output file path
        samples: 1-D int16 samples
        sample_rate: Sample rate in Hz
        container: libsndfile container format, normally the input's

    Raises:
        AudioIOError: If the container cannot hold 16-bit PCM or writing fails
    """
    path = str(path)

    if not sf.check_format(container, PCMConstants.SUBTYPE):
        raise AudioIOError(f"could not open output file: {path} ({container} cannot hold 16-bit PCM)", path)

    try:
        with sf.SoundFile(
            path,
            mode="w",
            samplerate=sample_rate,
            channels=1,
            subtype=PCMConstants.SUBTYPE,
            format=container
        ) as f:
            f.write(np.asarray(samples, dtype=np.int16))
    except (sf.SoundFileError, OSError) as e:
        raise AudioIOError(f"could not open output file: {path}", path) from e

    logger.info(
        "Wrote audio file",
        path=path,
        container=container,
        sample_rate=sample_rate,
        frames=len(samples)
    )
