"""Windowed-sinc interpolation table."""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import structlog

from bandlimit.core.kaiser import kaiser, kaiser_alpha
from bandlimit.errors import AllocationError

if TYPE_CHECKING:
    from bandlimit.config import FilterConfig


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FilterTable:
    """Right half of a symmetric Kaiser-windowed sinc kernel.

    Fields:
        h: Filter coefficients, h[0] is the kernel centre (1.0)
        hb: Forward differences, hb[i] = h[i+1] - h[i], last entry 0
        samples_per_crossing: Table entries per zero-crossing (L)
        zero_crossings: Zero-crossings covered by the table (N_z)
    """

    h: np.ndarray
    hb: np.ndarray
    samples_per_crossing: int
    zero_crossings: int

    def __len__(self) -> int:
        return len(self.h)

    @classmethod
    def design(cls, config: "FilterConfig") -> "FilterTable":
        """Build the table described by a filter configuration.

        Args:
            config: Filter design parameters

        Returns:
            FilterTable of length L * N_z + 1
        """
        alpha = kaiser_alpha(config.stopband_attenuation_db)

        logger.debug(
            "Designing filter table",
            stopband_db=config.stopband_attenuation_db,
            alpha=alpha,
            samples_per_crossing=config.samples_per_crossing,
            zero_crossings=config.zero_crossings,
            length=config.table_length
        )

        return build_filter_table(
            alpha,
            config.table_length,
            config.samples_per_crossing,
            config.zero_crossings
        )


def build_filter_table(
    alpha: float,
    length: int,
    samples_per_crossing: int,
    zero_crossings: int
) -> FilterTable:
    """Build half of a Kaiser-windowed sinc spanning (length - 1) * 2 samples.

    Args:
        alpha: Kaiser shape parameter
        length: Number of table entries
        samples_per_crossing: Table entries per zero-crossing
        zero_crossings: Zero-crossings represented, recorded on the table

    Returns:
        FilterTable with read-only coefficient and difference arrays

    Raises:
        ValueError: If length or samples_per_crossing is not positive
        AllocationError: If either table cannot be allocated
    """
    if length < 2:
        raise ValueError(f"Table length must be at least 2, got {length}")
    if samples_per_crossing <= 0:
        raise ValueError(f"Samples per crossing must be positive, got {samples_per_crossing}")

    M = (length - 1) * 2

    try:
        h = np.fromiter(
            (kaiser(alpha, M, length - i - 1) for i in range(length)),
            dtype=np.float64,
            count=length
        )
        hb = np.zeros(length, dtype=np.float64)
    except MemoryError as e:
        raise AllocationError(f"could not allocate filter table of length {length}") from e

    x = np.arange(1, length, dtype=np.float64) * math.pi / samples_per_crossing
    h[1:] *= np.sin(x) / x
    h[0] = 1.0

    hb[:-1] = np.diff(h)

    h.flags.writeable = False
    hb.flags.writeable = False

    return FilterTable(
        h=h,
        hb=hb,
        samples_per_crossing=samples_per_crossing,
        zero_crossings=zero_crossings
    )
