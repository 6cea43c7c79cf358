"""Filter design and PCM format constants."""


class FilterConstants:
    """Default design of the windowed-sinc interpolation table."""

    # Table resolution: 2**9 = 512 entries per zero-crossing
    RESOLUTION_BITS = 9

    # Zero-crossings of the sinc kernel kept on each side of centre
    ZERO_CROSSINGS = 5

    # Stopband attenuation used to pick the Kaiser shape
    STOPBAND_ATTENUATION_DB = 80.0

    # Bessel series stops once a term drops below this
    BESSEL_EPSILON = 1.0e-21
    BESSEL_MAX_TERMS = 1000


class PCMConstants:
    """16-bit PCM sample format."""

    SAMPLE_WIDTH = 2  # bytes
    SAMPLE_MIN = -32768
    SAMPLE_MAX = 32767
    SUBTYPE = "PCM_16"

    # Largest output rate the CLI accepts (C int range)
    MAX_RATE = 2**31 - 1
