"""Kaiser window primitives for the interpolation filter."""

import math

from bandlimit.core.constants import FilterConstants


def bessel_i0(x: float) -> float:
    """Zeroth-order modified Bessel function of the first kind.

    Sums the power series ``sum((x/2)**(2i) / (i!)**2)`` until the next term
    falls below ``FilterConstants.BESSEL_EPSILON``. Each term is derived from
    the previous one, so ``i!`` is never formed explicitly.

    Args:
        x: Real argument

    Returns:
        I0(x), always >= 1 for finite x

    Raises:
        OverflowError: If I0(x) does not fit in a float (|x| beyond ~700)
    """
    half = x / 2.0
    i0 = 1.0
    term = 1.0

    for i in range(1, FilterConstants.BESSEL_MAX_TERMS + 1):
        term *= (half / i) ** 2
        if term < FilterConstants.BESSEL_EPSILON:
            break
        i0 += term
        if math.isinf(i0):
            raise OverflowError(f"Bessel series overflowed for x={x}")

    return i0


def kaiser(alpha: float, M: float, n: float) -> float:
    """Kaiser window of length M+1 and shape alpha, evaluated at n.

    Returns 0 outside ``[0, M]``. ``alpha == 0`` is the rectangular window.
    """
    if n < 0 or n > M:
        return 0.0

    ratio = 2.0 * n / M - 1.0
    return bessel_i0(alpha * math.sqrt(max(0.0, 1.0 - ratio * ratio))) / bessel_i0(alpha)


def kaiser_alpha(db: float) -> float:
    """Kaiser shape parameter for a stopband attenuation of ``db`` decibels.

    Empirical rule from Kaiser's design formulas (same as MATLAB's kaiser()).
    """
    if db > 50.0:
        return 0.1102 * (db - 8.7)
    elif db >= 21.0:
        return 0.5842 * (db - 21.0) ** 0.4 + 0.07886 * (db - 21.0)
    else:
        return 0.0
