"""Tests for the windowed-sinc filter table."""

import math

import numpy as np
import pytest

from bandlimit.config import FilterConfig
from bandlimit.core.filter_table import FilterTable, build_filter_table
from bandlimit.core.kaiser import kaiser_alpha
from bandlimit.errors import AllocationError


class TestBuildFilterTable:
    """Test table construction invariants."""

    @pytest.mark.parametrize(
        "alpha,length,per_crossing",
        [(0.0, 41, 8), (kaiser_alpha(80.0), 2561, 512), (3.0, 101, 20)]
    )
    def test_table_invariants(self, alpha: float, length: int, per_crossing: int) -> None:
        """Centre is 1, differences are forward differences, last is 0."""
        table = build_filter_table(alpha, length, per_crossing, (length - 1) // per_crossing)

        assert len(table) == length
        assert len(table.hb) == length
        assert table.h[0] == 1.0
        assert table.hb[length - 1] == 0.0
        for i in range(length - 1):
            assert table.hb[i] == table.h[i + 1] - table.h[i]

    def test_rectangular_window_is_plain_sinc(self) -> None:
        """alpha=0 leaves the sinc untouched."""
        table = build_filter_table(0.0, 33, 8, 4)

        x = np.arange(1, 33) * math.pi / 8
        np.testing.assert_allclose(table.h[1:], np.sin(x) / x, rtol=1e-12)

    def test_zero_crossings(self) -> None:
        """Every L-th entry after the centre is a sinc zero."""
        table = build_filter_table(kaiser_alpha(80.0), 5 * 64 + 1, 64, 5)

        for k in range(1, 6):
            assert abs(table.h[k * 64]) < 1e-12

    def test_window_tapers_to_edge(self) -> None:
        """Window damps the outer lobes of the sinc."""
        alpha = kaiser_alpha(80.0)
        windowed = build_filter_table(alpha, 161, 32, 5)
        plain = build_filter_table(0.0, 161, 32, 5)

        # Mid-lobe between the 4th and 5th zero-crossings
        assert abs(windowed.h[144]) < abs(plain.h[144])

    def test_tables_are_read_only(self) -> None:
        """Coefficients cannot be modified after construction."""
        table = build_filter_table(2.0, 17, 4, 4)

        with pytest.raises(ValueError):
            table.h[1] = 0.0
        with pytest.raises(ValueError):
            table.hb[1] = 0.0

    def test_invalid_parameters(self) -> None:
        """Degenerate tables are rejected."""
        with pytest.raises(ValueError):
            build_filter_table(1.0, 1, 4, 1)

        with pytest.raises(ValueError):
            build_filter_table(1.0, 17, 0, 4)


class TestFilterTableDesign:
    """Test building tables from a filter configuration."""

    def test_default_design(self, filter_config: FilterConfig) -> None:
        """512 entries per crossing, 5 crossings, 2561 entries."""
        table = FilterTable.design(filter_config)

        assert table.samples_per_crossing == 512
        assert table.zero_crossings == 5
        assert len(table) == 512 * 5 + 1
        assert table.h[0] == 1.0
        assert table.hb[-1] == 0.0

    def test_custom_design(self) -> None:
        """Resolution and crossings follow the config."""
        config = FilterConfig(stopband_attenuation_db=60.0, zero_crossings=3, resolution_bits=4)
        table = FilterTable.design(config)

        assert table.samples_per_crossing == 16
        assert table.zero_crossings == 3
        assert len(table) == 49


class TestAllocationFailure:
    """Test out-of-memory handling while building tables."""

    def test_table_allocation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """MemoryError becomes AllocationError."""

        def fail(*args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(np, "fromiter", fail)

        with pytest.raises(AllocationError, match="filter table"):
            build_filter_table(1.0, 17, 4, 4)
