"""Unit tests for domain/metrics (summary and profit analysis).

Tests verify:
1. Summary counts and the scratch convention
2. Expectancy, R-multiples and efficiency
3. Missing inputs are excluded, never zero-filled
4. Fixed-width histograms
"""

import pytest

from trade_analytics.domain.metrics import (
    analyze_profit,
    efficiency,
    expectancy,
    histogram,
    r_multiple,
    summarize,
)

from factories import with_net


# =============================================================================
# Summary
# =============================================================================

class TestSummary:
    """Tests for summarize()."""

    def test_empty(self):
        """Every ratio is undefined on an empty set."""
        summary = summarize([])
        assert summary.trade_count == 0
        assert summary.win_rate is None
        assert summary.avg_win is None
        assert summary.avg_net is None
        assert summary.profit_factor is None

    def test_scratch_excluded_from_win_rate(self):
        """Scratches count as trades but not in the win-rate denominator."""
        summary = summarize([with_net(10.0), with_net(-5.0), with_net(0.0)])
        assert summary.trade_count == 3
        assert summary.scratch_count == 1
        assert summary.win_rate == pytest.approx(0.5)

    def test_largest(self):
        """Extremes of net proceeds."""
        summary = summarize([with_net(10.0), with_net(25.0), with_net(-5.0), with_net(-8.0)])
        assert summary.largest_win == pytest.approx(25.0)
        assert summary.largest_loss == pytest.approx(-8.0)
        assert summary.gross_losses == pytest.approx(-13.0)


# =============================================================================
# Expectancy
# =============================================================================

class TestExpectancy:
    """Tests for expectancy()."""

    def test_mixed(self):
        """0.5 × 30 - 0.5 × 10 = 10."""
        assert expectancy([with_net(30.0), with_net(-10.0)]) == pytest.approx(10.0)

    def test_wins_only(self):
        """Without losses the loss term is zero."""
        assert expectancy([with_net(4.0), with_net(6.0)]) == pytest.approx(5.0)

    def test_undefined(self):
        """No decisive trades gives None."""
        assert expectancy([]) is None
        assert expectancy([with_net(0.0)]) is None


# =============================================================================
# R-Multiples and Efficiency
# =============================================================================

class TestPerTrade:
    """Tests for r_multiple() and efficiency()."""

    def test_r_multiple(self):
        """net / risk."""
        assert r_multiple(with_net(150.0, risk=50.0)) == pytest.approx(3.0)
        assert r_multiple(with_net(-25.0, risk=50.0)) == pytest.approx(-0.5)

    def test_r_multiple_missing(self):
        """Absent or non-positive risk has no R."""
        assert r_multiple(with_net(10.0)) is None
        assert r_multiple(with_net(10.0, risk=0.0)) is None

    def test_efficiency(self):
        """net / MFE."""
        assert efficiency(with_net(50.0, mfe=200.0)) == pytest.approx(0.25)

    def test_efficiency_not_clamped(self):
        """Values above 1 are reported as-is."""
        assert efficiency(with_net(300.0, mfe=200.0)) == pytest.approx(1.5)

    def test_efficiency_missing(self):
        """Absent MFE has no efficiency."""
        assert efficiency(with_net(10.0)) is None


# =============================================================================
# Histograms
# =============================================================================

class TestHistogram:
    """Tests for histogram()."""

    def test_edges_aligned_to_width(self):
        """Edges are multiples of the width spanning the data."""
        result = histogram([-0.5, 0.2, 1.4], 1.0)
        assert result.edges == (-1.0, 0.0, 1.0, 2.0)
        assert result.counts == (1, 1, 1)

    def test_value_on_edge(self):
        """A value on an edge falls in the bin it starts."""
        result = histogram([1.0, 1.2], 0.5)
        assert result.edges[0] == 1.0
        assert result.counts[0] == 2
        assert result.total == 2

    def test_empty(self):
        """No values, no bins."""
        assert histogram([], 0.5).edges == ()

    def test_wide_spread_caps_bins(self):
        """Far-apart values widen the bins instead of allocating millions."""
        result = histogram([0.5, 1_000_000.0], 0.1, max_bins=50)
        assert len(result.counts) <= 50
        assert result.total == 2
        assert result.edges[0] <= 0.5
        assert result.edges[-1] >= 1_000_000.0

    def test_default_cap(self):
        """The default cap applies without an explicit max_bins."""
        result = histogram([-250.0, 0.3, 4_000.0], 0.1)
        assert len(result.counts) <= 200
        assert result.total == 3

    def test_bad_max_bins(self):
        """At least two bins are needed to span arbitrary data."""
        with pytest.raises(ValueError, match="max_bins must be at least 2"):
            histogram([1.0], 0.5, max_bins=1)

    def test_bad_width(self):
        """Bin width must be positive."""
        with pytest.raises(ValueError, match="bin_width must be positive"):
            histogram([1.0], 0)


# =============================================================================
# analyze_profit
# =============================================================================

class TestAnalyzeProfit:
    """Tests for the combined analysis."""

    def test_partial_annotations(self):
        """Only trades with risk/MFE enter the distributions."""
        trades = [
            with_net(100.0, risk=50.0, mfe=200.0),
            with_net(-50.0, risk=50.0),
            with_net(20.0),
        ]
        result = analyze_profit(trades)

        assert list(result.r_multiples.values()) == pytest.approx([2.0, -1.0])
        assert result.missing_risk == 1
        assert result.r_histogram.total == 2
        assert result.average_r == pytest.approx(0.5)

        assert len(result.efficiencies) == 1
        assert result.missing_mfe == 2
        assert result.average_efficiency == pytest.approx(0.5)

    def test_no_annotations(self):
        """Without annotations the distributions are empty, not zero."""
        result = analyze_profit([with_net(10.0), with_net(-5.0)])
        assert result.r_multiples == {}
        assert result.r_histogram.counts == ()
        assert result.average_r is None
        assert result.expectancy == pytest.approx(2.5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
