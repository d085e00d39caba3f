"""Tests for ATR."""

import pytest

from pandas_ta_stream import ATR, MAType


class TestATR:
    """Average true range."""

    def test_first_bar_uses_high_low(self):
        assert ATR(1).next(10, 8, 9) == pytest.approx(2.0)

    def test_true_range_uses_prior_close(self):
        atr = ATR(1)
        atr.next(10, 8, 9)
        # max(12 - 11, |12 - 9|, |11 - 9|)
        assert atr.next(12, 11, 11.5) == pytest.approx(3.0)
        assert atr.prev_close == 11.5

    def test_wilder_smoothing(self):
        atr = ATR(2)
        out = [atr.next(*bar) for bar in [(10, 8, 9), (12, 11, 11.5), (11, 10, 10)]]
        # TR = [2, 3, 1.5]; SMA seed then alpha = 1/2
        assert out == pytest.approx([2.0, 2.5, 2.0])

    def test_absent_high_or_low(self):
        atr = ATR(2)
        atr.next(10, 8, 9)
        assert atr.next(None, 8, 12) is None
        assert atr.next(10, float("nan"), 12) is None
        assert atr.prev_close == 9.0

    def test_absent_close_keeps_prior(self):
        atr = ATR(1)
        atr.next(10, 8, 9)
        assert atr.next(10, 9.5, None) == pytest.approx(1.0)
        assert atr.prev_close == 9.0

    def test_mamode(self):
        assert ATR().ma.kind is MAType.RMA
        assert ATR(5, mamode="sma").ma.kind is MAType.SMA

    def test_non_negative(self, ohlcv):
        atr = ATR(14)
        for bar in ohlcv.to_dict("records"):
            assert atr.next(bar["high"], bar["low"], bar["close"]) >= 0.0

    def test_prev_close_is_not_a_constructor_argument(self):
        with pytest.raises(TypeError):
            ATR(14, prev_close=9.0)
