"""Tests for the moving-average contexts and the MA dispatcher."""

import pandas as pd
import pytest

from pandas_ta_stream import (
    EMA,
    HMA,
    MA,
    RMA,
    SMA,
    WMA,
    InvalidConfiguration,
    MAType,
    ema_make,
    ma,
    rma_make,
)

ALL_KINDS = ["sma", "ema", "rma", "wma", "hma"]


def feed(context, values):
    return [context.next(v) for v in values]


class TestSMA:
    """Simple moving average."""

    def test_partial_then_full_window(self):
        assert feed(SMA(3), [1, 2, 3, 4]) == pytest.approx([1, 1.5, 2, 3])

    def test_window_is_bounded(self, closes):
        sma = SMA(5)
        for c in closes:
            sma.next(c)
            assert len(sma.window) <= 5
            assert sma.total == pytest.approx(sum(sma.window))

    def test_absent_input_is_skipped(self):
        sma = SMA(3)
        out = feed(sma, [1, None, 2, float("nan"), 3, 4])
        assert out[1] is None
        assert out[3] is None
        assert [v for v in out if v is not None] == pytest.approx([1, 1.5, 2, 3])
        assert list(sma.window) == [2, 3, 4]

    def test_pandas_na_is_absent(self):
        sma = SMA(3)
        assert sma.next(pd.NA) is None
        assert len(sma.window) == 0
        assert sma.next(2.0) == 2.0

    def test_state_is_not_a_constructor_argument(self):
        with pytest.raises(TypeError):
            SMA(3, total=10.0)


class TestEMA:
    """EMA / RMA with SMA warm-up."""

    def test_seed_then_recurrence(self):
        ema = EMA(3)
        assert ema.alpha == pytest.approx(0.5)
        assert feed(ema, [1, 2, 3, 4]) == pytest.approx([1, 1.5, 2, 3])

    def test_rma_uses_wilder_alpha(self):
        rma = RMA(3)
        assert rma.alpha == pytest.approx(1 / 3)
        assert feed(rma, [1, 2, 3, 4]) == pytest.approx([1, 1.5, 2, 8 / 3])

    def test_factories(self):
        assert ema_make(9).alpha == pytest.approx(0.2)
        assert isinstance(rma_make(4), RMA)
        assert rma_make(4).alpha == pytest.approx(0.25)

    def test_absent_does_not_advance_warmup(self):
        ema = EMA(3)
        out = feed(ema, [1, None, 2, 3, 4])
        assert out[1] is None
        assert [v for v in out if v is not None] == pytest.approx([1, 1.5, 2, 3])

    def test_bad_alpha(self):
        with pytest.raises(InvalidConfiguration):
            EMA(3, alpha=1.5)

    def test_state_is_not_a_constructor_argument(self):
        with pytest.raises(TypeError):
            EMA(3, count=3)
        with pytest.raises(TypeError):
            RMA(3, last=1.0)


class TestWMA:
    """Weighted moving average over a fixed window."""

    def test_linear_weights(self):
        out = feed(WMA(3), [1, 2, 3, 4])
        assert out == pytest.approx([1, 1.6, 14 / 6, 20 / 6])

    def test_explicit_weights(self):
        wma = WMA(2)
        wma.next(1, 1)
        assert wma.next(3, 3) == pytest.approx(2.5)

    def test_zero_weight_sum_is_absent(self):
        assert WMA(1).next(5, 0) is None

    def test_absent_value_still_slides(self):
        wma = WMA(3)
        wma.next(1)
        assert wma.next(None) is None
        assert len(wma.values) == 3
        # window [1, None, 3] with ranks [1, 2, 3]
        assert wma.next(3) == pytest.approx(2.5)

    def test_absent_weight_defaults_to_rank(self):
        wma = WMA(2)
        wma.next(2, None)
        assert wma.next(4, None) == pytest.approx((2 * 1 + 4 * 2) / 3)

    def test_window_length_fixed(self, closes):
        wma = WMA(4)
        for c in closes[:20]:
            wma.next(c)
            assert len(wma.values) == 4
            assert len(wma.weights) == 4


class TestHMA:
    """Hull moving average built on three WMAs."""

    def test_sub_window_lengths(self):
        hma = HMA(9)
        assert (hma.full.length, hma.half.length, hma.root.length) == (9, 4, 3)

    def test_matches_manual_composition(self, closes):
        hma = HMA(6)
        full, half, root = WMA(6), WMA(3), WMA(2)
        for c in closes[:50]:
            f = full.next(c)
            h = half.next(c)
            assert hma.next(c) == pytest.approx(root.next(2 * h - f))

    def test_absent_tick_slides_every_stage(self):
        hma = HMA(4)
        full, half, root = WMA(4), WMA(2), WMA(2)
        for v in [1.0, 2.0, None, 4.0, 5.0]:
            f, h = full.next(v), half.next(v)
            expected = root.next(None if f is None or h is None else 2 * h - f)
            got = hma.next(v)
            if expected is None:
                assert got is None
            else:
                assert got == pytest.approx(expected)
        assert list(hma.full.values)[2] is None


class TestLengthOne:
    """Length-1 contexts pass values through unchanged."""

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_identity(self, kind):
        context = ma(kind, 1)
        for v in [5.0, -2.0, 3.5, 100.25]:
            assert context.next(v) == pytest.approx(v)


class TestConvergence:
    """Constant input converges to the constant."""

    @pytest.mark.parametrize("kind", ALL_KINDS)
    @pytest.mark.parametrize("length", [1, 2, 5, 10])
    def test_constant_stream(self, kind, length):
        context = ma(kind, length)
        out = feed(context, [3.7] * (4 * length + 10))
        assert out[-1] == pytest.approx(3.7)


class TestMA:
    """MA dispatcher."""

    def test_selects_context(self):
        assert isinstance(MA("SMA", 3).context, SMA)
        assert isinstance(MA(MAType.HMA, 4).context, HMA)
        assert type(MA("ema", 3).context) is EMA
        assert isinstance(MA("rma", 3).context, RMA)
        assert MA("Wma", 3).kind is MAType.WMA

    def test_routes_next(self):
        assert feed(ma("wma", 3), [1, 2, 3])[-1] == pytest.approx(14 / 6)

    def test_absent_tick(self):
        context = ma("ema", 3)
        assert feed(context, [1.0, None, 2.0]) == [1.0, None, 1.5]
        assert context.context.count == 2
        # the WMA window still slides on the absent tick
        assert feed(ma("wma", 2), [1.0, None, 3.0]) == [1.0, None, 3.0]

    def test_unknown_kind(self):
        with pytest.raises(InvalidConfiguration):
            MA("bogus", 3)
        with pytest.raises(ValueError):
            ma(None, 3)

    @pytest.mark.parametrize("length", [0, -1, 2.5, "3", True])
    def test_bad_length(self, length):
        with pytest.raises(InvalidConfiguration):
            MA("sma", length)

    @pytest.mark.parametrize("cls", [SMA, EMA, RMA, WMA, HMA])
    def test_bad_length_direct(self, cls):
        with pytest.raises(InvalidConfiguration):
            cls(0)
