# -*- coding: utf-8 -*-
"""pandas-ta stream -- momentum indicators.

Each section follows the pattern:
  1. Context dataclass with a ``next`` method
  2. init / update / output_names helpers
  3. STREAM_REGISTRY["<kind>"] = StreamIndicator(...)

Registered kinds
----------------
rsi, stoch, stochrsi, macd
"""
from __future__ import annotations

import warnings
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ._base import (
    InvalidConfiguration,
    _opt,
    _sub,
    _div,
    _clamp,
    _param,
    _as_length,
    StreamIndicator,
    STREAM_REGISTRY,
)
from ._overlap import EMA, MA, SMA, MAType, ema_make, rma_make


# ---------------------------------------------------------------------------
# Internal helper: gain / loss smoother that respects the mamode param.
# Supported: "ema" -> ema_make, "rma" -> rma_make.
# ---------------------------------------------------------------------------

def _ma_context_for_mode(mamode: Any, length: int) -> EMA:
    """Return an EMA context appropriate for the requested mamode."""
    mode = MAType.parse(mamode)
    if mode is MAType.RMA:
        return rma_make(length)
    if mode is MAType.EMA:
        return ema_make(length)
    raise InvalidConfiguration(f"RSI smoothing must be 'ema' or 'rma', got {mamode!r}")


# ===========================================================================
# RSI
# ===========================================================================
# gain = max(0, high - prev_high),  loss = max(0, prev_low - low)
# avg_gain / avg_loss -> EMA or RMA (default RMA, Wilder)
# RS  = 0                   if avg_gain <= 0
#     = 1                   if avg_loss == 0 (and avg_gain > 0)
#     = avg_gain / avg_loss otherwise
# RSI = clamp(100 - 100 / (1 + RS), 0, 100)
# Single-source mode: low defaults to high.  First bar only stores prev.
# Default length = 14.

@dataclass
class RSI:
    length: int = 14
    mamode: str = "rma"
    prev_high: Optional[float] = field(default=None, init=False)
    prev_low: Optional[float] = field(default=None, init=False)
    avg_gain: EMA = field(init=False, repr=False)
    avg_loss: EMA = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        self.avg_gain = _ma_context_for_mode(self.mamode, self.length)
        self.avg_loss = _ma_context_for_mode(self.mamode, self.length)

    def next(self, high: Optional[float], low: Optional[float] = None) -> Optional[float]:
        high = _opt(high)
        if high is None:
            return None
        low = _opt(low)
        if low is None:
            low = high

        gain = _sub(high, self.prev_high)
        loss = _sub(self.prev_low, low)
        g_val = self.avg_gain.next(None if gain is None else max(gain, 0.0))
        l_val = self.avg_loss.next(None if loss is None else max(loss, 0.0))
        self.prev_high = high
        self.prev_low = low

        if g_val is None or l_val is None:
            return None
        if g_val <= 0.0:
            rs = 0.0
        elif l_val == 0.0:
            rs = 1.0
        else:
            rs = g_val / l_val
        return _clamp(100.0 - 100.0 / (1.0 + rs), 0.0, 100.0)


def _rsi_init(params: Dict[str, Any]) -> RSI:
    return RSI(
        length=_as_length(_param(params, "length", 14)),
        mamode=_param(params, "mamode", "rma"),
    )


def _rsi_update(state: RSI, bar: Dict[str, Any], params: Dict[str, Any]) -> List[Optional[float]]:
    return [state.next(bar["close"])]


def _rsi_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"RSI_{_param(params, 'length', 14)}"]


STREAM_REGISTRY["rsi"] = StreamIndicator(
    kind="rsi",
    inputs=("close",),
    init=_rsi_init,
    update=_rsi_update,
    output_names=_rsi_output_names,
)


# ===========================================================================
# STOCH  -- Stochastic oscillator
# ===========================================================================
# raw_k = 100 * (x - lowest_low(length)) / (highest_high(length) - lowest_low(length))
#   0   when x - lowest_low <= 0
#   100 when the range is zero and x is above the lowest low
# K = SMA(raw_k, k_smooth)
# D = SMA(K,     d_smooth)
# Needs: high_buf, low_buf (deque maxlen=length) for rolling min/max
# Defaults: length=14, k_smooth=1, d_smooth=3

@dataclass
class Stochastic:
    length: int = 14
    k_smooth: int = 1
    d_smooth: int = 3
    high_buf: deque = field(init=False, repr=False)
    low_buf: deque = field(init=False, repr=False)
    k_sma: SMA = field(init=False, repr=False)
    d_sma: SMA = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        self.k_smooth = _as_length(self.k_smooth, "k_smooth")
        self.d_smooth = _as_length(self.d_smooth, "d_smooth")
        self.high_buf = deque(maxlen=self.length)
        self.low_buf = deque(maxlen=self.length)
        self.k_sma = SMA(self.k_smooth)
        self.d_sma = SMA(self.d_smooth)

    def next(
        self, x: Optional[float], high: Optional[float] = None, low: Optional[float] = None
    ) -> Tuple[Optional[float], Optional[float]]:
        x = _opt(x)
        if x is None:
            return None, None
        high = _opt(high)
        low = _opt(low)
        self.high_buf.append(x if high is None else high)
        self.low_buf.append(x if low is None else low)

        hh = max(self.high_buf)
        ll = min(self.low_buf)
        num = x - ll
        if num <= 0.0:
            raw_k = 0.0
        else:
            ratio = _div(num, hh - ll)
            raw_k = 100.0 if ratio is None else _clamp(100.0 * ratio, 0.0, 100.0)

        k_val = self.k_sma.next(raw_k)
        d_val = self.d_sma.next(k_val)
        return k_val, d_val


def _stoch_params(params: Dict[str, Any], k_default: int) -> Tuple[int, int, int]:
    length = _as_length(_param(params, "length", 14))
    k = _as_length(_param(params, "k_smooth", k_default), "k_smooth")
    d = _as_length(_param(params, "d_smooth", 3), "d_smooth")
    return length, k, d


def _stoch_init(params: Dict[str, Any]) -> Stochastic:
    length, k, d = _stoch_params(params, 1)
    return Stochastic(length=length, k_smooth=k, d_smooth=d)


def _stoch_update(
    state: Stochastic, bar: Dict[str, Any], params: Dict[str, Any]
) -> List[Optional[float]]:
    k_val, d_val = state.next(bar["close"], bar["high"], bar["low"])
    return [k_val, d_val]


def _stoch_output_names(params: Dict[str, Any]) -> List[str]:
    length, k, d = _stoch_params(params, 1)
    p = f"_{length}_{k}_{d}"
    return [f"STOCHk{p}", f"STOCHd{p}"]


STREAM_REGISTRY["stoch"] = StreamIndicator(
    kind="stoch",
    inputs=("high", "low", "close"),
    init=_stoch_init,
    update=_stoch_update,
    output_names=_stoch_output_names,
)


# ===========================================================================
# STOCHRSI
# ===========================================================================
# 1) RSI(x, rsi_length)
# 2) Stochastic(RSI, length, k_smooth, d_smooth) -- RSI is its only input
# Defaults: length=14, rsi_length=14, k_smooth=3, d_smooth=3

@dataclass
class StochRSI:
    length: int = 14
    rsi_length: int = 14
    k_smooth: int = 3
    d_smooth: int = 3
    mamode: str = "rma"
    rsi: RSI = field(init=False, repr=False)
    stoch: Stochastic = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rsi = RSI(self.rsi_length, self.mamode)
        self.stoch = Stochastic(self.length, self.k_smooth, self.d_smooth)

    def next(
        self, x: Optional[float], low: Optional[float] = None
    ) -> Tuple[Optional[float], Optional[float]]:
        return self.stoch.next(self.rsi.next(x, low))


def _stochrsi_init(params: Dict[str, Any]) -> StochRSI:
    length, k, d = _stoch_params(params, 3)
    return StochRSI(
        length=length,
        rsi_length=_as_length(_param(params, "rsi_length", 14), "rsi_length"),
        k_smooth=k,
        d_smooth=d,
        mamode=_param(params, "mamode", "rma"),
    )


def _stochrsi_update(
    state: StochRSI, bar: Dict[str, Any], params: Dict[str, Any]
) -> List[Optional[float]]:
    k_val, d_val = state.next(bar["close"])
    return [k_val, d_val]


def _stochrsi_output_names(params: Dict[str, Any]) -> List[str]:
    length, k, d = _stoch_params(params, 3)
    rsi_length = _param(params, "rsi_length", 14)
    p = f"_{length}_{rsi_length}_{k}_{d}"
    return [f"STOCHRSIk{p}", f"STOCHRSId{p}"]


STREAM_REGISTRY["stochrsi"] = StreamIndicator(
    kind="stochrsi",
    inputs=("close",),
    init=_stochrsi_init,
    update=_stochrsi_update,
    output_names=_stochrsi_output_names,
)


# ===========================================================================
# MACD
# ===========================================================================
# MACD   = MA(x, fast) - MA(x, slow)
# Signal = MA(MACD, signal)   -- never the raw input
# Hist   = MACD - Signal
# Each of the three MAs has its own mamode (default "ema").
# Defaults: fast=12, slow=26, signal=9

@dataclass
class MACD:
    fast: int = 12
    slow: int = 26
    signal: int = 9
    fast_mamode: str = "ema"
    slow_mamode: str = "ema"
    signal_mamode: str = "ema"
    fast_ma: MA = field(init=False, repr=False)
    slow_ma: MA = field(init=False, repr=False)
    signal_ma: MA = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.fast_ma = MA(self.fast_mamode, _as_length(self.fast, "fast"))
        self.slow_ma = MA(self.slow_mamode, _as_length(self.slow, "slow"))
        self.signal_ma = MA(self.signal_mamode, _as_length(self.signal, "signal"))
        if self.fast > self.slow:
            warnings.warn(
                f"MACD fast length ({self.fast}) is greater than slow length "
                f"({self.slow}); the lines are not swapped.",
                UserWarning,
                stacklevel=3,
            )

    def next(
        self, x: Optional[float]
    ) -> Tuple[Optional[float], Optional[float], Optional[float]]:
        x = _opt(x)
        if x is None:
            return None, None, None
        slow_val = self.slow_ma.next(x)
        fast_val = self.fast_ma.next(x)
        macd_val = _sub(fast_val, slow_val)
        sig_val = self.signal_ma.next(macd_val)
        return macd_val, sig_val, _sub(macd_val, sig_val)


def _macd_lengths(params: Dict[str, Any]) -> Tuple[int, int, int]:
    fast   = _as_length(_param(params, "fast",   12), "fast")
    slow   = _as_length(_param(params, "slow",   26), "slow")
    signal = _as_length(_param(params, "signal",  9), "signal")
    return fast, slow, signal


def _macd_init(params: Dict[str, Any]) -> MACD:
    fast, slow, signal = _macd_lengths(params)
    mamode = _param(params, "mamode", "ema")
    return MACD(
        fast=fast,
        slow=slow,
        signal=signal,
        fast_mamode=_param(params, "fast_mamode", mamode),
        slow_mamode=_param(params, "slow_mamode", mamode),
        signal_mamode=_param(params, "signal_mamode", mamode),
    )


def _macd_update(state: MACD, bar: Dict[str, Any], params: Dict[str, Any]) -> List[Optional[float]]:
    macd_val, sig_val, hist_val = state.next(bar["close"])
    return [macd_val, hist_val, sig_val]


def _macd_output_names(params: Dict[str, Any]) -> List[str]:
    fast, slow, signal = _macd_lengths(params)
    p = f"_{fast}_{slow}_{signal}"
    return [f"MACD{p}", f"MACDh{p}", f"MACDs{p}"]


STREAM_REGISTRY["macd"] = StreamIndicator(
    kind="macd",
    inputs=("close",),
    init=_macd_init,
    update=_macd_update,
    output_names=_macd_output_names,
)
