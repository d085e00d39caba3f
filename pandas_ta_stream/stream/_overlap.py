# -*- coding: utf-8 -*-
"""pandas-ta stream -- overlap indicators (moving averages).

Each section follows the pattern:
  1. Context dataclass with a ``next`` method
  2. init / update / output_names helpers
  3. STREAM_REGISTRY["<kind>"] = StreamIndicator(...)

Registered kinds
----------------
sma, ema, rma, wma, hma
"""
from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ._base import (
    InvalidConfiguration,
    _opt,
    _sub,
    _mul,
    _div,
    _param,
    _as_length,
    StreamIndicator,
    STREAM_REGISTRY,
)


def _close_update(state: Any, bar: Dict[str, Any], params: Dict[str, Any]) -> List[Optional[float]]:
    return [state.next(bar["close"])]


# ===========================================================================
# SMA
# ===========================================================================
# Running sum over a FIFO of at most `length` samples.  The mean is taken
# over the current FIFO size, so the first outputs average fewer samples.
# Default length = 10.

@dataclass
class SMA:
    length: int
    window: deque = field(default_factory=deque, init=False, repr=False)
    total: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)

    def next(self, x: Optional[float]) -> Optional[float]:
        x = _opt(x)
        if x is None:
            return None
        self.window.append(x)
        self.total += x
        if len(self.window) > self.length:
            self.total -= self.window.popleft()
        return self.total / len(self.window)


def _sma_init(params: Dict[str, Any]) -> SMA:
    return SMA(_as_length(_param(params, "length", 10)))


def _sma_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"SMA_{_param(params, 'length', 10)}"]


STREAM_REGISTRY["sma"] = StreamIndicator(
    kind="sma",
    inputs=("close",),
    init=_sma_init,
    update=_close_update,
    output_names=_sma_output_names,
)


# ===========================================================================
# EMA / RMA
# ===========================================================================
# EMA  -> alpha = 2 / (length + 1)   via ``ema_make``
# RMA  -> alpha = 1 / length          via ``rma_make``  (Wilder)
#
# The first `length` samples are answered by an owned SMA (seed); from
# sample length+1 on:  out = alpha * x + (1 - alpha) * prev_out

@dataclass
class EMA:
    """Exponential moving average seeded by a simple moving average."""
    length: int
    alpha: Optional[float] = None
    count: int = field(default=0, init=False)
    last: Optional[float] = field(default=None, init=False)
    seed: SMA = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        if self.alpha is None:
            self.alpha = 2.0 / (self.length + 1.0)
        elif not 0.0 < self.alpha <= 1.0:
            raise InvalidConfiguration(f"alpha must be in (0, 1], got {self.alpha}")
        self.seed = SMA(self.length)

    def next(self, x: Optional[float]) -> Optional[float]:
        x = _opt(x)
        if x is None:
            return None
        if self.count < self.length:
            self.count += 1
            self.last = self.seed.next(x)
        else:
            self.last = self.alpha * x + (1.0 - self.alpha) * self.last
        return self.last


@dataclass
class RMA(EMA):
    """Wilder's moving average: an EMA with alpha = 1 / length."""

    def __post_init__(self) -> None:
        if self.alpha is None:
            self.alpha = 1.0 / _as_length(self.length)
        super().__post_init__()


def ema_make(length: int) -> EMA:
    """EMA context – alpha = 2 / (length + 1)."""
    return EMA(length)


def rma_make(length: int) -> RMA:
    """RMA / Wilder context – alpha = 1 / length."""
    return RMA(length)


def _ema_init(params: Dict[str, Any]) -> EMA:
    return ema_make(_as_length(_param(params, "length", 10)))


def _ema_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"EMA_{_param(params, 'length', 10)}"]


def _rma_init(params: Dict[str, Any]) -> RMA:
    return rma_make(_as_length(_param(params, "length", 10)))


def _rma_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"RMA_{_param(params, 'length', 10)}"]


STREAM_REGISTRY["ema"] = StreamIndicator(
    kind="ema",
    inputs=("close",),
    init=_ema_init,
    update=_close_update,
    output_names=_ema_output_names,
)
STREAM_REGISTRY["rma"] = StreamIndicator(
    kind="rma",
    inputs=("close",),
    init=_rma_init,
    update=_close_update,
    output_names=_rma_output_names,
)


# ===========================================================================
# WMA
# ===========================================================================
# Fixed-size value / weight FIFOs, pre-filled with absent slots.  Every
# call slides both windows by one.  An absent weight defaults to the
# slot's 1-based rank (oldest = 1 ... newest = length), which gives the
# classic linear WMA.  Slots holding an absent value are skipped.
# Optional explicit weights (e.g. volume) via ``use_volume=True``.

@dataclass
class WMA:
    length: int
    values: deque = field(init=False, repr=False)
    weights: deque = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        self.values = deque([None] * self.length, maxlen=self.length)
        self.weights = deque([None] * self.length, maxlen=self.length)

    def next(self, x: Optional[float], weight: Optional[float] = None) -> Optional[float]:
        x = _opt(x)
        self.values.append(x)
        self.weights.append(_opt(weight))
        if x is None:
            return None

        wsum = 0.0
        total = 0.0
        for rank, (v, w) in enumerate(zip(self.values, self.weights), start=1):
            if v is None:
                continue
            if w is None:
                w = float(rank)
            total += v * w
            wsum += w
        return _div(total, wsum)


def _wma_init(params: Dict[str, Any]) -> WMA:
    return WMA(_as_length(_param(params, "length", 10)))


def _wma_update(state: WMA, bar: Dict[str, Any], params: Dict[str, Any]) -> List[Optional[float]]:
    weight = bar.get("volume") if _param(params, "use_volume", False) else None
    return [state.next(bar["close"], weight)]


def _wma_output_names(params: Dict[str, Any]) -> List[str]:
    prefix = "VWMA" if _param(params, "use_volume", False) else "WMA"
    return [f"{prefix}_{_param(params, 'length', 10)}"]


STREAM_REGISTRY["wma"] = StreamIndicator(
    kind="wma",
    inputs=("close",),
    init=_wma_init,
    update=_wma_update,
    output_names=_wma_output_names,
    optional=("volume",),
)


# ===========================================================================
# HMA  -- Hull MA
# ===========================================================================
# HMA = WMA(2 * WMA(x, n/2) - WMA(x, n), round(sqrt(n)))
# Sub-window order is fixed: full, half, then the sqrt stage.

@dataclass
class HMA:
    length: int
    full: WMA = field(init=False, repr=False)
    half: WMA = field(init=False, repr=False)
    root: WMA = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.length = _as_length(self.length)
        self.full = WMA(self.length)
        self.half = WMA(max(1, self.length // 2))
        self.root = WMA(max(1, int(round(math.sqrt(self.length)))))

    def next(self, x: Optional[float]) -> Optional[float]:
        full = self.full.next(x)
        half = self.half.next(x)
        return self.root.next(_sub(_mul(2.0, half), full))


def _hma_init(params: Dict[str, Any]) -> HMA:
    return HMA(_as_length(_param(params, "length", 10)))


def _hma_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"HMA_{_param(params, 'length', 10)}"]


STREAM_REGISTRY["hma"] = StreamIndicator(
    kind="hma",
    inputs=("close",),
    init=_hma_init,
    update=_close_update,
    output_names=_hma_output_names,
)


# ===========================================================================
# MA  -- dispatcher over the moving-average kinds
# ===========================================================================

class MAType(str, Enum):
    SMA = "sma"
    EMA = "ema"
    RMA = "rma"
    WMA = "wma"
    HMA = "hma"

    @classmethod
    def parse(cls, kind: Any) -> "MAType":
        """Accept a member or its case-insensitive name."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).lower())
        except ValueError:
            raise InvalidConfiguration(f"Unknown MA kind: {kind!r}") from None


_MA_CONTEXTS = {
    MAType.SMA: SMA,
    MAType.EMA: EMA,
    MAType.RMA: RMA,
    MAType.WMA: WMA,
    MAType.HMA: HMA,
}


@dataclass
class MA:
    """Holds exactly one moving-average context selected by ``kind``."""
    kind: MAType
    length: int
    context: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.kind = MAType.parse(self.kind)
        self.length = _as_length(self.length)
        self.context = _MA_CONTEXTS[self.kind](self.length)

    def next(self, x: Optional[float]) -> Optional[float]:
        return self.context.next(x)


def ma(kind: Any = "ema", length: int = 10) -> MA:
    """Build an MA dispatcher: ``ma("hma", 21).next(close)``."""
    return MA(kind, length)
