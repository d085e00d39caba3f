# -*- coding: utf-8 -*-
"""pandas-ta stream – volatility indicators.

Registered kinds
----------------
atr
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ._base import (
    _opt,
    _sub,
    _abs,
    _max_present,
    _param,
    _as_length,
    StreamIndicator,
    STREAM_REGISTRY,
)
from ._overlap import MA, MAType


# ===========================================================================
# ATR
# ===========================================================================
# TR  = max(high - low, |high - prev_close|, |low - prev_close|)
#       first bar has no prev_close and degrades to high - low
# ATR = MA(TR, length)   -- default mamode "rma" (Wilder, SMA seed)
# Default length = 14

@dataclass
class ATR:
    length: int = 14
    mamode: str = "rma"
    prev_close: Optional[float] = field(default=None, init=False)
    ma: MA = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.ma = MA(self.mamode, _as_length(self.length))

    def true_range(self, high: float, low: float) -> float:
        """True range against the stored (prior) close."""
        return _max_present(
            high - low,
            _abs(_sub(high, self.prev_close)),
            _abs(_sub(low, self.prev_close)),
        )

    def next(
        self, high: Optional[float], low: Optional[float], close: Optional[float]
    ) -> Optional[float]:
        high = _opt(high)
        low = _opt(low)
        if high is None or low is None:
            return None
        tr = self.true_range(high, low)
        close = _opt(close)
        if close is not None:
            self.prev_close = close
        return self.ma.next(tr)


def _atr_init(params: Dict[str, Any]) -> ATR:
    return ATR(
        length=_as_length(_param(params, "length", 14)),
        mamode=_param(params, "mamode", "rma"),
    )


def _atr_update(
    state: ATR,
    bar: Dict[str, Optional[float]],
    params: Dict[str, Any],
) -> List[Optional[float]]:
    return [state.next(bar["high"], bar["low"], bar["close"])]


def _atr_output_names(params: Dict[str, Any]) -> List[str]:
    length = _param(params, "length", 14)
    mamode = MAType.parse(_param(params, "mamode", "rma")).value
    return [f"ATR{mamode[0]}_{length}"]


STREAM_REGISTRY["atr"] = StreamIndicator(
    kind="atr",
    inputs=("high", "low", "close"),
    init=_atr_init,
    update=_atr_update,
    output_names=_atr_output_names,
)
