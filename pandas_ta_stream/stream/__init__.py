# -*- coding: utf-8 -*-
"""pandas-ta.stream – streaming indicator contexts.

Category modules populate STREAM_REGISTRY at import time.  This package
re-exports the contexts plus the shared base API.
"""
from __future__ import annotations

# Base API (always available)
from ._base import (
    InvalidConfiguration,
    StreamIndicator,
    STREAM_REGISTRY,
    STREAM_SPEC_EXCLUDES,
    get_indicator,
    replay,
    replay_seed,
    build_state_key,
    resolve_output_names,
    stream_supported_kinds,
    _is_nan,
    _param,
    _as_length,
)

# ---------------------------------------------------------------------------
# Category modules – each populates the shared registry on import
# ---------------------------------------------------------------------------
from ._overlap import (       # sma, ema, rma, wma, hma
    SMA, EMA, RMA, WMA, HMA, MA, MAType, ma, ema_make, rma_make,
)
from ._momentum import (      # rsi, stoch, stochrsi, macd
    RSI, Stochastic, StochRSI, MACD,
)
from ._volatility import ATR  # atr
from ._study import StreamStudy

__all__ = [
    # base
    "InvalidConfiguration",
    "StreamIndicator",
    "STREAM_REGISTRY",
    "get_indicator",
    "replay",
    "replay_seed",
    "build_state_key",
    "resolve_output_names",
    "stream_supported_kinds",
    # contexts
    "SMA",
    "EMA",
    "RMA",
    "WMA",
    "HMA",
    "MA",
    "MAType",
    "ma",
    "ema_make",
    "rma_make",
    "RSI",
    "Stochastic",
    "StochRSI",
    "MACD",
    "ATR",
    "StreamStudy",
]
