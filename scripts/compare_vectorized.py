#!/usr/bin/env python3
"""Compare pandas vectorized references vs streaming contexts.

Two checks:
1) full replay of each kind vs a rolling/ewm reference built with pandas
2) replay_seed on t=0..split, then ``next`` on t=split+1..end, vs the
   full replay
"""
from __future__ import annotations

import argparse
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pandas as pd
import pandas_ta_stream as ta


def make_ohlcv(rows: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    idx = pd.date_range("2025-01-01", periods=rows, freq="1min")
    base = 100 + rng.standard_normal(rows).cumsum()
    close = base + rng.normal(0, 0.2, rows)
    open_ = base + rng.normal(0, 0.2, rows)
    high = np.maximum(open_, close) + rng.random(rows) * 0.5
    low = np.minimum(open_, close) - rng.random(rows) * 0.5
    volume = rng.integers(100, 1000, rows)
    return pd.DataFrame(
        {
            "open": open_,
            "high": high,
            "low": low,
            "close": close,
            "volume": volume,
        },
        index=idx,
    )


def ref_sma(x: pd.Series, n: int) -> pd.Series:
    return x.rolling(n, min_periods=1).mean()


def ref_seeded_ewm(x: pd.Series, n: int, alpha: float) -> pd.Series:
    """SMA for the first n rows, then an adjust=False ewm from the seed."""
    out = ref_sma(x, n)
    tail = x.copy()
    tail.iloc[: n - 1] = np.nan
    tail.iloc[n - 1] = out.iloc[n - 1]
    out.iloc[n - 1 :] = tail.ewm(alpha=alpha, adjust=False).mean().iloc[n - 1 :]
    return out


def ref_wma(x: pd.Series, n: int) -> pd.Series:
    def _wma(w: np.ndarray) -> float:
        weights = np.arange(n - len(w) + 1, n + 1, dtype=float)
        return float(np.dot(w, weights) / weights.sum())
    return x.rolling(n, min_periods=1).apply(_wma, raw=True)


def ref_atr(df: pd.DataFrame, n: int) -> pd.Series:
    prev = df["close"].shift(1)
    tr = pd.concat(
        [df["high"] - df["low"], (df["high"] - prev).abs(), (df["low"] - prev).abs()],
        axis=1,
    ).max(axis=1)
    return ref_seeded_ewm(tr, n, 1.0 / n)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rows", type=int, default=2000)
    ap.add_argument("--split", type=int, default=1500)
    ap.add_argument("--length", type=int, default=14)
    ap.add_argument("--seed", type=int, default=11)
    args = ap.parse_args()

    if args.split >= args.rows:
        raise SystemExit("--split must be < --rows")

    df = make_ohlcv(args.rows, args.seed)
    n = args.length
    close = df["close"]

    references = {
        "sma": ref_sma(close, n),
        "ema": ref_seeded_ewm(close, n, 2.0 / (n + 1.0)),
        "rma": ref_seeded_ewm(close, n, 1.0 / n),
        "wma": ref_wma(close, n),
        "atr": ref_atr(df, n),
    }

    print("[i] rows:", args.rows, " length:", n)
    print("\nVectorized reference, max_abs:")
    for kind, ref in references.items():
        test = ta.replay(kind, df, length=n).iloc[:, 0]
        print(f"  {kind:<9} {(test - ref).abs().max():.3e}")

    print("\nSeed + incremental vs full replay, max_abs:")
    head = df.iloc[: args.split + 1]
    tail = df.iloc[args.split + 1 :]
    for kind in ta.stream_supported_kinds():
        indicator = ta.get_indicator(kind)
        params = {"length": n}
        full = ta.replay(kind, df, **params)
        context = ta.replay_seed(kind, {k: head[k] for k in indicator.inputs}, params)
        rows = [
            indicator.update(context, {k: float(bar[k]) for k in indicator.inputs}, params)
            for bar in tail.to_dict("records")
        ]
        inc = pd.DataFrame(rows, index=tail.index, columns=full.columns, dtype=float)
        diff = (inc - full.loc[tail.index]).abs().max().max()
        print(f"  {kind:<9} {diff:.3e}")


if __name__ == "__main__":
    main()
