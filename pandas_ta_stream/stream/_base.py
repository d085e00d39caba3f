# -*- coding: utf-8 -*-
"""pandas-ta stream – shared base: absent-value helpers, errors, registry.

All category modules (``_overlap``, ``_momentum``, …) import from here
and populate the registry at load time.

Absent values
-------------
``None`` is the absent value.  A float NaN or ``pd.NA`` coming in from a
caller (e.g. a pandas cell) is treated as absent too.  Every arithmetic helper below
short-circuits to ``None`` when any operand is absent.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import math


class InvalidConfiguration(ValueError):
    """Raised at construction time: bad length, unknown MA kind, …"""


# ---------------------------------------------------------------------------
# Absent-value helpers
# ---------------------------------------------------------------------------

def _is_nan(x: Any) -> bool:
    """True when *x* is None or a float NaN."""
    return x is None or (isinstance(x, float) and math.isnan(x))


def _opt(x: Any) -> Optional[float]:
    """Normalise *x* to ``float`` or ``None``."""
    if _is_nan(x):
        return None
    try:
        x = float(x)
    except TypeError:
        # pd.NA (nullable Float64 / Int64 cells) refuses float()
        import pandas as pd
        if x is pd.NA:
            return None
        raise
    return None if math.isnan(x) else x


def _sub(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None or b is None:
        return None
    return a - b


def _mul(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None or b is None:
        return None
    return a * b


def _div(a: Optional[float], b: Optional[float]) -> Optional[float]:
    """Division; also None on a zero divisor."""
    if a is None or b is None or b == 0.0:
        return None
    return a / b


def _abs(a: Optional[float]) -> Optional[float]:
    return None if a is None else abs(a)


def _max_present(*values: Optional[float]) -> Optional[float]:
    """Max over the present values; None only if every value is absent."""
    present = [v for v in values if v is not None]
    return max(present) if present else None


def _clamp(x: Optional[float], lo: float, hi: float) -> Optional[float]:
    if x is None:
        return None
    return min(max(x, lo), hi)


# ---------------------------------------------------------------------------
# Parameter helpers
# ---------------------------------------------------------------------------

def _param(params: Dict[str, Any], key: str, default: Any) -> Any:
    """Pull *key* from *params*; treat None as missing → default."""
    value = params.get(key, default)
    return default if value is None else value


def _as_length(value: Any, name: str = "length") -> int:
    """Validate a window length: an integer >= 1."""
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfiguration(f"{name} must be >= 1, got {value}")
    return value


# ---------------------------------------------------------------------------
# Indicator descriptor & registry  (populated by category modules)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StreamIndicator:
    """Immutable descriptor for a single streaming indicator."""
    kind:         str
    inputs:       Tuple[str, ...]
    init:         Callable[[Dict[str, Any]], Any]
    update:       Callable[[Any, Dict[str, Any], Dict[str, Any]],
                           List[Optional[float]]]
    output_names: Callable[[Dict[str, Any]], List[str]]
    optional:     Tuple[str, ...] = ()


# Populated by category modules at import time.
STREAM_REGISTRY: Dict[str, StreamIndicator] = {}


def get_indicator(kind: str) -> StreamIndicator:
    indicator = STREAM_REGISTRY.get(kind.lower())
    if indicator is None:
        raise InvalidConfiguration(f"Indicator '{kind}' not found in STREAM_REGISTRY")
    return indicator


# ---------------------------------------------------------------------------
# Replay helpers (pandas)
# ---------------------------------------------------------------------------

def _bar_at(inputs: Dict[str, Any], keys: List[str], i: int) -> Dict[str, Optional[float]]:
    return {k: _opt(inputs[k].iloc[i]) for k in keys}


def replay_seed(kind: str, inputs: Dict[str, Any], params: Dict[str, Any]) -> Any:
    """Replay the streaming update over historical Series.

    *inputs* values must be ``pd.Series`` (or any indexable with ``.iloc``).
    NaN cells are passed on as absent values.  Returns the context after
    processing all rows, ready to continue with ``next``.
    """
    indicator = get_indicator(kind)
    context = indicator.init(params)
    keys = [k for k in indicator.inputs + indicator.optional if k in inputs]
    missing = [k for k in indicator.inputs if k not in inputs]
    if missing:
        raise KeyError(f"'{kind}' needs inputs {missing}")
    if not keys:
        return context
    n = len(inputs[keys[0]])
    for i in range(n):
        indicator.update(context, _bar_at(inputs, keys, i), params)
    return context


def replay(kind: str, df: "pd.DataFrame", **spec: Any) -> "pd.DataFrame":  # noqa: F821
    """Run a fresh *kind* context over every row of *df*.

    Returns a DataFrame on the same index with one column per output.
    *spec* holds the indicator params plus the naming overrides
    understood by :func:`resolve_output_names`.
    """
    import pandas as pd          # lazy – pandas not required at module load
    indicator = get_indicator(kind)
    missing = [k for k in indicator.inputs if k not in df.columns]
    if missing:
        raise KeyError(f"'{kind}' needs columns {missing}")

    params = {k: v for k, v in spec.items() if k not in STREAM_SPEC_EXCLUDES}
    context = indicator.init(params)
    names, err = resolve_output_names(indicator.output_names(params), spec)
    if err:
        raise InvalidConfiguration(err)

    keys = [k for k in indicator.inputs + indicator.optional if k in df.columns]
    inputs = {k: df[k] for k in keys}
    rows = [
        indicator.update(context, _bar_at(inputs, keys, i), params)
        for i in range(len(df))
    ]
    return pd.DataFrame(rows, index=df.index, columns=names, dtype=float)


# ---------------------------------------------------------------------------
# Output-name helpers
# ---------------------------------------------------------------------------

STREAM_SPEC_EXCLUDES = frozenset({
    "kind", "prefix", "suffix", "delimiter", "col_names", "name",
})


def build_state_key(kind: str, spec: Dict[str, Any]) -> str:
    """Deterministic cache-key from *kind* + non-meta params."""
    parts = sorted(
        ((k, v) for k, v in spec.items() if k not in STREAM_SPEC_EXCLUDES),
        key=lambda x: x[0],
    )
    payload = "|".join(f"{k}={repr(v)}" for k, v in parts)
    return f"{kind}|{payload}" if payload else kind


def resolve_output_names(
        base_names: List[str], spec: Dict[str, Any]
) -> Tuple[Optional[List[str]], Optional[str]]:
    """Apply prefix / suffix / col_names overrides from *spec*."""
    names = list(base_names)
    delimiter = spec.get("delimiter", "_")
    prefix = spec.get("prefix") or ""
    suffix = spec.get("suffix") or ""
    if prefix:
        prefix = f"{prefix}{delimiter}"
    if suffix:
        suffix = f"{delimiter}{suffix}"
    if prefix or suffix:
        names = [f"{prefix}{n}{suffix}" for n in names]
    col_names = spec.get("col_names")
    if col_names is not None:
        if not isinstance(col_names, tuple):
            col_names = (col_names,)
        if len(col_names) < len(names):
            return None, f"[!] col_names too short: {len(col_names)} < {len(names)}"
        names = list(col_names[: len(names)])
    return names, None


def stream_supported_kinds() -> List[str]:
    """Return sorted list of registered indicator kinds."""
    return sorted(STREAM_REGISTRY.keys())
