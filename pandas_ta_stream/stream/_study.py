# -*- coding: utf-8 -*-
"""pandas-ta stream – StreamStudy: many indicators fed from one bar stream.

A study is a list of specs, e.g.::

    study = StreamStudy([
        {"kind": "ema", "length": 21},
        {"kind": "macd", "fast": 12, "slow": 26, "signal": 9},
        {"kind": "atr", "length": 14, "prefix": "D1"},
    ])
    study.seed(history_df)
    row = study.update({"high": 1.2, "low": 1.1, "close": 1.15})

Each spec owns one context, keyed by :func:`build_state_key`.
"""
from __future__ import annotations

import warnings
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ._base import (
    STREAM_SPEC_EXCLUDES,
    InvalidConfiguration,
    StreamIndicator,
    _opt,
    build_state_key,
    get_indicator,
    resolve_output_names,
)


class _Entry:
    """One context plus every column set that reads from it."""
    __slots__ = ("indicator", "params", "columns", "context")

    def __init__(self, indicator: StreamIndicator, params: Dict[str, Any]) -> None:
        self.indicator = indicator
        self.params = params
        self.columns: List[List[str]] = []
        self.context = indicator.init(params)


class StreamStudy:
    """Drive several streaming indicators with one bar at a time.

    Specs that differ only in naming (``prefix``, ``suffix``, ``col_names``)
    share one context and each get their own output columns.
    """

    def __init__(self, specs: Sequence[Mapping[str, Any]]) -> None:
        self._entries: Dict[str, _Entry] = {}
        for raw in specs:
            spec = dict(raw)
            if "kind" not in spec:
                raise InvalidConfiguration(f"spec without 'kind': {spec!r}")
            kind = str(spec["kind"]).lower()
            indicator = get_indicator(kind)
            params = {k: v for k, v in spec.items() if k not in STREAM_SPEC_EXCLUDES}
            names, err = resolve_output_names(indicator.output_names(params), spec)
            if err:
                raise InvalidConfiguration(err)

            key = build_state_key(kind, spec)
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry(indicator, params)
            elif names in entry.columns:
                warnings.warn(
                    f"Duplicate study spec '{key}' ignored.", UserWarning, stacklevel=2
                )
                continue
            entry.columns.append(names)

    @property
    def states(self) -> Dict[str, Any]:
        """Contexts by state key."""
        return {key: entry.context for key, entry in self._entries.items()}

    @property
    def names(self) -> List[str]:
        """All output column names, grouped by context in spec order."""
        return [
            name
            for entry in self._entries.values()
            for names in entry.columns
            for name in names
        ]

    def inputs(self) -> List[str]:
        needed: List[str] = []
        for entry in self._entries.values():
            for k in entry.indicator.inputs:
                if k not in needed:
                    needed.append(k)
        return needed

    def update(self, bar: Mapping[str, Any]) -> Dict[str, Optional[float]]:
        """Advance every context by one bar and return ``{name: value}``."""
        missing = [k for k in self.inputs() if k not in bar]
        if missing:
            raise KeyError(f"bar is missing inputs {missing}")

        row: Dict[str, Optional[float]] = {}
        for entry in self._entries.values():
            ind = entry.indicator
            clean = {k: _opt(bar[k]) for k in ind.inputs + ind.optional if k in bar}
            values = ind.update(entry.context, clean, entry.params)
            for names in entry.columns:
                row.update(zip(names, values))
        return row

    def seed(self, df: "pd.DataFrame") -> "pd.DataFrame":  # noqa: F821
        """Feed every row of *df* and return the outputs as a DataFrame."""
        import pandas as pd
        records = [self.update(bar) for bar in df.to_dict("records")]
        return pd.DataFrame(records, index=df.index, columns=self.names, dtype=float)
