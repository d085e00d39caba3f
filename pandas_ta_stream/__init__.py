# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    version = _dist_version("pandas_ta_stream")
except PackageNotFoundError:
    version = "0.0.0"

# Flat Structure. Supports ta.ema_make() or ta.stream.ema_make()
from pandas_ta_stream.stream import *
from pandas_ta_stream.stream import __all__ as stream_all

__all__ = ["version"] + stream_all
