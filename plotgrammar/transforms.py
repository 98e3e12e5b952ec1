from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Callable

import numpy as np

from plotgrammar.errors import InvalidArgumentError


ArrayFn = Callable[[Any], np.ndarray]


@dataclass(frozen=True)
class Transform:
    """Monotone forward/inverse pair between data space and display space."""

    name: str
    transform: ArrayFn
    inverse: ArrayFn

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvalidArgumentError("transform name must be non-empty")


def _as_float_array(values: Any) -> np.ndarray:
    arr = np.asarray(values)
    if arr.dtype.kind == "M":
        raise InvalidArgumentError("numeric transform cannot accept datetime values")
    if arr.dtype.kind == "O":
        arr = np.asarray([np.nan if v is None else v for v in arr.tolist()], dtype=object)
    try:
        return arr.astype(np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"transform expects numeric input, got {values!r}") from exc


def _identity(values: Any) -> np.ndarray:
    return _as_float_array(values)


def _reverse(values: Any) -> np.ndarray:
    return -_as_float_array(values)


def _reciprocal(values: Any) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return 1.0 / _as_float_array(values)


def _sqrt(values: Any) -> np.ndarray:
    with np.errstate(invalid="ignore"):
        return np.sqrt(_as_float_array(values))


def _square(values: Any) -> np.ndarray:
    return np.square(_as_float_array(values))


identity_trans = Transform("identity", _identity, _identity)
reverse_trans = Transform("reverse", _reverse, _reverse)
reciprocal_trans = Transform("reciprocal", _reciprocal, _reciprocal)
# Negative inputs map to NaN so expansion below zero falls back to the limit.
sqrt_trans = Transform("sqrt", _sqrt, _square)


def log_trans(base: float = math.e) -> Transform:
    if base <= 0 or base == 1:
        raise InvalidArgumentError("log base must be positive and != 1")
    log_base = math.log(base)

    def forward(values: Any) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log(_as_float_array(values)) / log_base

    def inverse(values: Any) -> np.ndarray:
        return np.power(base, _as_float_array(values))

    name = "log" if base == math.e else f"log-{base:g}"
    return Transform(name, forward, inverse)


log10_trans = log_trans(10)


def _date_forward(values: Any) -> np.ndarray:
    arr = np.asarray(values)
    if arr.dtype.kind != "M":
        raise InvalidArgumentError(f"date transform expects datetime64 values, got dtype {arr.dtype}")
    days = arr.astype("datetime64[D]")
    out = days.astype(np.int64).astype(np.float64)
    out[np.isnat(days)] = np.nan
    return out


def _date_inverse(values: Any) -> np.ndarray:
    arr = _as_float_array(values)
    out = np.full(arr.shape, np.datetime64("NaT"), dtype="datetime64[D]")
    finite = np.isfinite(arr)
    out[finite] = np.rint(arr[finite]).astype(np.int64).astype("datetime64[D]")
    return out


# Scale space is days since the unix epoch.
date_trans = Transform("date", _date_forward, _date_inverse)
