from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from plotgrammar.errors import ScaleError
from plotgrammar.transforms import Transform, identity_trans


@dataclass
class ContinuousRange:
    range: tuple[float, float] | None = None

    def train(self, values: Any) -> tuple[float, float] | None:
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        finite = arr[np.isfinite(arr)]
        if finite.size == 0:
            return self.range
        lo = float(np.min(finite))
        hi = float(np.max(finite))
        if self.range is not None:
            lo = min(lo, self.range[0])
            hi = max(hi, self.range[1])
        self.range = (lo, hi)
        return self.range

    def reset(self) -> None:
        self.range = None


@dataclass
class DiscreteRange:
    range: tuple[Hashable, ...] | None = None

    def train(self, values: Iterable[Hashable]) -> tuple[Hashable, ...] | None:
        seen = set(self.range or ())
        seen.update(v for v in values if v is not None)
        if seen:
            self.range = tuple(sorted(seen, key=str))
        return self.range

    def reset(self) -> None:
        self.range = None


def _check_expand(expand: Sequence[float] | None) -> tuple[float, ...] | None:
    if expand is None:
        return None
    values = tuple(float(v) for v in expand)
    if len(values) not in (2, 4):
        raise ScaleError("scale `expand` must have 2 or 4 elements; use expansion()")
    return values


@dataclass
class ContinuousPositionScale:
    """Continuous x/y scale; limits and range live in transformed space."""

    trans: Transform = identity_trans
    limits: tuple[float | None, float | None] | None = None
    expand: tuple[float, ...] | None = None
    range_c: ContinuousRange = field(default_factory=ContinuousRange)

    def __post_init__(self) -> None:
        self.expand = _check_expand(self.expand)
        if self.limits is not None:
            if len(self.limits) != 2:
                raise ScaleError("continuous scale limits must have 2 elements")
            self.limits = tuple(
                None if v is None else float(self.trans.transform(np.asarray([v]))[0]) for v in self.limits
            )

    def is_discrete(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return self.range_c.range is None and self.limits is None

    def train(self, values: Any) -> None:
        self.range_c.train(self.trans.transform(np.asarray(values)))

    def get_limits(self) -> tuple[float, float]:
        if self.is_empty():
            return (0.0, 1.0)
        trained = self.range_c.range or (np.nan, np.nan)
        if self.limits is None:
            return trained
        return tuple(  # type: ignore[return-value]
            trained[i] if v is None or np.isnan(v) else v for i, v in enumerate(self.limits)
        )


@dataclass
class DiscretePositionScale:
    """Discrete x/y scale; categories sit at positions 1..n.

    Numeric values trained on the scale (jitter, dodged bars) go to ``range_c``.
    """

    limits: Sequence[Hashable] | None = None
    expand: tuple[float, ...] | None = None
    range_d: DiscreteRange = field(default_factory=DiscreteRange)
    range_c: ContinuousRange = field(default_factory=ContinuousRange)
    trans: Transform = identity_trans

    def __post_init__(self) -> None:
        self.expand = _check_expand(self.expand)
        if self.limits is not None:
            self.limits = tuple(self.limits)

    def is_discrete(self) -> bool:
        return True

    def train(self, values: Any) -> None:
        arr = np.asarray(values)
        if arr.dtype.kind in {"i", "u", "f"}:
            self.range_c.train(arr)
        else:
            self.range_d.train(arr.tolist())

    def get_limits(self) -> tuple[Hashable, ...] | None:
        if self.limits is not None:
            return tuple(self.limits)
        return self.range_d.range

    def map(self, values: Iterable[Hashable]) -> np.ndarray:
        limits = self.get_limits() or ()
        index = {v: i + 1 for i, v in enumerate(limits)}
        return np.asarray([index.get(v, np.nan) for v in values], dtype=np.float64)
