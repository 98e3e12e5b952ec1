from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from numbers import Real
from typing import Any, Protocol

import numpy as np

from plotgrammar.errors import InvalidArgumentError
from plotgrammar.transforms import Transform, identity_trans


LOGGER = logging.getLogger(__name__)

Expansion = tuple[float, float, float, float]
Limits = tuple[float, float]

ZERO_EXPANSION: Expansion = (0.0, 0.0, 0.0, 0.0)
_ZERO_RANGE_TOL = 1000 * np.finfo(np.float64).eps


class ContinuousRangeLike(Protocol):
    range: Limits | None


class ScaleLike(Protocol):
    expand: Sequence[float] | None
    range_c: ContinuousRangeLike
    trans: Transform

    def is_discrete(self) -> bool: ...

    def get_limits(self) -> Any: ...


@dataclass(frozen=True)
class RangeInfo:
    """Expanded range in scale space and in coordinate space."""

    continuous_range: Limits
    continuous_range_coord: Limits


def _numeric_vector(value: Any, *, label: str, lengths: tuple[int, ...]) -> np.ndarray:
    if isinstance(value, np.ndarray):
        if value.ndim > 1 or value.dtype.kind not in {"i", "u", "f"}:
            raise InvalidArgumentError(f"`{label}` must be a numeric vector")
        items = value.reshape(-1).tolist()
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        items = list(value)
    else:
        items = [value]

    for item in items:
        if isinstance(item, bool) or not isinstance(item, (Real, np.integer, np.floating)):
            raise InvalidArgumentError(f"`{label}` must be a numeric vector, got {value!r}")
    if len(items) not in lengths:
        raise InvalidArgumentError(
            f"`{label}` must have {' or '.join(str(n) for n in lengths)} elements, got {len(items)}"
        )
    return np.asarray(items, dtype=np.float64)


def expansion(mult: Any = 0, add: Any = 0) -> Expansion:
    """Build a 4-element expansion vector ``(mult_lo, add_lo, mult_hi, add_hi)``.

    Length-1 ``mult``/``add`` apply to both ends; length-2 values give the lower
    and upper end separately.
    """

    mult_v = np.resize(_numeric_vector(mult, label="mult", lengths=(1, 2)), 2)
    add_v = np.resize(_numeric_vector(add, label="add", lengths=(1, 2)), 2)
    return (float(mult_v[0]), float(add_v[0]), float(mult_v[1]), float(add_v[1]))


DEFAULT_DISCRETE_EXPANSION = expansion(add=0.6)
DEFAULT_CONTINUOUS_EXPANSION = expansion(mult=0.05)


def zero_range(lo: float, hi: float, tol: float = _ZERO_RANGE_TOL) -> bool:
    if lo == hi:
        return True
    if not (np.isfinite(lo) and np.isfinite(hi)):
        return False
    m = min(abs(lo), abs(hi))
    if m == 0:
        return False
    return bool(abs((lo - hi) / m) < tol)


def expand_range(limits: Sequence[float], mul: float = 0.0, add: float = 0.0, zero_width: float = 1.0) -> Limits:
    lo, hi = (float(v) for v in _pair(limits, label="limits"))
    width = zero_width if zero_range(lo, hi) else hi - lo
    # inf * 0 is a NaN endpoint; callers fall back to the unexpanded limit.
    with np.errstate(invalid="ignore"):
        pad = float(np.float64(width) * mul + add)
    return (lo - pad, hi + pad)


def expand_range4(limits: Sequence[float], expand: Any) -> Limits:
    expand_v = _numeric_vector(expand, label="expand", lengths=(2, 4))
    lo, hi = (float(v) for v in _pair(limits, label="limits"))
    if not np.isfinite(lo) and not np.isfinite(hi):
        return (-np.inf, np.inf)

    # Two constants are reused for both ends.
    if expand_v.size == 2:
        expand_v = np.concatenate([expand_v, expand_v])

    lower = expand_range((lo, hi), expand_v[0], expand_v[1])[0]
    upper = expand_range((lo, hi), expand_v[2], expand_v[3])[1]
    return (lower, upper)


def default_expansion(
    scale: ScaleLike,
    discrete: Sequence[float] = DEFAULT_DISCRETE_EXPANSION,
    continuous: Sequence[float] = DEFAULT_CONTINUOUS_EXPANSION,
    expand: bool = True,
) -> Sequence[float]:
    if not expand:
        return ZERO_EXPANSION
    if scale.expand is not None:
        return scale.expand
    return discrete if scale.is_discrete() else continuous


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, np.datetime64):
        return bool(np.isnat(value))
    try:
        return bool(np.isnan(value))
    except TypeError:
        return False


def _pair(values: Any, *, label: str) -> list[Any]:
    items = list(np.asarray(values, dtype=object).reshape(-1).tolist()) if values is not None else [None, None]
    if len(items) != 2:
        raise InvalidArgumentError(f"`{label}` must have exactly 2 elements, got {len(items)}")
    return items


def expand_limits_scale(
    scale: ScaleLike,
    expand: Sequence[float] = ZERO_EXPANSION,
    limits: Any = None,
    coord_limits: Any = None,
    *,
    trans: Transform = identity_trans,
) -> RangeInfo:
    if limits is None:
        limits = scale.get_limits()

    if scale.is_discrete():
        if coord_limits is None:
            coord_limits = (None, None)
        return expand_limits_discrete_trans(
            limits,
            expand,
            coord_limits,
            trans,
            range_continuous=scale.range_c.range,
        )

    # Date/time transforms reject raw numeric NaN; the inverse produces a
    # placeholder of the right type for the forward transform.
    if coord_limits is None:
        coord_limits = scale.trans.inverse(np.array([np.nan, np.nan]))
    coord_limits_scale = scale.trans.transform(np.asarray(coord_limits))
    return expand_limits_continuous_trans(limits, expand, coord_limits_scale, trans)


def expand_limits_continuous(
    limits: Sequence[float],
    expand: Sequence[float] = ZERO_EXPANSION,
    coord_limits: Any = (None, None),
) -> Limits:
    return expand_limits_continuous_trans(limits, expand, coord_limits).continuous_range


def expand_limits_discrete(
    limits: Sequence[Any] | None,
    expand: Sequence[float] = ZERO_EXPANSION,
    coord_limits: Any = (None, None),
    range_continuous: Sequence[float] | None = None,
) -> Limits:
    return expand_limits_discrete_trans(
        limits,
        expand,
        coord_limits,
        range_continuous=range_continuous,
    ).continuous_range


def expand_limits_continuous_trans(
    limits: Sequence[float],
    expand: Sequence[float] = ZERO_EXPANSION,
    coord_limits: Any = (None, None),
    trans: Transform = identity_trans,
) -> RangeInfo:
    limit_pair = _pair(limits, label="limits")
    override = _pair(coord_limits, label="coord_limits")
    merged = np.asarray(
        [lim if _is_unset(cl) else cl for lim, cl in zip(limit_pair, override)],
        dtype=np.float64,
    )

    coord = np.asarray(trans.transform(merged), dtype=np.float64)

    # Reciprocal/reverse transforms hand back a decreasing pair; expand it in
    # increasing order so the lower side keeps the lower expansion.
    if np.all(np.isfinite(coord)) and coord[1] - coord[0] < 0:
        lo, hi = expand_range4(coord[::-1], expand)
        coord_range = (hi, lo)
    else:
        coord_range = expand_range4(coord, expand)

    final = np.asarray(trans.inverse(np.asarray(coord_range)), dtype=np.float64)
    continuous_range = np.where(np.isfinite(final), final, merged)
    if not np.all(np.isfinite(final)):
        LOGGER.debug("expanded range %s left the %s domain; keeping %s", coord_range, trans.name, merged)

    return RangeInfo(
        continuous_range=(float(continuous_range[0]), float(continuous_range[1])),
        continuous_range_coord=(float(coord_range[0]), float(coord_range[1])),
    )


def expand_limits_discrete_trans(
    limits: Sequence[Any] | None,
    expand: Sequence[float] = ZERO_EXPANSION,
    coord_limits: Any = (None, None),
    trans: Transform = identity_trans,
    range_continuous: Sequence[float] | None = None,
) -> RangeInfo:
    n_limits = 0 if limits is None else len(limits)

    if n_limits == 0 and range_continuous is None:
        return expand_limits_continuous_trans((0.0, 1.0), expand, coord_limits, trans)
    if n_limits == 0:
        return expand_limits_continuous_trans(range_continuous, expand, coord_limits, trans)
    if range_continuous is None:
        return expand_limits_continuous_trans((1.0, float(n_limits)), expand, coord_limits, trans)

    discrete = expand_limits_continuous_trans((1.0, float(n_limits)), expand, coord_limits, trans)
    # The discrete padding already covers the continuous values; only let them widen it.
    continuous = expand_limits_continuous_trans(range_continuous, ZERO_EXPANSION, coord_limits, trans)
    return RangeInfo(
        continuous_range=_union(discrete.continuous_range, continuous.continuous_range),
        continuous_range_coord=_union(discrete.continuous_range_coord, continuous.continuous_range_coord),
    )


def _union(a: Limits, b: Limits) -> Limits:
    values = (*a, *b)
    return (min(values), max(values))


def scale_view_range(
    scale: ScaleLike,
    coord_limits: Any = None,
    expand: bool = True,
    trans: Transform = identity_trans,
) -> RangeInfo:
    """Expanded panel range for ``scale`` as a Cartesian coordinate system sets it up."""

    return expand_limits_scale(
        scale,
        default_expansion(scale, expand=expand),
        coord_limits=coord_limits,
        trans=trans,
    )
