from plotgrammar.errors import InvalidArgumentError, PlotGrammarError, ScaleError, ThemeElementError
from plotgrammar.expansion import (
    RangeInfo,
    default_expansion,
    expand_limits_continuous_trans,
    expand_limits_discrete_trans,
    expand_limits_scale,
    expand_range4,
    expansion,
    scale_view_range,
)
from plotgrammar.scales import ContinuousPositionScale, DiscretePositionScale
from plotgrammar.transforms import Transform

__all__ = [
    "ContinuousPositionScale",
    "DiscretePositionScale",
    "InvalidArgumentError",
    "PlotGrammarError",
    "RangeInfo",
    "ScaleError",
    "ThemeElementError",
    "Transform",
    "default_expansion",
    "expand_limits_continuous_trans",
    "expand_limits_discrete_trans",
    "expand_limits_scale",
    "expand_range4",
    "expansion",
    "scale_view_range",
]
