from __future__ import annotations


class PlotGrammarError(ValueError):
    pass


class InvalidArgumentError(PlotGrammarError):
    """Raised for malformed expansion or transform arguments."""


class ScaleError(PlotGrammarError):
    pass


class ThemeElementError(PlotGrammarError):
    pass
