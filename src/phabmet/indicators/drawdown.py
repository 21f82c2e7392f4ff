"""Lake drawdown exposure (DRAWDOWN).

Observed is the mean vertical height of the exposed drawdown zone, read
as zero when negative. It is compared with the drawdown typical of lakes
of the same ecoregion and origin, so that reservoirs are not judged
against natural lakes.
"""

from phabmet.indicators.base import IndicatorCalculator, register_indicator

__all__ = ['DrawdownIndicator']


@register_indicator
class DrawdownIndicator(IndicatorCalculator):
    name = "DRAWDOWN"
    config_key = "drawdown"
    metrics = ("BFXVERTHEIGHT_DD",)

    def observed(self, values):
        return max(values["BFXVERTHEIGHT_DD"], 0.0)
