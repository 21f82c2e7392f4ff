"""Habitat cover complexity indicators.

Both indicators average cover indices of the synthesized zone and compare
the result with a model of the cover expected at a least-disturbed lake
of the same ecoregion, origin, location, elevation and size.
"""

from phabmet.indicators.base import IndicatorCalculator, register_indicator

__all__ = ['RiparianVegetationComplexity', 'LittoralCoverComplexity']


@register_indicator
class RiparianVegetationComplexity(IndicatorCalculator):
    """RVEGQ: mean of canopy, understory and ground cover indices."""

    name = "RVEGQ"
    config_key = "rvegq"
    metrics = ("RVICANOPY_SYN", "RVIUNDERSTORY_SYN", "RVIGROUND_SYN")

    def observed(self, values):
        return sum(values[m] for m in self.metrics) / len(self.metrics)


@register_indicator
class LittoralCoverComplexity(IndicatorCalculator):
    """LITCVRQ: mean of natural fish cover and total macrophyte cover."""

    name = "LITCVRQ"
    config_key = "litcvrq"
    metrics = ("FCINATURAL_SIM", "AMIALL_SIM")

    def observed(self, values):
        return (values["FCINATURAL_SIM"] + values["AMIALL_SIM"]) / 2.0
