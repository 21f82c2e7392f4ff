"""Riparian disturbance (RDIS).

A site-independent index of human influence in the synthesized riparian
zone. It combines how often influences were recorded within the plot
(HIFPANYCIRCA_SYN) with the overall proximity-weighted intensity
(HIIALL_SYN)::

    RDIS = 1 - (1 - HIFPANYCIRCA_SYN) / (1 + HIIALL_SYN)

The index lies in [0, 1) and is classified directly through one global
threshold set; there is no expected value.
"""

from phabmet.indicators.base import IndicatorCalculator, register_indicator

__all__ = ['RiparianDisturbanceIndicator']


@register_indicator
class RiparianDisturbanceIndicator(IndicatorCalculator):
    name = "RDIS"
    config_key = "rdis"
    metrics = ("HIFPANYCIRCA_SYN", "HIIALL_SYN")
    modeled = False

    def observed(self, values):
        return 1.0 - (1.0 - values["HIFPANYCIRCA_SYN"]) / (1.0 + values["HIIALL_SYN"])
