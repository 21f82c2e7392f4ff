"""Littoral aquatic macrophyte cover metrics."""

from phabmet.metrics.base import register_aggregator
from phabmet.metrics.cover import CoverAggregator

__all__ = ['AquaticMacrophyteAggregator']


@register_aggregator
class AquaticMacrophyteAggregator(CoverAggregator):
    """Emergent, floating, submergent and total macrophyte cover.

    AMIALL sums the three growth forms; AMITOTAL is the mean total cover.
    Synthesized metrics carry the ``_SIM`` tag.
    """

    category = "aquatic_macrophytes"
    zone_type = "littoral"
    prefix = "AM"
    cover_parameters = {
        "EMERGENT": "AM_EMERGENT",
        "FLOATING": "AM_FLOATING",
        "SUBMERGENT": "AM_SUBMERGENT",
        "TOTALCOVER": "AM_TOTALCOVER",
    }
    parameters = tuple(cover_parameters.values())
    drawdown_parameters = parameters
    indices = {
        "IALL": ("EMERGENT", "FLOATING", "SUBMERGENT"),
        "ITOTAL": ("TOTALCOVER",),
    }
    any_presence_metric = "AMFPALL"
