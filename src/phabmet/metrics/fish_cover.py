"""Littoral fish cover metrics.

Eight cover types are recorded as cover classes at each littoral station,
in the standard littoral plot and, in some surveys, the drawdown zone.
Synthesized metrics carry the ``_SIM`` tag.
"""

from phabmet.metrics.base import register_aggregator
from phabmet.metrics.cover import CoverAggregator

__all__ = ['FishCoverAggregator']

FISH_COVER_TYPES = (
    "AQUATIC", "BOULDERS", "BRUSH", "LEDGES", "LIVETREES", "OVERHANG", "SNAGS", "STRUCTURES",
)


@register_aggregator
class FishCoverAggregator(CoverAggregator):
    """Fish cover: FCFC*, FCFP*, FCIALL, FCIBIG, FCINATURAL, FCFPALL, FCNALL."""

    category = "fish_cover"
    zone_type = "littoral"
    prefix = "FC"
    cover_parameters = {t: f"FC_{t}" for t in FISH_COVER_TYPES}
    parameters = tuple(cover_parameters.values())
    drawdown_parameters = parameters
    indices = {
        "IALL": FISH_COVER_TYPES,
        "IBIG": ("BOULDERS", "BRUSH", "LEDGES", "LIVETREES", "OVERHANG"),
        "INATURAL": tuple(t for t in FISH_COVER_TYPES if t != "STRUCTURES"),
    }
    any_presence_metric = "FCFPALL"
    count_metric = "FCNALL"
