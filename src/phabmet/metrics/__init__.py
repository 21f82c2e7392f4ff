"""Category aggregators and drawdown zone synthesis.

- base: Aggregator contract and category registry
- synthesis: Standard/drawdown zone synthesizer
- tables: Slicing, coercion and code mapping helpers
- station_info, bank_features, fish_cover, macrophytes,
  riparian_vegetation, human_influence, substrate: one aggregator per category

Importing this package registers every aggregator.
"""

from phabmet.metrics.base import (
    CategoryAggregator,
    available_categories,
    get_aggregator,
    register_aggregator,
)
from phabmet.metrics.synthesis import SynthesisPolicy, ZoneSynthesizer, drawdown_extent
from phabmet.metrics.station_info import StationInfoAggregator
from phabmet.metrics.bank_features import BankFeaturesAggregator
from phabmet.metrics.fish_cover import FishCoverAggregator
from phabmet.metrics.macrophytes import AquaticMacrophyteAggregator
from phabmet.metrics.riparian_vegetation import RiparianVegetationAggregator
from phabmet.metrics.human_influence import HumanInfluenceAggregator
from phabmet.metrics.substrate import BottomSubstrateAggregator, ShorelineSubstrateAggregator

__all__ = [
    "CategoryAggregator",
    "available_categories",
    "get_aggregator",
    "register_aggregator",
    "SynthesisPolicy",
    "ZoneSynthesizer",
    "drawdown_extent",
    "StationInfoAggregator",
    "BankFeaturesAggregator",
    "FishCoverAggregator",
    "AquaticMacrophyteAggregator",
    "RiparianVegetationAggregator",
    "HumanInfluenceAggregator",
    "ShorelineSubstrateAggregator",
    "BottomSubstrateAggregator",
]
