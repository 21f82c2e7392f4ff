"""Tests for the riparian vegetation and human influence aggregators."""

import numpy as np
import pytest

from phabmet.contracts import InvalidCodeValue
from phabmet.metrics import HumanInfluenceAggregator, RiparianVegetationAggregator
from tests.helpers.observations import make_observations, metric_value, station_rows

pytestmark = pytest.mark.unit


@pytest.fixture
def vegetation_obs():
    return make_observations(
        station_rows("S1", "RV_CANOPY_BIG", ["3", "1"])
        + station_rows("S1", "RV_CANOPY_SMALL", ["0", "2"])
        + station_rows("S1", "RV_UNDERSTORY_WOODY", ["2", "2"])
        + station_rows("S1", "RV_GROUND_NONWOODY", ["4", "4"])
        + station_rows("S1", "RV_CANOPY", ["D", "C"])
        + station_rows("S1", "RV_UNDERSTORY", ["M", "M"])
    )


class TestRiparianVegetation:

    def test_layer_indices(self, internal_config, vegetation_obs):
        long = RiparianVegetationAggregator(internal_config).compute_from_observations(vegetation_obs)

        assert metric_value(long, "S1", "RVFCCANBIG_RIP") == pytest.approx(0.3125)
        assert metric_value(long, "S1", "RVICANOPY_RIP") == pytest.approx(0.4375)
        assert metric_value(long, "S1", "RVIUNDERSTORY_RIP") == pytest.approx(0.25)
        assert metric_value(long, "S1", "RVIGROUND_RIP") == pytest.approx(0.875)
        assert metric_value(long, "S1", "RVIWOODY_RIP") == pytest.approx(0.6875)
        assert metric_value(long, "S1", "RVITOTALVEG_RIP") == pytest.approx(1.5625)

    def test_type_frequencies(self, internal_config, vegetation_obs):
        long = RiparianVegetationAggregator(internal_config).compute_from_observations(vegetation_obs)

        assert metric_value(long, "S1", "RVFPCANDECIDUOUS_RIP") == pytest.approx(0.5)
        assert metric_value(long, "S1", "RVFPCANCONIFEROUS_RIP") == pytest.approx(0.5)
        assert metric_value(long, "S1", "RVFPCANMIXED_RIP") == 0.0
        assert metric_value(long, "S1", "RVFPUNDMIXED_RIP") == pytest.approx(1.0)

    def test_standard_only_synthesis_matches_standard(self, internal_config, vegetation_obs):
        long = RiparianVegetationAggregator(internal_config).compute_from_observations(vegetation_obs)
        rip = long[long["METRIC"].str.endswith("_RIP")]
        syn = long[long["METRIC"].str.endswith("_SYN")]

        assert len(rip) == len(syn)
        for metric, value in zip(rip["METRIC"], rip["VALUE"]):
            assert metric_value(long, "S1", metric[:-4] + "_SYN") == value

    def test_drawdown_types_are_pooled(self, internal_config, vegetation_obs):
        obs = make_observations(
            vegetation_obs.values.tolist() + station_rows("S1", "RV_CANOPY_DD", ["N", "N"])
        )
        long = RiparianVegetationAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "RVFPCANNONE_DD") == pytest.approx(1.0)
        assert metric_value(long, "S1", "RVFPCANNONE_SYN") == pytest.approx(0.5)
        assert metric_value(long, "S1", "RVFPCANDECIDUOUS_SYN") == pytest.approx(0.25)
        assert metric_value(long, "S1", "RVFPUNDMIXED_SYN") == pytest.approx(1.0)

    def test_unknown_vegetation_type_raises(self, internal_config):
        obs = make_observations(station_rows("S1", "RV_CANOPY", ["D", "PALM"]))
        with pytest.raises(InvalidCodeValue, match="RV_CANOPY"):
            RiparianVegetationAggregator(internal_config).compute_from_observations(obs)


@pytest.fixture
def influence_obs():
    return make_observations(
        station_rows("S1", "HI_BUILDINGS", ["C", "P"])
        + station_rows("S1", "HI_CROPS", ["0", "P"])
        + station_rows("S1", "HI_ROADS", ["0", "0"])
    )


class TestHumanInfluence:

    def test_standard_zone_metrics(self, internal_config, influence_obs):
        long = HumanInfluenceAggregator(internal_config).compute_from_observations(influence_obs)

        assert metric_value(long, "S1", "HIFPBUILDINGS_RIP") == pytest.approx(1.0)
        assert metric_value(long, "S1", "HIPWBUILDINGS_RIP") == pytest.approx(0.75)
        assert metric_value(long, "S1", "HIFPCROPS_RIP") == pytest.approx(0.5)
        assert metric_value(long, "S1", "HIFPROADS_RIP") == 0.0
        assert metric_value(long, "S1", "HIFPANY_RIP") == pytest.approx(1.0)
        assert metric_value(long, "S1", "HIFPANYCIRCA_RIP") == pytest.approx(0.5)
        assert metric_value(long, "S1", "HIIALL_RIP") == pytest.approx(1.0)
        assert metric_value(long, "S1", "HIIAG_RIP") == pytest.approx(0.25)
        assert metric_value(long, "S1", "HIINONAG_RIP") == pytest.approx(0.75)
        assert metric_value(long, "S1", "HIIALLCIRCA_RIP") == pytest.approx(0.5)
        assert metric_value(long, "S1", "HINALL_RIP") == 2.0

    def test_unrecorded_types_are_not_emitted(self, internal_config, influence_obs):
        long = HumanInfluenceAggregator(internal_config).compute_from_observations(influence_obs)
        assert np.isnan(metric_value(long, "S1", "HIFPDOCKS_RIP"))

    def test_standard_only_synthesis_matches_standard(self, internal_config, influence_obs):
        long = HumanInfluenceAggregator(internal_config).compute_from_observations(influence_obs)
        for metric in ("HIIALL", "HIFPANYCIRCA", "HIPWBUILDINGS", "HINALL"):
            assert metric_value(long, "S1", f"{metric}_SYN") == metric_value(long, "S1", f"{metric}_RIP")

    def test_drawdown_recombined_by_station_maximum(self, internal_config, influence_obs):
        obs = make_observations(
            influence_obs.values.tolist()
            + station_rows("S1", "HI_ROADS_DD", ["C", "0"])
            + station_rows("S1", "HI_BUILDINGS_DD", ["0", "C"])
        )
        long = HumanInfluenceAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "HIFPANY_DD") == pytest.approx(1.0)
        assert metric_value(long, "S1", "HIPWBUILDINGS_SYN") == pytest.approx(1.0)
        assert metric_value(long, "S1", "HIPWROADS_SYN") == pytest.approx(0.5)
        assert metric_value(long, "S1", "HIIALL_SYN") == pytest.approx(1.75)
        assert metric_value(long, "S1", "HIFPANYCIRCA_SYN") == pytest.approx(1.0)
        assert metric_value(long, "S1", "HIIALLCIRCA_SYN") == pytest.approx(1.5)
        assert metric_value(long, "S1", "HINALL_SYN") == 3.0

    def test_drawdown_only_site_has_no_synthesis(self, internal_config, influence_obs):
        obs = make_observations(
            influence_obs.values.tolist() + station_rows("S2", "HI_ROADS_DD", ["C"])
        )
        long = HumanInfluenceAggregator(internal_config).compute_from_observations(obs)
        assert metric_value(long, "S2", "HIFPROADS_DD") == pytest.approx(1.0)
        assert not long.loc[long["SITE"] == "S2", "METRIC"].str.endswith("_SYN").any()

    def test_unknown_proximity_code_raises(self, internal_config):
        obs = make_observations(station_rows("S1", "HI_LAWN", ["X"]))
        with pytest.raises(InvalidCodeValue):
            HumanInfluenceAggregator(internal_config).compute_from_observations(obs)
