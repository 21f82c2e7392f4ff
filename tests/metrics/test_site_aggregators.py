"""Tests for the station info, bank feature and substrate aggregators."""

import numpy as np
import pandas as pd
import pytest

from phabmet.contracts import InvalidCodeValue, TypeCoercionError
from phabmet.metrics import (
    BankFeaturesAggregator,
    BottomSubstrateAggregator,
    ShorelineSubstrateAggregator,
    StationInfoAggregator,
)
from phabmet.metrics.bank_features import angle_class
from tests.helpers.observations import make_observations, metric_value, station_rows

pytestmark = pytest.mark.unit


class TestStationInfo:

    def test_depth_summary(self, internal_config):
        obs = make_observations(station_rows("S1", "DEPTH_AT_STATION", ["1", "2", "3"]))
        long = StationInfoAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "SIXDEPTH") == pytest.approx(2.0)
        assert metric_value(long, "S1", "SIVDEPTH") == pytest.approx(1.0)
        assert metric_value(long, "S1", "SINDEPTH") == 3.0

    def test_surface_film_fraction(self, internal_config):
        obs = make_observations(station_rows("S1", "SURFACE_FILM", ["Y", "n", "N"]))
        long = StationInfoAggregator(internal_config).compute_from_observations(obs)
        assert metric_value(long, "S1", "SIFPSURFACE_FILM") == pytest.approx(1 / 3)

    def test_no_zone_tags(self, internal_config):
        obs = make_observations(station_rows("S1", "DEPTH_AT_STATION", ["1.5"]))
        long = StationInfoAggregator(internal_config).compute_from_observations(obs)
        assert not long["METRIC"].str.contains("_RIP|_SYN|_LIT|_SIM|_DD").any()

    def test_non_numeric_depth_raises(self, internal_config):
        obs = make_observations(station_rows("S7", "DEPTH_AT_STATION", ["1", "deep"]))
        with pytest.raises(TypeCoercionError) as excinfo:
            StationInfoAggregator(internal_config).compute_from_observations(obs)
        assert excinfo.value.values == ["DEEP"]
        assert excinfo.value.sites == ["S7"]


class TestAngleClass:

    def test_breaks_are_lower_inclusive(self, internal_config):
        vocab = internal_config.vocabularies
        degrees = pd.Series([0.0, 4.9, 5.0, 29.0, 30.0, 75.0, 90.0])
        classes = angle_class(degrees, vocab.angle_classes, vocab.angle_breaks)
        assert classes.tolist() == [
            "FLAT", "FLAT", "GRADUAL", "GRADUAL", "STEEP", "VERTICAL", "VERTICAL",
        ]


class TestBankFeatures:

    def test_mixed_codes_and_degrees(self, internal_config):
        obs = make_observations(station_rows("S1", "ANGLE", ["F", "G", "45", "5"]))
        long = BankFeaturesAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "BFFFLAT") == pytest.approx(0.25)
        assert metric_value(long, "S1", "BFFGRADUAL") == pytest.approx(0.5)
        assert metric_value(long, "S1", "BFFSTEEP") == pytest.approx(0.25)
        assert metric_value(long, "S1", "BFFVERTICAL") == 0.0
        assert metric_value(long, "S1", "BFNANGLE") == 4.0
        assert metric_value(long, "S1", "BFOANGLE") == "GRADUAL"

    def test_modal_tie_joined(self, internal_config):
        obs = make_observations(station_rows("S1", "ANGLE", ["F", "VERTICAL"]))
        long = BankFeaturesAggregator(internal_config).compute_from_observations(obs)
        assert metric_value(long, "S1", "BFOANGLE") == "FLAT-VERTICAL"

    @pytest.mark.parametrize("bad", ["95", "-1", "X"])
    def test_invalid_angle_raises(self, internal_config, bad):
        obs = make_observations(station_rows("S1", "ANGLE", ["F", bad]))
        with pytest.raises(InvalidCodeValue) as excinfo:
            BankFeaturesAggregator(internal_config).compute_from_observations(obs)
        assert excinfo.value.parameter == "ANGLE"

    def test_drawdown_presence_and_extent(self, internal_config):
        obs = make_observations(
            station_rows("S1", "DRAWDOWN", ["Y", "N"])
            + station_rows("S1", "HORIZ_DIST_DD", ["4", "6"])
            + station_rows("S1", "VERT_HEIGHT_DD", ["1.5", "2.5"])
        )
        long = BankFeaturesAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "BFFDRAWDOWN") == pytest.approx(0.5)
        assert metric_value(long, "S1", "BFXHORIZDIST_DD") == pytest.approx(5.0)
        assert metric_value(long, "S1", "BFNHORIZDIST_DD") == 2.0
        assert metric_value(long, "S1", "BFXVERTHEIGHT_DD") == pytest.approx(2.0)

    def test_unknown_drawdown_flag_raises(self, internal_config):
        obs = make_observations(station_rows("S1", "DRAWDOWN", ["MAYBE"]))
        with pytest.raises(InvalidCodeValue):
            BankFeaturesAggregator(internal_config).compute_from_observations(obs)


class TestShorelineSubstrate:

    def test_cover_and_diameter(self, internal_config):
        obs = make_observations(
            station_rows("S1", "SS_BOULDERS", ["4", "2"])
            + station_rows("S1", "SS_SAND", ["1", "3"])
        )
        long = ShorelineSubstrateAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "SSFCBOULDERS") == pytest.approx(0.5625)
        assert metric_value(long, "S1", "SSFCSAND") == pytest.approx(0.3125)
        assert metric_value(long, "S1", "SSOSUB") == "BOULDERS"

        boulders, sand = np.log10(1000.0), np.log10(0.346)
        station1 = (0.875 * boulders + 0.05 * sand) / 0.925
        station2 = (0.25 * boulders + 0.575 * sand) / 0.825
        assert metric_value(long, "S1", "SSXLDIA") == pytest.approx((station1 + station2) / 2)
        assert metric_value(long, "S1", "SSVLDIA") == pytest.approx(
            np.std([station1, station2], ddof=1)
        )

    def test_bare_site_has_no_dominant_class(self, internal_config):
        obs = make_observations(station_rows("S1", "SS_SAND", ["0", "0"]))
        long = ShorelineSubstrateAggregator(internal_config).compute_from_observations(obs)
        assert metric_value(long, "S1", "SSOSUB") == "NONE"
        assert np.isnan(metric_value(long, "S1", "SSXLDIA"))


class TestBottomSubstrate:

    def test_unknown_color_counts_as_other(self, internal_config, caplog):
        obs = make_observations(station_rows("S1", "BS_COLOR", ["black", "PURPLE"]))
        with caplog.at_level("WARNING", logger="phabmet"):
            long = BottomSubstrateAggregator(internal_config).compute_from_observations(obs)

        assert "BS_COLOR" in caplog.text
        assert metric_value(long, "S1", "BSFCOLORBLACK") == pytest.approx(0.5)
        assert metric_value(long, "S1", "BSFCOLOROTHER") == pytest.approx(0.5)
        assert metric_value(long, "S1", "BSOCOLOR") == "BLACK-OTHER"

    def test_odor_none_is_a_class(self, internal_config):
        obs = make_observations(
            station_rows("S1", "BS_ODOR", ["H2S", "H2S"])
            + station_rows("S2", "BS_ODOR", ["NONE"])
        )
        long = BottomSubstrateAggregator(internal_config).compute_from_observations(obs)

        assert metric_value(long, "S1", "BSFODORH2S") == pytest.approx(1.0)
        assert metric_value(long, "S1", "BSOODOR") == "H2S"
        assert metric_value(long, "S2", "BSFODORNONE") == pytest.approx(1.0)
        assert metric_value(long, "S2", "BSOODOR") == "NONE"
