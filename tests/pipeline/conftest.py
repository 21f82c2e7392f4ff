"""Pipeline fixtures: a two-lake survey touching every category."""

import pytest

from tests.helpers.observations import make_covariates, make_observations, station_rows


def lake_rows(site, canopy, fish, extent="4"):
    return (
        station_rows(site, "RV_CANOPY_BIG", [canopy, "2"])
        + station_rows(site, "RV_UNDERSTORY_WOODY", ["2", "2"])
        + station_rows(site, "RV_GROUND_NONWOODY", ["3", "1"])
        + station_rows(site, "RV_CANOPY", ["D", "M"])
        + station_rows(site, "RV_CANOPY_BIG_DD", ["1", "0"])
        + station_rows(site, "HI_BUILDINGS", ["C", "0"])
        + station_rows(site, "HI_ROADS", ["P", "P"])
        + station_rows(site, "HI_ROADS_DD", ["C", "0"])
        + station_rows(site, "FC_BOULDERS", [fish, "1"])
        + station_rows(site, "FC_SNAGS", ["2", "0"])
        + station_rows(site, "FC_BOULDERS_DD", ["1", "1"])
        + station_rows(site, "AM_SUBMERGENT", ["3", "2"])
        + station_rows(site, "AM_EMERGENT", ["1", "0"])
        + station_rows(site, "DEPTH_AT_STATION", ["1.2", "2.4"])
        + station_rows(site, "SURFACE_FILM", ["N", "N"])
        + station_rows(site, "ANGLE", ["G", "35"])
        + station_rows(site, "DRAWDOWN", ["Y", "Y"])
        + station_rows(site, "HORIZ_DIST_DD", [extent, extent])
        + station_rows(site, "VERT_HEIGHT_DD", ["0.5", "0.9"])
        + station_rows(site, "SS_COBBLE", ["3", "2"])
        + station_rows(site, "SS_SAND", ["1", "3"])
        + station_rows(site, "BS_SILT", ["4", "4"])
        + station_rows(site, "BS_COLOR", ["BROWN", "BROWN"])
        + station_rows(site, "BS_ODOR", ["NONE", "H2S"])
    )


@pytest.fixture
def survey():
    return make_observations(lake_rows("L1", "3", "4") + lake_rows("L2", "1", "2", extent="20"))


@pytest.fixture
def lake_covariates():
    return make_covariates(["L1", "L2"], ORIGIN=["NATURAL", "MAN_MADE"])
