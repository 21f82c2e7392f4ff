"""Indicator model and threshold schemas.

Expected-value models and threshold tables are pre-fit artifacts. They
are consumed here, never derived. Both are keyed by ``"{ECOREGION}|{ORIGIN}"``
where either part may be the wildcard ``ANY``.
"""

import math
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from phabmet.schemas.base import PhabBaseModel, PhabFrozenModel

WILDCARD = "ANY"


def lookup_keys(ecoregion: str, origin: str) -> list[str]:
    """Model/threshold keys to try for a site, most specific first."""
    return [
        f"{ecoregion}|{origin}",
        f"{ecoregion}|{WILDCARD}",
        f"{WILDCARD}|{origin}",
        f"{WILDCARD}|{WILDCARD}",
    ]


class ExpectedValueModel(PhabFrozenModel):
    """Linear expected-value model on site covariates.

    prediction = intercept + lat * LAT_DD + lon * LON_DD
                 + elevation * ELEVATION + log_area * log10(AREA_HA)

    With ``transform="log10"`` the prediction is on the log10(x + offset)
    scale and is back-transformed as ``10 ** prediction - offset``.
    """

    intercept: float
    lat: float = 0.0
    lon: float = 0.0
    elevation: float = 0.0
    log_area: float = 0.0
    transform: Literal["identity", "log10"] = "identity"
    offset: float = Field(0.0, ge=0)

    def required_covariates(self) -> list[str]:
        """Covariate columns with a nonzero coefficient."""
        names = {"lat": "LAT_DD", "lon": "LON_DD", "elevation": "ELEVATION", "log_area": "AREA_HA"}
        return [col for attr, col in names.items() if getattr(self, attr) != 0.0]

    def predict(self, lat=0.0, lon=0.0, elevation=0.0, area=1.0) -> float:
        """Back-transformed expected value (may be non-positive or NaN)."""
        log_area = 0.0
        if self.log_area != 0.0:
            if not area > 0:
                return float("nan")
            log_area = math.log10(area)
        y = (self.intercept + self.lat * lat + self.lon * lon
             + self.elevation * elevation + self.log_area * log_area)
        if self.transform == "log10":
            try:
                return 10.0 ** y - self.offset
            except OverflowError:
                return float("nan")
        return y


class ThresholdSet(PhabFrozenModel):
    """Ordered cut points; ``len(classes) == len(cuts) + 1`` is checked by the owner."""

    cuts: tuple[float, ...]

    @field_validator("cuts")
    @classmethod
    def strictly_ascending(cls, v):
        """Cut points must be finite and strictly increasing."""
        if any(not math.isfinite(c) for c in v):
            raise ValueError("threshold cut points must be finite")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"threshold cut points must be strictly ascending, got {v}")
        return v


class IndicatorConfig(PhabBaseModel):
    """One indicator's classes, thresholds and (optionally) expected-value models.

    ``classes`` are ordered by increasing ratio (or index, for
    site-independent indicators).
    """
    classes: tuple[str, ...]
    thresholds: dict[str, ThresholdSet]
    models: dict[str, ExpectedValueModel] = Field(default_factory=dict)
    required_covariates: tuple[str, ...] = ()

    @model_validator(mode="after")
    def thresholds_match_classes(self):
        """Every threshold set partitions the line into len(classes) intervals."""
        if len(self.classes) < 2:
            raise ValueError("an indicator needs at least two condition classes")
        for key, ts in self.thresholds.items():
            if len(ts.cuts) != len(self.classes) - 1:
                raise ValueError(
                    f"threshold set '{key}' has {len(ts.cuts)} cuts for "
                    f"{len(self.classes)} classes"
                )
        return self

    def find_model(self, ecoregion: str, origin: str) -> Optional[ExpectedValueModel]:
        for key in lookup_keys(ecoregion, origin):
            if key in self.models:
                return self.models[key]
        return None

    def find_thresholds(self, ecoregion: str = WILDCARD, origin: str = WILDCARD) -> Optional[ThresholdSet]:
        for key in lookup_keys(ecoregion, origin):
            if key in self.thresholds:
                return self.thresholds[key]
        return None
