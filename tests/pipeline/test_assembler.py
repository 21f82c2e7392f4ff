"""Tests for long/wide metric table assembly."""

import pandas as pd
import pytest

from phabmet.contracts import SchemaError
from phabmet.metrics.tables import empty_metrics
from phabmet.pipeline import MetricTableAssembler

pytestmark = pytest.mark.unit


def long_table(rows):
    return pd.DataFrame(rows, columns=["SITE", "METRIC", "VALUE"])


@pytest.fixture
def assembler(internal_config):
    return MetricTableAssembler(internal_config)


def test_assemble_is_an_outer_union(assembler):
    bank = long_table([("S2", "BFOANGLE", "STEEP"), ("S2", "BFNANGLE", 3.0)])
    fish = long_table([("S1", "FCIALL_LIT", 0.5)])

    long = assembler.assemble(bank, fish)

    assert list(long["SITE"]) == ["S1", "S2", "S2"]
    assert list(long["METRIC"]) == ["FCIALL_LIT", "BFNANGLE", "BFOANGLE"]


def test_assemble_rejects_repeated_metric(assembler):
    first = long_table([("S1", "SIXDEPTH", 2.0)])
    second = long_table([("S1", "SIXDEPTH", 2.5)])
    with pytest.raises(SchemaError, match="SIXDEPTH"):
        assembler.assemble(first, second)


def test_assemble_nothing(assembler):
    long = assembler.assemble(empty_metrics(), None)
    assert long.empty
    assert list(long.columns) == ["SITE", "METRIC", "VALUE"]


def test_wide_typing(assembler):
    long = long_table([
        ("S1", "BFOANGLE", "FLAT-STEEP"),
        ("S1", "SIXDEPTH", 2.0),
        ("S2", "SIXDEPTH", "3.5"),
    ])
    wide = assembler.to_wide(long)

    assert wide.index.name == "SITE"
    assert list(wide.columns) == ["BFOANGLE", "SIXDEPTH"]
    assert wide["SIXDEPTH"].dtype == float
    assert wide.loc["S2", "SIXDEPTH"] == 3.5
    assert wide["BFOANGLE"].dtype == object
    assert pd.isna(wide.loc["S2", "BFOANGLE"])


def test_non_numeric_value_in_numeric_metric(assembler):
    long = long_table([("S1", "SIXDEPTH", "deep")])
    with pytest.raises(SchemaError, match="SIXDEPTH"):
        assembler.to_wide(long)


def test_wide_round_trip(assembler):
    long = long_table([
        ("S1", "BFOANGLE", "GRADUAL"),
        ("S1", "HIIALL_SYN", 1.25),
        ("S2", "HIIALL_SYN", 0.0),
        ("S2", "SSOSUB", "SAND"),
    ])
    back = assembler.to_long(assembler.to_wide(long))

    assert set(map(tuple, back.to_numpy())) == set(map(tuple, long.to_numpy()))


def test_empty_wide(assembler):
    wide = assembler.to_wide(empty_metrics())
    assert wide.empty
    assert wide.index.name == "SITE"


def test_value_kind(assembler):
    assert assembler.value_kind("BFOANGLE") == "categorical"
    assert assembler.value_kind("BSOODOR") == "categorical"
    assert assembler.value_kind("FCFCBOULDERS_SIM") == "numeric"


def test_categorical_metrics_from_config(make_config):
    assembler = MetricTableAssembler(make_config(CATEGORICAL_METRICS=["sitelabel"]))
    long = long_table([("S1", "SITELABEL", "north basin")])

    assert assembler.value_kind("SITELABEL") == "categorical"
    assert assembler.to_wide(long).loc["S1", "SITELABEL"] == "north basin"
