import logging
from typing import Any, Dict, List, Sequence
import pytest
from hypothesis import given
from hypothesis.strategies import lists

from fixtures.generators import strategy
from vaultcat.calls import CallKey, InterfaceVersion
from vaultcat.strategies import Strategy, StrategyData, decode_strategies, decode_strategy
from vaultcat.strategies.decoder import (
    CURRENT_LAYOUT,
    V022_LAYOUT,
    V030_LAYOUT,
    strategies_layout,
)

VAULT = "0xdA816459F1AB5631232FE5e97a05BBBb94970c95"
STRATEGY = "0x2B2944CF56C7eE7B3DaE0A79C6DB0c4A5cbD5D63"
EIGHT = (100, 200, 300, 400, 500, 600, 700, 800)
NINE = (1, 2, 3, 4, 5, 6, 7, 8, 9)


def results_for(name: str, values: Dict[str, Sequence[Any]]) -> Dict[CallKey, Sequence[Any]]:
    return {CallKey(name, method): v for method, v in values.items()}


def single_values() -> Dict[str, Sequence[Any]]:
    return {
        "creditAvailable": (11,),
        "debtOutstanding": (12,),
        "expectedReturn": (13,),
        "estimatedTotalAssets": (14,),
        "keepCRV": (15,),
        "isActive": (True,),
    }


def test_v022_eight_values():
    s = Strategy(1, VAULT, STRATEGY, "0.2.2")
    data = decode_strategy(s, results_for(STRATEGY, {"strategies": EIGHT}))
    assert data == StrategyData(
        performance_fee=100,
        activation=200,
        debt_limit=300,
        rate_limit=400,
        last_report=500,
        total_debt=600,
        total_gain=700,
        total_loss=800,
    )
    assert data.debt_ratio == 0


@pytest.mark.parametrize("version", ["0.3.0", "0.3.1"])
def test_v030_eight_values(version: str):
    s = Strategy(1, VAULT, STRATEGY, version)
    data = decode_strategy(s, results_for(STRATEGY, {"strategies": EIGHT}))
    assert data == StrategyData(
        performance_fee=100,
        activation=200,
        debt_ratio=300,
        rate_limit=400,
        last_report=500,
        total_debt=600,
        total_gain=700,
        total_loss=800,
    )
    assert data.debt_limit == 0


@pytest.mark.parametrize("version", ["0.2.2", "0.3.0", "0.3.1", "0.4.3", "", "unknown"])
def test_nine_values_regardless_of_version(version: str):
    s = Strategy(1, VAULT, STRATEGY, version)
    data = decode_strategy(s, results_for(STRATEGY, {"strategies": NINE}))
    assert data == StrategyData(
        performance_fee=1,
        activation=2,
        debt_ratio=3,
        min_debt_per_harvest=4,
        max_debt_per_harvest=5,
        last_report=6,
        total_debt=7,
        total_gain=8,
        total_loss=9,
    )


@pytest.mark.parametrize(
    "version,values",
    [
        ("0.4.3", EIGHT),
        ("", EIGHT),
        ("0.2.2", EIGHT[:7]),
        ("0.3.0", NINE + (10,)),
        ("0.4.3", ()),
        ("0.4.3", (NINE,)),
    ],
)
def test_unexpected_arity_keeps_defaults(version: str, values: Sequence[Any]):
    s = Strategy(1, VAULT, STRATEGY, version)
    results = results_for(STRATEGY, {**single_values(), "strategies": values})
    data = decode_strategy(s, results)
    expected = decode_strategy(s, results_for(STRATEGY, single_values()))
    assert data == expected
    assert data.credit_available == 11


def test_all_fields():
    s = Strategy(1, VAULT, STRATEGY, "0.4.3")
    data = decode_strategy(
        s, results_for(STRATEGY, {**single_values(), "strategies": NINE})
    )
    assert data.credit_available == 11
    assert data.debt_outstanding == 12
    assert data.expected_return == 13
    assert data.estimated_total_assets == 14
    assert data.keep_crv == 15
    assert data.is_active is True
    assert data.total_loss == 9


@pytest.mark.parametrize(
    "method,attr,default",
    [
        ("creditAvailable", "credit_available", 0),
        ("debtOutstanding", "debt_outstanding", 0),
        ("expectedReturn", "expected_return", 0),
        ("estimatedTotalAssets", "estimated_total_assets", 0),
        ("keepCRV", "keep_crv", 0),
        ("isActive", "is_active", False),
    ],
)
def test_missing_result_defaults_only_its_field(method: str, attr: str, default: Any):
    s = Strategy(1, VAULT, STRATEGY, "0.4.3")
    values = {**single_values(), "strategies": NINE}
    full = decode_strategy(s, results_for(STRATEGY, values))
    del values[method]
    data = decode_strategy(s, results_for(STRATEGY, values))

    assert getattr(data, attr) == default
    assert getattr(data, attr) != getattr(full, attr)
    data_dict, full_dict = data.to_dict(), full.to_dict()
    differing = [k for k in full_dict if data_dict[k] != full_dict[k]]
    assert len(differing) == 1


@pytest.mark.parametrize(
    "method,values",
    [
        ("creditAvailable", (True,)),
        ("creditAvailable", (1, 2)),
        ("creditAvailable", ()),
        ("creditAvailable", ((1,),)),
        ("isActive", (1,)),
        ("isActive", (True, False)),
    ],
)
def test_mistyped_results_are_ignored(method: str, values: Sequence[Any]):
    s = Strategy(1, VAULT, STRATEGY, "0.4.3")
    data = decode_strategy(s, results_for(STRATEGY, {method: values}))
    assert data == StrategyData()


def test_mistyped_element_in_layout():
    s = Strategy(1, VAULT, STRATEGY, "0.2.2")
    values = (100, b"\x00", 300, 400, 500, 600, 700, False)
    data = decode_strategy(s, results_for(STRATEGY, {"strategies": values}))
    assert data.performance_fee == 100
    assert data.activation == 0
    assert data.debt_limit == 300
    assert data.total_loss == 0


def test_results_of_other_strategies_are_ignored():
    s = Strategy(1, VAULT, STRATEGY, "0.4.3")
    other = "0x0000000000000000000000000000000000000001"
    data = decode_strategy(s, results_for(other, {**single_values(), "strategies": NINE}))
    assert data == StrategyData()


@pytest.mark.parametrize(
    "version,arity,layout",
    [
        (InterfaceVersion.V0_2_2, 8, V022_LAYOUT),
        (InterfaceVersion.V0_3_0, 8, V030_LAYOUT),
        (InterfaceVersion.V0_3_1, 8, V030_LAYOUT),
        (InterfaceVersion.CURRENT, 8, None),
        (InterfaceVersion.V0_2_2, 9, CURRENT_LAYOUT),
        (InterfaceVersion.CURRENT, 9, CURRENT_LAYOUT),
        (InterfaceVersion.V0_3_0, 7, None),
        (InterfaceVersion.CURRENT, 10, None),
    ],
)
def test_strategies_layout(version, arity, layout):
    assert strategies_layout(version, arity) == layout


@given(lists(strategy(), max_size=20))
def test_one_record_per_strategy(strategies: List[Strategy]):
    results = {}
    for s in strategies[::2]:
        results.update(results_for(s.address, {**single_values(), "strategies": NINE}))
    records = decode_strategies(strategies, results)
    assert set(records.keys()) == set(s.address for s in strategies)
    for s in strategies:
        assert isinstance(records[s.address], StrategyData)


def test_unexpected_arity_logs_version_tag(caplog):
    s = Strategy(1, VAULT, STRATEGY, "0.4.3-beta")
    assert s.version == InterfaceVersion.CURRENT
    with caplog.at_level(logging.DEBUG, logger="vaultcat.strategies.decoder"):
        decode_strategy(s, results_for(STRATEGY, {"strategies": EIGHT}))
    assert "`0.4.3-beta`" in caplog.text
