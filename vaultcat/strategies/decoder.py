"""
Turns multicall results into :class:`StrategyData`.

Every strategy is described by seven calls (see
:func:`vaultcat.calls.build_strategy_calls`). Six of them return a single
value. The vault ``strategies`` getter returns a tuple whose layout
depends on the vault version:

+-----------------------+-------+------------------------------------------+
| Vault version         | Arity | Position 2 / 3 / 4                       |
+=======================+=======+==========================================+
| ``0.2.2``             | 8     | debtLimit / rateLimit / lastReport       |
+-----------------------+-------+------------------------------------------+
| ``0.3.0``, ``0.3.1``  | 8     | debtRatio / rateLimit / lastReport       |
+-----------------------+-------+------------------------------------------+
| any                   | 9     | debtRatio / minDebtPerHarvest /          |
|                       |       | maxDebtPerHarvest                        |
+-----------------------+-------+------------------------------------------+

The rows are checked top to bottom. A 9-tuple always uses the last
layout, whatever the version tag says. Any other arity leaves the
``strategies`` fields at their defaults.

Missing or malformed results never raise, the affected fields
just keep their default values.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple

from vaultcat.calls.abis import InterfaceVersion
from vaultcat.calls.call import CallKey
from vaultcat.strategies.strategy import Strategy
from vaultcat.strategies.strategy_data import StrategyData
from vaultcat.utils import short_address

logger = logging.getLogger(__name__)

Results = Mapping[CallKey, Sequence[Any]]

#: Single value uint calls and the fields they fill
UINT_CALLS = {
    "creditAvailable": "credit_available",
    "debtOutstanding": "debt_outstanding",
    "expectedReturn": "expected_return",
    "estimatedTotalAssets": "estimated_total_assets",
    "keepCRV": "keep_crv",
}

V022_LAYOUT = (
    "performance_fee",
    "activation",
    "debt_limit",
    "rate_limit",
    "last_report",
    "total_debt",
    "total_gain",
    "total_loss",
)

V030_LAYOUT = (
    "performance_fee",
    "activation",
    "debt_ratio",
    "rate_limit",
    "last_report",
    "total_debt",
    "total_gain",
    "total_loss",
)

CURRENT_LAYOUT = (
    "performance_fee",
    "activation",
    "debt_ratio",
    "min_debt_per_harvest",
    "max_debt_per_harvest",
    "last_report",
    "total_debt",
    "total_gain",
    "total_loss",
)


def strategies_layout(
    version: InterfaceVersion, arity: int
) -> Tuple[str, ...] | None:
    """
    Pick the fields layout of the ``strategies`` getter result.

    Args:
        version: vault interface version
        arity: number of values in the result

    Returns:
        :class:`StrategyData` attribute names by position,
        ``None`` if the result can't be mapped
    """
    if version == InterfaceVersion.V0_2_2 and arity == 8:
        return V022_LAYOUT
    if version in (InterfaceVersion.V0_3_0, InterfaceVersion.V0_3_1) and arity == 8:
        return V030_LAYOUT
    if arity == 9:
        return CURRENT_LAYOUT
    return None


def decode_strategy(strategy: Strategy, results: Results) -> StrategyData:
    """
    Build :class:`StrategyData` for a strategy from multicall results.

    Args:
        strategy: a strategy from the manifest
        results: output of :meth:`vaultcat.calls.MulticallService.execute`

    Returns:
        Normalized strategy data
    """
    name = strategy.address
    data = StrategyData()

    for method, attr in UINT_CALLS.items():
        value = _single(results.get(CallKey(name, method)))
        if _is_uint(value):
            setattr(data, attr, value)

    is_active = _single(results.get(CallKey(name, "isActive")))
    if isinstance(is_active, bool):
        data.is_active = is_active

    values = results.get(CallKey(name, "strategies"))
    if values is None:
        return data
    layout = strategies_layout(strategy.version, len(values))
    if layout is None:
        logger.debug(
            "Strategy %s: unexpected `strategies` arity %s for vault version `%s`",
            short_address(name),
            len(values),
            strategy.vault_version,
        )
        return data
    for attr, value in zip(layout, values):
        setattr(data, attr, value if _is_uint(value) else 0)
    return data


def decode_strategies(
    strategies: Iterable[Strategy], results: Results
) -> Dict[str, StrategyData]:
    """
    Build :class:`StrategyData` for every strategy of the manifest.

    Args:
        strategies: manifest of strategies
        results: output of :meth:`vaultcat.calls.MulticallService.execute`

    Returns:
        Strategy data by strategy address, one entry per strategy
    """
    out = {}
    for strategy in strategies:
        try:
            out[strategy.address] = decode_strategy(strategy, results)
        except (TypeError, ValueError):
            logger.error(
                "Could not decode strategy %s", strategy.address, exc_info=True
            )
            out[strategy.address] = StrategyData()
    return out


def _single(values: Sequence[Any] | None) -> Any:
    if values is None or len(values) != 1:
        return None
    return values[0]


def _is_uint(value: Any) -> bool:
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)
