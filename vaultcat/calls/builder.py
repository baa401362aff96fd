"""
Builds the multicall calls needed to describe a strategy.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Sequence
from eth_abi.exceptions import EncodingError

from vaultcat.calls.abis import (
    STRATEGY_ESTIMATED_TOTAL_ASSETS_ABI,
    STRATEGY_IS_ACTIVE_ABI,
    STRATEGY_KEEP_CRV_ABI,
    VAULT_CREDIT_AVAILABLE_ABI,
    VAULT_DEBT_OUTSTANDING_ABI,
    VAULT_EXPECTED_RETURN_ABI,
    InterfaceVersion,
    strategies_abi,
)
from vaultcat.calls.call import Call, encode_call
from vaultcat.utils import short_address

if TYPE_CHECKING:
    from vaultcat.strategies.strategy import Strategy

logger = logging.getLogger(__name__)


def build_strategy_calls(
    name: str, vault: str, strategy: str, version: InterfaceVersion
) -> List[Call]:
    """
    Build calls for one strategy.

    Vault methods are called on ``vault`` with the strategy address
    as an argument, strategy methods are called on ``strategy`` itself.
    The ``strategies`` getter ABI depends on ``version``.

    If a method can't be encoded, it's skipped and its result
    will be missing, the rest of the calls are still built.

    Args:
        name: name of the entity, used to match results to calls
        vault: vault address
        strategy: strategy address
        version: vault interface version

    Returns:
        A list of up to seven calls
    """
    specs: List[tuple[Dict[str, Any], str, Sequence[Any]]] = [
        (VAULT_CREDIT_AVAILABLE_ABI, vault, [strategy]),
        (VAULT_DEBT_OUTSTANDING_ABI, vault, [strategy]),
        (VAULT_EXPECTED_RETURN_ABI, vault, [strategy]),
        (strategies_abi(version), vault, [strategy]),
        (STRATEGY_ESTIMATED_TOTAL_ASSETS_ABI, strategy, []),
        (STRATEGY_IS_ACTIVE_ABI, strategy, []),
        (STRATEGY_KEEP_CRV_ABI, strategy, []),
    ]
    calls = []
    for abi, target, args in specs:
        try:
            calls.append(encode_call(abi, target, name, version, args))
        except (EncodingError, TypeError, ValueError):
            logger.warning(
                "Could not encode `%s` for strategy %s",
                abi["name"],
                short_address(name),
                exc_info=True,
            )
    return calls


def build_calls(strategies: Iterable[Strategy]) -> List[Call]:
    """
    Build calls for every strategy of the manifest.

    Args:
        strategies: manifest of strategies

    Returns:
        Calls in the order of strategies
    """
    calls = []
    for strategy in strategies:
        calls.extend(
            build_strategy_calls(
                strategy.address,
                strategy.vault,
                strategy.address,
                strategy.version,
            )
        )
    return calls
