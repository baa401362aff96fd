"""
ABI fragments for yearn vaults, strategies and Multicall3.

Yearn vaults changed the layout of the public ``strategies`` getter
over their history. :class:`InterfaceVersion` names the layouts we know
about and :func:`strategies_abi` picks the fragment for a version.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List


def _uint_outputs(*names: str) -> List[Dict[str, Any]]:
    return [{"name": name, "type": "uint256"} for name in names]


def _view(
    name: str,
    inputs: List[Dict[str, Any]],
    outputs: List[Dict[str, Any]],
) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": outputs,
    }


_STRATEGY_INPUT = [{"name": "strategy", "type": "address"}]


class InterfaceVersion(Enum):
    """
    Known vault interface versions.

    Every tag that is not listed explicitly is served by the
    current interface. This is a compatibility default, not an error.
    """

    V0_2_2 = "0.2.2"
    V0_3_0 = "0.3.0"
    V0_3_1 = "0.3.1"
    CURRENT = "current"

    @staticmethod
    def parse(tag: str | None) -> InterfaceVersion:
        """
        Convert vault version tag to :class:`InterfaceVersion`

        Args:
            tag: version tag as reported by the vault inventory, e.g. ``"0.3.0"``

        Returns:
            Matching version, :attr:`CURRENT` for unknown or empty tags
        """
        for version in InterfaceVersion:
            if version.value == tag:
                return version
        return InterfaceVersion.CURRENT


#: ``strategies`` getter of vaults 0.2.2
VAULT_V022_STRATEGIES_ABI = _view(
    "strategies",
    _STRATEGY_INPUT,
    _uint_outputs(
        "performanceFee",
        "activation",
        "debtLimit",
        "rateLimit",
        "lastReport",
        "totalDebt",
        "totalGain",
        "totalLoss",
    ),
)

#: ``strategies`` getter of vaults 0.3.0 and 0.3.1
VAULT_V030_STRATEGIES_ABI = _view(
    "strategies",
    _STRATEGY_INPUT,
    _uint_outputs(
        "performanceFee",
        "activation",
        "debtRatio",
        "rateLimit",
        "lastReport",
        "totalDebt",
        "totalGain",
        "totalLoss",
    ),
)

#: ``strategies`` getter of current vaults
VAULT_STRATEGIES_ABI = _view(
    "strategies",
    _STRATEGY_INPUT,
    _uint_outputs(
        "performanceFee",
        "activation",
        "debtRatio",
        "minDebtPerHarvest",
        "maxDebtPerHarvest",
        "lastReport",
        "totalDebt",
        "totalGain",
        "totalLoss",
    ),
)

VAULT_CREDIT_AVAILABLE_ABI = _view(
    "creditAvailable", _STRATEGY_INPUT, _uint_outputs("")
)
VAULT_DEBT_OUTSTANDING_ABI = _view(
    "debtOutstanding", _STRATEGY_INPUT, _uint_outputs("")
)
VAULT_EXPECTED_RETURN_ABI = _view("expectedReturn", _STRATEGY_INPUT, _uint_outputs(""))

STRATEGY_ESTIMATED_TOTAL_ASSETS_ABI = _view(
    "estimatedTotalAssets", [], _uint_outputs("")
)
STRATEGY_IS_ACTIVE_ABI = _view("isActive", [], [{"name": "", "type": "bool"}])
STRATEGY_KEEP_CRV_ABI = _view("keepCRV", [], _uint_outputs(""))

MULTICALL3_ABI = [
    {
        "name": "aggregate3",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "calls",
                "type": "tuple[]",
                "components": [
                    {"name": "target", "type": "address"},
                    {"name": "allowFailure", "type": "bool"},
                    {"name": "callData", "type": "bytes"},
                ],
            }
        ],
        "outputs": [
            {
                "name": "returnData",
                "type": "tuple[]",
                "components": [
                    {"name": "success", "type": "bool"},
                    {"name": "returnData", "type": "bytes"},
                ],
            }
        ],
    }
]


def strategies_abi(version: InterfaceVersion) -> Dict[str, Any]:
    """
    ABI of the vault ``strategies`` getter for a vault version.

    Args:
        version: vault interface version

    Returns:
        ABI fragment of the function
    """
    if version == InterfaceVersion.V0_2_2:
        return VAULT_V022_STRATEGIES_ABI
    if version in (InterfaceVersion.V0_3_0, InterfaceVersion.V0_3_1):
        return VAULT_V030_STRATEGIES_ABI
    return VAULT_STRATEGIES_ABI
