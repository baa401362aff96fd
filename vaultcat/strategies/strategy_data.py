from __future__ import annotations
import json
from typing import Any, Dict

#: Numeric fields and their keys in dict form
UINT_FIELDS = {
    "credit_available": "creditAvailable",
    "debt_outstanding": "debtOutstanding",
    "expected_return": "expectedReturn",
    "estimated_total_assets": "estimatedTotalAssets",
    "keep_crv": "keepCRV",
    "performance_fee": "performanceFee",
    "activation": "activation",
    "debt_limit": "debtLimit",
    "debt_ratio": "debtRatio",
    "rate_limit": "rateLimit",
    "min_debt_per_harvest": "minDebtPerHarvest",
    "max_debt_per_harvest": "maxDebtPerHarvest",
    "last_report": "lastReport",
    "total_debt": "totalDebt",
    "total_gain": "totalGain",
    "total_loss": "totalLoss",
}


class StrategyData:
    """
    On-chain state of a strategy, normalized across vault versions.

    Every field that couldn't be fetched stays at its default:
    ``0`` for numbers and ``False`` for :attr:`is_active`.
    Fields that don't exist for the vault version (e.g. :attr:`debt_limit`
    for current vaults) stay at the default too.
    """

    #: ``creditAvailable(strategy)`` of the vault
    credit_available: int
    #: ``debtOutstanding(strategy)`` of the vault
    debt_outstanding: int
    #: ``expectedReturn(strategy)`` of the vault
    expected_return: int
    #: ``estimatedTotalAssets()`` of the strategy
    estimated_total_assets: int
    #: ``keepCRV()`` of the strategy
    keep_crv: int
    #: ``isActive()`` of the strategy
    is_active: bool
    performance_fee: int
    #: Activation timestamp
    activation: int
    #: Vaults 0.2.2 only
    debt_limit: int
    #: Vaults 0.3.0 and later
    debt_ratio: int
    #: Vaults before 0.3.2
    rate_limit: int
    #: Current vaults only
    min_debt_per_harvest: int
    #: Current vaults only
    max_debt_per_harvest: int
    #: Last report timestamp
    last_report: int
    total_debt: int
    total_gain: int
    total_loss: int

    def __init__(
        self,
        credit_available: int = 0,
        debt_outstanding: int = 0,
        expected_return: int = 0,
        estimated_total_assets: int = 0,
        keep_crv: int = 0,
        is_active: bool = False,
        performance_fee: int = 0,
        activation: int = 0,
        debt_limit: int = 0,
        debt_ratio: int = 0,
        rate_limit: int = 0,
        min_debt_per_harvest: int = 0,
        max_debt_per_harvest: int = 0,
        last_report: int = 0,
        total_debt: int = 0,
        total_gain: int = 0,
        total_loss: int = 0,
    ):
        self.credit_available = credit_available
        self.debt_outstanding = debt_outstanding
        self.expected_return = expected_return
        self.estimated_total_assets = estimated_total_assets
        self.keep_crv = keep_crv
        self.is_active = is_active
        self.performance_fee = performance_fee
        self.activation = activation
        self.debt_limit = debt_limit
        self.debt_ratio = debt_ratio
        self.rate_limit = rate_limit
        self.min_debt_per_harvest = min_debt_per_harvest
        self.max_debt_per_harvest = max_debt_per_harvest
        self.last_report = last_report
        self.total_debt = total_debt
        self.total_gain = total_gain
        self.total_loss = total_loss

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`StrategyData` to dict
        """
        out: Dict[str, Any] = {
            key: getattr(self, attr) for attr, key in UINT_FIELDS.items()
        }
        out["isActive"] = self.is_active
        return out

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> StrategyData:
        """
        Create :class:`StrategyData` from dict.
        Missing keys get default values.
        """
        kwargs: Dict[str, Any] = {
            attr: int(dct.get(key, 0)) for attr, key in UINT_FIELDS.items()
        }
        kwargs["is_active"] = bool(dct.get("isActive", False))
        return StrategyData(**kwargs)

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"StrategyData({json.dumps(self.to_dict())})"
