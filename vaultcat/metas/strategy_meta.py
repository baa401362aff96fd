from __future__ import annotations
import json
from typing import Any, Dict, List


class StrategyMeta:
    """
    Descriptive metadata of a strategy, as published by the yearn meta API.
    One record may describe several deployments of the same strategy.
    """

    #: Display name
    name: str
    #: Human readable description
    description: str
    #: Addresses of the strategy deployments
    addresses: List[str]
    #: Protocols the strategy interacts with
    protocols: List[str]

    def __init__(
        self,
        name: str,
        description: str,
        addresses: List[str],
        protocols: List[str],
    ):
        self.name = name
        self.description = description
        self.addresses = addresses
        self.protocols = protocols

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`StrategyMeta` to dict
        """
        return {
            "name": self.name,
            "description": self.description,
            "addresses": self.addresses,
            "protocols": self.protocols,
        }

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> StrategyMeta:
        """
        Create :class:`StrategyMeta` from dict.

        Raises:
            KeyError: if ``addresses`` is missing
            TypeError: if ``addresses`` is not a list
        """
        addresses = dct["addresses"]
        if not isinstance(addresses, list):
            raise TypeError(f"Expected a list of addresses, got `{addresses}`")
        return StrategyMeta(
            name=dct.get("name") or "",
            description=dct.get("description") or "",
            addresses=addresses,
            protocols=dct.get("protocols") or [],
        )

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"StrategyMeta({json.dumps(self.to_dict())})"
