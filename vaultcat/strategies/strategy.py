from __future__ import annotations
import json
from typing import Any, Dict, List

from vaultcat.calls.abis import InterfaceVersion
from vaultcat.utils import checksum


class Strategy:
    """
    A yearn strategy attached to a vault, one entry of the
    aggregation manifest.

    Note:
        Addresses are kept in EIP55 checksum format, the same
        format used as a key in :class:`vaultcat.strategies.StrategiesStore`.
    """

    #: Ethereum chain_id
    chain_id: int
    _vault: str
    _address: str
    #: Version tag of the vault, e.g. ``"0.3.0"``
    vault_version: str

    def __init__(self, chain_id: int, vault: str, address: str, vault_version: str):
        self.chain_id = chain_id
        self.vault = vault
        self.address = address
        self.vault_version = vault_version

    @property
    def vault(self) -> str:
        """
        Vault address (checksummed)
        """
        return self._vault

    @vault.setter
    def vault(self, val: str):
        self._vault = checksum(val)

    @property
    def address(self) -> str:
        """
        Strategy address (checksummed)
        """
        return self._address

    @address.setter
    def address(self, val: str):
        self._address = checksum(val)

    @property
    def version(self) -> InterfaceVersion:
        """
        Vault interface version derived from :attr:`vault_version`
        """
        return InterfaceVersion.parse(self.vault_version)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Strategy` to dict
        """
        return {
            "chainId": self.chain_id,
            "vault": self.vault,
            "address": self.address,
            "vaultVersion": self.vault_version,
        }

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> Strategy:
        """
        Create :class:`Strategy` from dict
        """
        return Strategy(
            chain_id=int(dct["chainId"]),
            vault=dct["vault"],
            address=dct["address"],
            vault_version=dct.get("vaultVersion") or "",
        )

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Strategy({json.dumps(self.to_dict())})"


def load_manifest(path: str) -> Dict[int, List[Strategy]]:
    """
    Read strategies manifest from a json file.

    The file contains a list of :meth:`Strategy.to_dict` objects.

    Args:
        path: OS path to the manifest

    Returns:
        Strategies grouped by chain_id, in file order
    """
    with open(path, "r") as f:
        items = json.load(f)
    out: Dict[int, List[Strategy]] = {}
    for item in items:
        strategy = Strategy.from_dict(item)
        out.setdefault(strategy.chain_id, []).append(strategy)
    return out
