from __future__ import annotations
import json
from typing import Any, Dict, List, NamedTuple, Sequence
from eth_abi import encode
from eth_utils import function_abi_to_4byte_selector, to_hex

from vaultcat.calls.abis import InterfaceVersion


class CallKey(NamedTuple):
    """
    Correlates a multicall result with the entity and method it was made for
    """

    #: Display name of the entity (strategy address)
    name: str
    #: Contract method name
    method: str


class Call:
    """
    Call is a static call to an Ethereum contract function,
    encoded and ready to be sent in a multicall
    """

    #: Contract address for this call
    target: str
    #: Contract method name
    method: str
    #: Selector and abi encoded arguments
    calldata: bytes
    #: Name of the entity the call is made for
    name: str
    #: Vault interface version of the entity
    version: InterfaceVersion
    #: Abi types of the method outputs
    output_types: List[str]

    def __init__(
        self,
        target: str,
        method: str,
        calldata: bytes,
        name: str,
        version: InterfaceVersion,
        output_types: List[str],
    ):
        self.target = target
        self.method = method
        self.calldata = calldata
        self.name = name
        self.version = version
        self.output_types = output_types

    @property
    def key(self) -> CallKey:
        """
        Key of the call result in :meth:`vaultcat.calls.MulticallService.execute` output
        """
        return CallKey(self.name, self.method)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Call` to dict
        """
        return {
            "target": self.target,
            "method": self.method,
            "calldata": to_hex(self.calldata),
            "name": self.name,
            "version": self.version.value,
            "outputTypes": self.output_types,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Call({json.dumps(self.to_dict())})"


def encode_call(
    abi: Dict[str, Any],
    target: str,
    name: str,
    version: InterfaceVersion,
    args: Sequence[Any] = (),
) -> Call:
    """
    Encode a contract function call.

    Args:
        abi: ABI fragment of the function
        target: contract address
        name: name of the entity the call is made for
        version: vault interface version of the entity
        args: function arguments

    Returns:
        An instance of :class:`Call`

    Raises:
        Any ``eth_abi`` encoding error if ``args`` don't match the ABI
    """
    input_types = [i["type"] for i in abi["inputs"]]
    selector = function_abi_to_4byte_selector(abi)
    calldata = selector + encode(input_types, list(args))
    return Call(
        target=target,
        method=abi["name"],
        calldata=bytes(calldata),
        name=name,
        version=version,
        output_types=[o["type"] for o in abi["outputs"]],
    )
