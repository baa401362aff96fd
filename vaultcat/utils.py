"""
Utility functions.
"""

from typing import Any, Iterator, List, Sequence, TypeVar
import json
from eth_typing.encoding import HexStr
from eth_utils import is_address, to_checksum_address, to_hex

T = TypeVar("T")


class Web3JsonEncoder(json.JSONEncoder):
    """
    Custom encoder for values decoded from `Web3 <https://web3py.readthedocs.io/en/stable/>`_
    calls. Binary values become :code:`0x...` hex strings,
    tuples returned by the abi decoder become lists.
    """

    def default(self, o: Any) -> HexStr:
        """
        Convert binary values to hex
        """
        if isinstance(o, (bytes, bytearray)):
            return HexStr(to_hex(o))
        return json.JSONEncoder.default(self, o)


def json_response(response: Any) -> str:
    """
    Convert a web3 value to standard json string

    Args:
        response: a `Web3 <https://web3py.readthedocs.io/en/stable/>`_ response

    Returns:
        json string
    """
    return json.dumps(response, cls=Web3JsonEncoder)


def checksum(address: str) -> str:
    """
    EIP55 checksum form of an address.

    Args:
        address: hex address in any case

    Returns:
        Checksummed address

    Raises:
        ValueError: if ``address`` is not a valid 20 bytes hex address
    """
    if not isinstance(address, str) or not is_address(address.lower()):
        raise ValueError(f"Invalid address `{address}`")
    return to_checksum_address(address.lower())


def short_address(address: str) -> str:
    """
    Converts ethereum address to short version (for display purposes only).

    Args:
        address: Ethereum address to shorten

    Returns:
        Short version of the address.

    Examples:
        ::

            print(short_address("0x6B175474E89094C44Da98b954EedeAC495271d0F"))
            # 0x6B17...1d0F

    """
    return f"{address[:6]}...{address[38:]}"


def chunks(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """
    Split ``items`` into contiguous chunks of at most ``size`` elements.

    Args:
        items: a sequence to split
        size: max chunk size, positive

    Returns:
        Iterator over chunks, in the order of ``items``

    Examples:
        ::

            list(chunks([1, 2, 3, 4, 5], 2))
            # [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
