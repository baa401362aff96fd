from __future__ import annotations
import logging
import os
from functools import cached_property
from typing import Any, Dict, List, Sequence, Tuple
from eth_abi import decode
from eth_abi.exceptions import DecodingError

from vaultcat.calls.abis import MULTICALL3_ABI
from vaultcat.calls.call import Call, CallKey
from vaultcat.constants import MULTICALL3_ADDRESS
from vaultcat.core import Core
from vaultcat.utils import checksum, chunks

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """
    A whole multicall batch failed, as opposed to a single call
    inside of a batch.

    Args:
        chain_id: Ethereum chain_id
        batch: index of the failed batch
        size: number of calls in the failed batch
    """

    chain_id: int
    batch: int
    size: int

    def __init__(self, chain_id: int, batch: int, size: int):
        super().__init__(
            f"Multicall batch {batch} ({size} calls) failed on chain {chain_id}"
        )
        self.chain_id = chain_id
        self.batch = batch
        self.size = size


class MulticallService(Core):
    """
    Service for making batched static calls through
    `Multicall3 <https://github.com/mds1/multicall>`_.

    **Request/Response flow**

    ::

                +------------------+                  +-------+
                | MulticallService |                  | Web3  |
                +------------------+                  +-------+
        ---------------  |                                |
        | Calls        |-|                                |
        |--------------| |                                |
                         |                                |
                         | Split into batches             |
                         |-------------------             |
                         |                  |             |
                         |<------------------             |
                         |                                |
                         | aggregate3 for each batch      |
                         |------------------------------->|
                         |                                |
                         | Decode each call result        |
                         |------------------------        |
                         |                       |        |
                         |<-----------------------        |
            -----------  |                                |
            | Results  |-|                                |
            |----------| |                                |
                         |                                |

    Batches are executed one after another. Every call in a batch is sent
    with ``allowFailure``, so a reverted call only drops its own result.
    If a batch as a whole can't be executed, :class:`BatchError` is raised
    and the results of the other batches are discarded.

    Args:
        multicall_address: Multicall3 address, ``VAULTCAT_MULTICALL_ADDRESS``
                           env variable or the canonical deployment by default
        kwargs: Args for the :class:`vaultcat.core.Core`
    """

    def __init__(self, multicall_address: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self._multicall_address = multicall_address

    @staticmethod
    def create(**kwargs) -> MulticallService:
        """
        Create an instance of :class:`MulticallService`

        Args:
            kwargs: Args for the :class:`vaultcat.core.Core`

        Returns:
            An instance of :class:`MulticallService`
        """
        return MulticallService(**kwargs)

    @cached_property
    def multicall_address(self) -> str:
        """
        Address of the Multicall3 contract
        """
        address = self._multicall_address or os.environ.get(
            "VAULTCAT_MULTICALL_ADDRESS", MULTICALL3_ADDRESS
        )
        return checksum(address)

    def execute(
        self, calls: Sequence[Call], max_batch_size: int | None = None
    ) -> Dict[CallKey, Tuple[Any, ...]]:
        """
        Execute calls in batches.

        Args:
            calls: calls to execute
            max_batch_size: max number of calls in a batch,
                            :attr:`vaultcat.core.Core.max_batch_size` by default

        Returns:
            Decoded outputs of the calls by :attr:`vaultcat.calls.Call.key`.
            Calls that reverted or returned undecodable data are absent.

        Raises:
            BatchError: if a batch could not be executed
        """
        if len(calls) == 0:
            return {}
        size = max_batch_size or self.max_batch_size
        batches = list(chunks(calls, size))
        results = {}
        for i, batch in enumerate(batches):
            logger.debug(
                "Chain %s: multicall batch %s/%s, %s calls",
                self.chain_id,
                i + 1,
                len(batches),
                len(batch),
            )
            responses = self._aggregate(i, batch)
            for call, (success, data) in zip(batch, responses):
                values = _decode(call, success, data)
                if not values is None:
                    results[call.key] = values
        return results

    def _aggregate(self, index: int, batch: List[Call]) -> List[Tuple[bool, bytes]]:
        multicall = self.w3.eth.contract(
            address=self.multicall_address, abi=MULTICALL3_ABI
        )
        payload = [(call.target, True, call.calldata) for call in batch]
        try:
            responses = multicall.functions.aggregate3(payload).call()
        except Exception as e:
            raise BatchError(self.chain_id, index, len(batch)) from e
        if len(responses) != len(batch):
            raise BatchError(self.chain_id, index, len(batch))
        return responses


def _decode(call: Call, success: bool, data: bytes) -> Tuple[Any, ...] | None:
    if not success or len(data) == 0:
        return None
    try:
        return tuple(decode(call.output_types, bytes(data)))
    except DecodingError:
        logger.debug("Could not decode `%s` for %s", call.method, call.name)
        return None
