"""
Module for building and executing batched contract calls.

The main class of this module is :class:`MulticallService`.
It sends :class:`Call` objects in batches through Multicall3
and returns their decoded outputs.

Example:
    ::

        from vaultcat.calls import InterfaceVersion, MulticallService, build_strategy_calls

        vault = "0xdA816459F1AB5631232FE5e97a05BBBb94970c95"
        strategy = "0x2B2944CF56C7eE7B3DaE0A79C6DB0c4A5cbD5D63"
        calls = build_strategy_calls(
            strategy, vault, strategy, InterfaceVersion.parse("0.4.3")
        )

        service = MulticallService.create(chain_id=1)
        results = service.execute(calls)
        # => {CallKey(name="0x2B29...", method="creditAvailable"): (0,), ...}
"""

from vaultcat.calls.abis import InterfaceVersion
from vaultcat.calls.call import Call, CallKey, encode_call
from vaultcat.calls.builder import build_calls, build_strategy_calls
from vaultcat.calls.service import BatchError, MulticallService
