import pytest
from eth_abi.exceptions import EncodingError
from eth_utils import keccak

from vaultcat.calls import CallKey, InterfaceVersion, encode_call
from vaultcat.calls.abis import (
    STRATEGY_IS_ACTIVE_ABI,
    VAULT_CREDIT_AVAILABLE_ABI,
    VAULT_STRATEGIES_ABI,
    VAULT_V022_STRATEGIES_ABI,
    VAULT_V030_STRATEGIES_ABI,
    strategies_abi,
)

VAULT = "0xdA816459F1AB5631232FE5e97a05BBBb94970c95"
STRATEGY = "0x2B2944CF56C7eE7B3DaE0A79C6DB0c4A5cbD5D63"


def test_encode_call_with_argument():
    call = encode_call(
        VAULT_CREDIT_AVAILABLE_ABI, VAULT, STRATEGY, InterfaceVersion.CURRENT, [STRATEGY]
    )
    assert call.target == VAULT
    assert call.method == "creditAvailable"
    assert call.calldata[:4] == keccak(text="creditAvailable(address)")[:4]
    assert len(call.calldata) == 4 + 32
    assert call.calldata[-20:] == bytes.fromhex(STRATEGY[2:])
    assert call.output_types == ["uint256"]
    assert call.key == CallKey(STRATEGY, "creditAvailable")


def test_encode_call_without_arguments():
    call = encode_call(STRATEGY_IS_ACTIVE_ABI, STRATEGY, STRATEGY, InterfaceVersion.V0_2_2)
    assert call.calldata == keccak(text="isActive()")[:4]
    assert call.output_types == ["bool"]
    assert call.version == InterfaceVersion.V0_2_2


def test_encode_call_bad_argument():
    with pytest.raises(EncodingError):
        encode_call(
            VAULT_CREDIT_AVAILABLE_ABI, VAULT, STRATEGY, InterfaceVersion.CURRENT, ["0x12"]
        )


def test_call_key_distinguishes_overlapping_names():
    # "...strategies" + "" and "..." + "strategies" no longer collide
    assert CallKey("0xabcstrategies", "isActive") != CallKey("0xabc", "strategiesisActive")


@pytest.mark.parametrize(
    "tag,version",
    [
        ("0.2.2", InterfaceVersion.V0_2_2),
        ("0.3.0", InterfaceVersion.V0_3_0),
        ("0.3.1", InterfaceVersion.V0_3_1),
        ("0.3.2", InterfaceVersion.CURRENT),
        ("0.4.6", InterfaceVersion.CURRENT),
        ("", InterfaceVersion.CURRENT),
        (None, InterfaceVersion.CURRENT),
        ("current", InterfaceVersion.CURRENT),
    ],
)
def test_interface_version_parse(tag, version):
    assert InterfaceVersion.parse(tag) == version


@pytest.mark.parametrize(
    "version,abi,arity",
    [
        (InterfaceVersion.V0_2_2, VAULT_V022_STRATEGIES_ABI, 8),
        (InterfaceVersion.V0_3_0, VAULT_V030_STRATEGIES_ABI, 8),
        (InterfaceVersion.V0_3_1, VAULT_V030_STRATEGIES_ABI, 8),
        (InterfaceVersion.CURRENT, VAULT_STRATEGIES_ABI, 9),
    ],
)
def test_strategies_abi(version, abi, arity):
    assert strategies_abi(version) is abi
    assert len(abi["outputs"]) == arity
