"""ABI encoding for contract calls and Multicall3 ``aggregate3`` batches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gaugesync.domain.model import CallSpec

AGGREGATE3: Final = "aggregate3((address,bool,bytes)[])"
_AGGREGATE3_SELECTOR: Final = function_signature_to_4byte_selector(AGGREGATE3)


def parse_signature(signature: str) -> tuple[str, tuple[str, ...]]:
    """Split ``name(type,...)`` into the function name and its input types."""

    name, open_paren, rest = signature.partition("(")
    if not name or not open_paren or not rest.endswith(")"):
        raise ValueError(f"Malformed function signature: {signature!r}")
    return name, _split_types(rest[:-1])


def _split_types(inner: str) -> tuple[str, ...]:
    if not inner:
        return ()
    types: list[str] = []
    depth = 0
    start = 0
    for position, char in enumerate(inner):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            types.append(inner[start:position])
            start = position + 1
    types.append(inner[start:])
    return tuple(types)


def _coerce(abi_type: str, value: object) -> object:
    if abi_type == "address" and isinstance(value, str):
        return to_checksum_address(value)
    return value


def encode_call(call: CallSpec) -> bytes:
    """Return selector plus encoded arguments for ``call``."""

    _, input_types = parse_signature(call.signature)
    if len(input_types) != len(call.args):
        raise ValueError(
            f"{call.signature} takes {len(input_types)} arguments, got {len(call.args)}"
        )
    args = [
        _coerce(abi_type, value)
        for abi_type, value in zip(input_types, call.args, strict=True)
    ]
    return function_signature_to_4byte_selector(call.signature) + encode(list(input_types), args)


def decode_return(call: CallSpec, data: bytes) -> object:
    """Decode ``data`` with the call's declared output types.

    A single output is unwrapped; several come back as a tuple.
    """

    values = decode(list(call.returns), data)
    if len(values) == 1:
        return values[0]
    return values


def encode_aggregate3(calls: Sequence[CallSpec]) -> bytes:
    """Encode ``calls`` as one ``aggregate3`` invocation.

    Every call is sent with ``allowFailure`` set so one revert cannot take the
    batch down; required calls are enforced after decoding, where the failing
    call can be named.
    """

    encoded = [(to_checksum_address(call.target), True, encode_call(call)) for call in calls]
    return _AGGREGATE3_SELECTOR + encode(["(address,bool,bytes)[]"], [encoded])


def decode_aggregate3(data: bytes) -> list[tuple[bool, bytes]]:
    (results,) = decode(["(bool,bytes)[]"], data)
    return [(bool(success), bytes(return_data)) for success, return_data in results]
