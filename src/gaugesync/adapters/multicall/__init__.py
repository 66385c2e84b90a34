"""Public interface for the Multicall3 batch caller."""

from __future__ import annotations

from .abi import (
    AGGREGATE3,
    decode_aggregate3,
    decode_return,
    encode_aggregate3,
    encode_call,
    parse_signature,
)
from .client import MulticallBatchCaller
from .schema import JsonRpcError, JsonRpcResponse

__all__ = [
    "AGGREGATE3",
    "JsonRpcError",
    "JsonRpcResponse",
    "MulticallBatchCaller",
    "decode_aggregate3",
    "decode_return",
    "encode_aggregate3",
    "encode_call",
    "parse_signature",
]
