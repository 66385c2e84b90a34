"""Pydantic models describing JSON-RPC responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class JsonRpcBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class JsonRpcError(JsonRpcBaseModel):
    code: int
    message: str
    data: object | None = None


class JsonRpcResponse(JsonRpcBaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: str | None = None
    error: JsonRpcError | None = None

    @field_validator("result")
    @classmethod
    def _require_hex(cls, value: str | None) -> str | None:
        if value is not None and not value.startswith("0x"):
            raise ValueError("eth_call result must be 0x-prefixed hex")
        return value

    def result_bytes(self) -> bytes:
        if self.result is None:
            return b""
        return bytes.fromhex(self.result[2:])
