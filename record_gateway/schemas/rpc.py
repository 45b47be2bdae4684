"""JSON-RPC Schemas — Pydantic models for the gateway's request/response envelopes.

Invariants:
    - RpcResponse carries exactly one of result / error (model_validator)
    - RpcResponse.id echoes the request id; an absent id becomes 0
    - jsonrpc is always "2.0" on responses
    - ToolCallParams.name is required; arguments default to an empty object

Design Decisions:
    - Extra request fields are ignored, not rejected: peers send clientInfo etc.
    - to_wire() drops the absent member so the body has exactly one of the two keys
"""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator

from record_gateway.core.domain_types import JSONRPC_VERSION

RpcId = Union[StrictInt, StrictStr]


class RpcRequest(BaseModel):
    """Inbound JSON-RPC request."""
    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = JSONRPC_VERSION
    id: RpcId | None = None
    method: StrictStr
    params: dict[str, Any] | None = None


class ToolCallParams(BaseModel):
    """params of a tools/call request."""
    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(min_length=1)
    arguments: dict[str, Any] | None = None


class RpcErrorBody(BaseModel):
    code: int
    message: str


class RpcResponse(BaseModel):
    """Outbound JSON-RPC response."""
    jsonrpc: str = JSONRPC_VERSION
    id: RpcId = 0
    result: dict[str, Any] | None = None
    error: RpcErrorBody | None = None

    @model_validator(mode="after")
    def exactly_one_of_result_or_error(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("response must carry exactly one of result or error")
        return self

    def to_wire(self) -> dict:
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump()
        else:
            body["result"] = self.result
        return body
