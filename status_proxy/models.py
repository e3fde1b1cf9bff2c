from __future__ import annotations

from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

CheckKind = Literal["jsonrpc", "tendermint", "tcp"]


class BaseCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: CheckKind


class JsonRpcCheck(BaseCheck):
    kind: Literal["jsonrpc"] = "jsonrpc"
    url: str


class TendermintCheck(BaseCheck):
    kind: Literal["tendermint"] = "tendermint"
    url: str


class TcpCheck(BaseCheck):
    kind: Literal["tcp"] = "tcp"
    host: str
    # None when the configured port could not be parsed; the probe reports it.
    port: Optional[int] = None


Check = Annotated[
    Union[JsonRpcCheck, TendermintCheck, TcpCheck],
    Field(discriminator="kind"),
]


class Registry(BaseModel):
    model_config = ConfigDict(frozen=True)

    checks: Tuple[Check, ...] = ()

    def ids(self) -> list[str]:
        return [c.id for c in self.checks]
