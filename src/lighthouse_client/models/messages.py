"""
Wire Messages
=============

Pydantic models for the JSON control messages exchanged with the server.

Frame uploads are NOT modelled here: they travel as binary messages whose
body is exactly the FrameCodec payload.

Client Request:
    {
        "REID": 0,
        "VERB": "AUTH",
        "PATH": ["user", "alice", "model"],
        "AUTH": {"USER": "alice", "TOKEN": "API-TOK_..."},
        "META": {}
    }

Server Message:
    {
        "REID": 0,
        "RNUM": 200,
        "RESPONSE": "OK",
        "WARNINGS": [],
        "PAYL": null
    }

A server message whose PAYL carries a "kind" field is an input event.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Verb(str, Enum):
    """Request verbs understood by the server."""

    AUTH = "AUTH"
    STREAM = "STREAM"


class AuthPayload(BaseModel):
    """Identity carried by every request."""

    model_config = ConfigDict(populate_by_name=True)

    user: str = Field(..., alias="USER")
    token: str = Field(..., alias="TOKEN")


class ClientRequest(BaseModel):
    """
    Control request sent by the client.

    Attributes:
        reid: Request id, echoed back by the server in its reply
        verb: What the request asks for
        path: Resource path on the server
        auth: Credentials of the sender
        meta: Free-form metadata
    """

    model_config = ConfigDict(populate_by_name=True)

    reid: int = Field(..., ge=0, alias="REID")
    verb: Verb = Field(..., alias="VERB")
    path: List[str] = Field(default_factory=list, alias="PATH")
    auth: AuthPayload = Field(..., alias="AUTH")
    meta: Dict[str, Any] = Field(default_factory=dict, alias="META")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class ServerMessage(BaseModel):
    """
    Reply or streamed message sent by the server.

    Attributes:
        reid: Id of the request this answers, None for unsolicited messages
        rnum: HTTP-like status code
        response: Optional human-readable status text
        warnings: Non-fatal server warnings
        payload: Optional body
    """

    model_config = ConfigDict(populate_by_name=True)

    reid: Optional[int] = Field(default=None, alias="REID")
    rnum: int = Field(..., alias="RNUM")
    response: Optional[str] = Field(default=None, alias="RESPONSE")
    warnings: List[str] = Field(default_factory=list, alias="WARNINGS")
    payload: Optional[Dict[str, Any]] = Field(default=None, alias="PAYL")

    @property
    def ok(self) -> bool:
        """Whether the status code is in the 2xx range."""
        return 200 <= self.rnum < 300

    @property
    def is_input_event(self) -> bool:
        return self.payload is not None and "kind" in self.payload

    def describe(self) -> str:
        """Short status description for log and error messages."""
        text = f" {self.response}" if self.response else ""
        return f"{self.rnum}{text}"
