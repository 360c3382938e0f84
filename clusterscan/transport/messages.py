"""
Relay envelope models.

Every frame exchanged with the status relay is a JSON object discriminated by
its ``role``. Agents ``register`` the subjects they answer; clients send a
``scatter`` which the relay forwards to agents as a ``request``; agents answer
with a ``reply`` that the relay routes back to the requesting client by ``u``.
"""

from __future__ import annotations

from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, Field, TypeAdapter


class RelayRegister(BaseModel):
    """An agent announcing the subjects it answers."""

    role: Literal["register"] = "register"
    name: str = Field(description="Name of the registering agent.")
    subjects: tuple[str, ...] = Field(description="Subjects the agent answers.")


class RelayScatter(BaseModel):
    """A client request to fan out to every agent on a subject."""

    role: Literal["scatter"] = "scatter"
    u: str = Field(description="A unique identifier for this request.")
    subject: str = Field(description="Subject to fan out on.")
    data: str = Field("", description="Request payload.")


class RelayRequest(BaseModel):
    """A fanned-out request delivered to an agent."""

    role: Literal["request"] = "request"
    u: str = Field(description="Identifier of the originating scatter.")
    subject: str = Field(description="Subject the request was sent on.")
    data: str = Field("", description="Request payload.")


class RelayReply(BaseModel):
    """One agent's answer to a request, routed back to the requester."""

    role: Literal["reply"] = "reply"
    u: str = Field(description="Identifier of the scatter being answered.")
    data: str = Field(description="Reply payload.")


RelayEnvelope: TypeAlias = RelayRegister | RelayScatter | RelayRequest | RelayReply

_ENVELOPE_ADAPTER: TypeAdapter[RelayEnvelope] = TypeAdapter(
    Annotated[
        RelayRegister | RelayScatter | RelayRequest | RelayReply,
        Field(discriminator="role"),
    ]
)


def parse_envelope(frame: bytes | str) -> RelayEnvelope:
    """Parse one relay frame; raises ``pydantic.ValidationError`` on bad input."""
    return _ENVELOPE_ADAPTER.validate_json(frame)
