"""Credential carried in the x-authorization header."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    """Header prefix for each kind of credential."""

    BEARER = "Bearer"  # session token from password or demo login
    ACCESS = "Token"  # long-lived access token


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str = field(repr=False)

    @classmethod
    def bearer(cls, value: str) -> Token:
        return cls(TokenKind.BEARER, value)

    @classmethod
    def access(cls, value: str) -> Token:
        return cls(TokenKind.ACCESS, value)

    def render_header(self) -> str:
        return f"{self.kind.value} {self.value}"
