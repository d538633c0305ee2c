from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class TokenRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    clientId: str
    clientSecret: str
    app: str
    sessionID: str
    userId: str | None = None


class TokenClaims(BaseModel):
    model_config = ConfigDict(frozen=True)

    clientId: str # Validated client identifier
    app: str # Registry key
    sessionID: str # Caller supplied, opaque
    userId: str | None = None
    issuedAt: int # Epoch seconds at signing time


class TokenResponse(BaseModel):
    success: bool = True
    token: str
    expiresIn: int
    baseUrl: str
    app: str


class TokenValidationResponse(BaseModel):
    valid: bool = True
    payload: Dict[str, Any]


@dataclass(frozen=True)
class Authorized:
    app: str
    base_url: str


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_in: int
    base_url: str
    app: str
    claims: TokenClaims

    def to_response(self) -> TokenResponse:
        return TokenResponse(token=self.token, expiresIn=self.expires_in, baseUrl=self.base_url, app=self.app)


@dataclass(frozen=True)
class VerifiedToken:
    payload: Dict[str, Any]

    @property
    def claims(self) -> TokenClaims:
        return TokenClaims.model_validate(self.payload)

    def to_response(self) -> TokenValidationResponse:
        return TokenValidationResponse(payload=self.payload)
