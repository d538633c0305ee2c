import logging
import math
import time
from typing import Callable

from jose import jwt

from ..core.errors import GatewayError, server_config_error
from ..core.settings import Settings
from ..models.AccessToken import IssuedToken, TokenClaims

logger = logging.getLogger(__name__)


class TokenIssuer:
    """
    Signs short-lived access tokens for an authorized client and app.

    `lifetime_seconds` sets the embedded expiry; `expires_in` is the value
    reported to the caller alongside the token.
    """

    def __init__(
        self,
        *,
        secret: str | None,
        lifetime_seconds: float,
        expires_in: int,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock
        self.lifetime_seconds = lifetime_seconds
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "TokenIssuer":
        return cls(
            secret=settings.JWT_SECRET,
            lifetime_seconds=settings.token_lifetime_seconds,
            expires_in=settings.TOKEN_EXPIRES_IN_SECONDS,
            algorithm=settings.JWT_ALGORITHM,
            **kwargs,
        )

    def issue(
        self,
        *,
        client_id: str,
        app: str,
        base_url: str,
        session_id: str,
        user_id: str | None = None,
    ) -> IssuedToken | GatewayError:
        if not self._secret:
            logger.error("Refusing to sign a token without JWT_SECRET")
            return server_config_error("JWT_SECRET missing")

        issued_at = math.floor(self._clock())
        claims = TokenClaims(
            clientId=client_id,
            app=app,
            sessionID=session_id,
            userId=user_id or None,
            issuedAt=issued_at,
        )

        to_encode = claims.model_dump()
        to_encode.update({
            "iat": issued_at,
            "exp": math.floor(issued_at + self.lifetime_seconds),
        })
        token = jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

        return IssuedToken(
            token=token,
            expires_in=self.expires_in,
            base_url=base_url,
            app=app,
            claims=claims,
        )
