import logging
import math
import time
from typing import Any, Callable, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from ..core.errors import ErrorKind, GatewayError, server_config_error
from ..core.settings import Settings
from ..models.AccessToken import VerifiedToken

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

TOKEN_REQUIRED = GatewayError(ErrorKind.TOKEN_REQUIRED, "Token required")
TOKEN_EXPIRED = GatewayError(ErrorKind.TOKEN_EXPIRED, "Token expired")
TOKEN_INVALID = GatewayError(ErrorKind.TOKEN_INVALID, "Invalid token")


def extract_token(authorization: str | None, query_token: str | None) -> str | None:
    """
    Picks the presented token. A `Bearer` authorization header wins over
    the `token` query parameter; empty values count as absent.
    """
    if authorization and authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token
    if query_token:
        return query_token
    return None


class TokenVerifier:
    def __init__(
        self,
        *,
        secret: str | None,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "TokenVerifier":
        return cls(secret=settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM, **kwargs)

    def verify(self, token: str | None) -> VerifiedToken | GatewayError:
        if not token:
            return TOKEN_REQUIRED

        if not self._secret:
            logger.error("JWT_SECRET is not configured")
            return server_config_error("JWT_SECRET missing")

        try:
            payload: Dict[str, Any] = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            return TOKEN_EXPIRED
        except JWTError as e:
            logger.info(f"Token rejected: {e}")
            return TOKEN_INVALID

        # A token is expired from the second its exp is reached
        exp = payload.get("exp")
        if isinstance(exp, int) and exp <= math.floor(self._clock()):
            return TOKEN_EXPIRED

        return VerifiedToken(payload=payload)
