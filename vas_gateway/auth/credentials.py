import hmac
import logging
from typing import Mapping

from ..core.errors import ErrorKind, GatewayError, server_config_error
from ..core.settings import Settings
from ..models.AccessToken import Authorized

logger = logging.getLogger(__name__)


def _matches(presented: str, expected: str) -> bool:
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


class CredentialValidator:
    """
    Checks a client's pre-shared credentials and resolves the requested app.

    The order of checks decides which error a request with several problems
    receives: server configuration, then credentials, then the app key.
    """

    def __init__(
        self,
        *,
        client_id: str | None,
        client_secret: str | None,
        signing_secret: str | None,
        registry: Mapping[str, str],
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._signing_secret = signing_secret
        self._registry = registry

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialValidator":
        return cls(
            client_id=settings.IBANK_CLIENT_ID,
            client_secret=settings.IBANK_CLIENT_SECRET,
            signing_secret=settings.JWT_SECRET,
            registry=settings.app_registry,
        )

    @property
    def valid_apps(self) -> list[str]:
        return list(self._registry)

    def authorize(self, client_id: str, client_secret: str, app: str) -> Authorized | GatewayError:
        # 1. Fail closed when the deployment is missing secrets
        if not self._signing_secret:
            logger.error("JWT_SECRET is not configured")
            return server_config_error("JWT_SECRET missing")

        if not self._client_id or not self._client_secret:
            logger.error("IBANK_CLIENT_ID or IBANK_CLIENT_SECRET is not configured")
            return server_config_error("IBANK_CLIENT_ID or IBANK_CLIENT_SECRET missing")

        # 2. Client credentials
        id_ok = _matches(client_id, self._client_id)
        secret_ok = _matches(client_secret, self._client_secret)
        if not (id_ok and secret_ok):
            return GatewayError(ErrorKind.INVALID_CREDENTIALS, "Invalid client credentials")

        # 3. Target application
        base_url = self._registry.get(app)
        if base_url is None:
            return GatewayError(
                ErrorKind.INVALID_APP,
                "Invalid app parameter",
                {"validApps": self.valid_apps},
            )

        return Authorized(app=app, base_url=base_url)
