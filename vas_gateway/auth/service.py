import logging
from typing import Any

from fastapi import Request

from ..core.errors import GatewayError
from ..models.AccessToken import IssuedToken, VerifiedToken
from .credentials import CredentialValidator
from .issuer import TokenIssuer
from .schemas import check_token_request
from .verifier import TokenVerifier, extract_token

logger = logging.getLogger(__name__)


class AccessService:
    """
    The two request paths of the gateway. They share only the signing
    secret and the claim layout.
    """

    def __init__(self, validator: CredentialValidator, issuer: TokenIssuer, verifier: TokenVerifier) -> None:
        self.validator = validator
        self.issuer = issuer
        self.verifier = verifier

    def request_token(self, body: Any) -> IssuedToken | GatewayError:
        """
        Schema check -> credential check -> signing.
        """
        request = check_token_request(body)
        if isinstance(request, GatewayError):
            return request

        authorized = self.validator.authorize(request.clientId, request.clientSecret, request.app)
        if isinstance(authorized, GatewayError):
            logger.info(f"Token request for app '{request.app}' refused: {authorized.kind.value}")
            return authorized

        issued = self.issuer.issue(
            client_id=request.clientId,
            app=authorized.app,
            base_url=authorized.base_url,
            session_id=request.sessionID,
            user_id=request.userId,
        )
        if isinstance(issued, IssuedToken):
            logger.info(f"Issued token for app '{issued.app}' (session {request.sessionID})")
        return issued

    def validate_token(self, authorization: str | None, query_token: str | None) -> VerifiedToken | GatewayError:
        result = self.verifier.verify(extract_token(authorization, query_token))
        if isinstance(result, GatewayError):
            logger.info(f"Token validation failed: {result.kind.value}")
        return result


def get_access_service(request: Request) -> AccessService:
    return request.app.state.access_service
