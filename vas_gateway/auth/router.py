import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, Request, Response

from ..core.errors import INVALID_JSON, NOT_FOUND, GatewayError
from ..core.ratelimit import RateLimit
from .service import AccessService, get_access_service

router = APIRouter(
    prefix="/api",
    tags=["auth"],
    dependencies=[Depends(RateLimit("api", "API_RATE_LIMIT"))],
)

token_rate_limit = RateLimit("token", "TOKEN_RATE_LIMIT")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def render(result, response: Response) -> dict:
    """
    Serializes a result value; errors also set the response status.
    """
    if isinstance(result, GatewayError):
        response.status_code = result.status_code
        return result.to_body()
    return result.to_response().model_dump()


async def read_json_body(request: Request) -> Any:
    """
    Parses a JSON object or array body. Requests that are not JSON are
    read as an empty object.
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        return {}

    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except ValueError:
        return INVALID_JSON
    if not isinstance(body, (dict, list)):
        return INVALID_JSON
    return body


@router.post("/token/request", dependencies=[Depends(token_rate_limit)])
async def request_token(
    request: Request,
    response: Response,
    service: Annotated[AccessService, Depends(get_access_service)],
):
    """
    Exchange client credentials for an access token to one application.
    """
    body = await read_json_body(request)
    if isinstance(body, GatewayError):
        return render(body, response)
    return render(service.request_token(body), response)


@router.get("/validate-token")
def validate_token(
    response: Response,
    service: Annotated[AccessService, Depends(get_access_service)],
    authorization: Annotated[str | None, Header()] = None,
    token: str | None = None,
):
    """
    Check a token from the Authorization header or the `token` query parameter.
    """
    return render(service.validate_token(authorization, token), response)


@router.api_route(
    "",
    methods=ALL_METHODS,
    include_in_schema=False,
)
@router.api_route(
    "/{path:path}",
    methods=ALL_METHODS,
    include_in_schema=False,
)
def not_found(response: Response):
    return render(NOT_FOUND, response)
