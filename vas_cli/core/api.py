import logging
from typing import Optional, Tuple

import requests

from .config import BASE_URL, TIMEOUT

logger = logging.getLogger(__name__)

ApiResult = Tuple[int, dict]


def _json(resp: requests.Response) -> dict:
    try:
        data = resp.json()
    except ValueError:
        return {"error": resp.text}
    return data if isinstance(data, dict) else {"error": data}


def api_request_token(token_request: dict) -> Optional[ApiResult]:
    """
    Asks the gateway for an access token.
    Returns (status_code, body) or None if the gateway could not be reached.
    """
    url = f"{BASE_URL}/api/token/request"
    try:
        resp = requests.post(url, json=token_request, timeout=TIMEOUT)
    except requests.RequestException as e:
        logger.debug(f"POST {url} failed: {e}")
        return None
    return resp.status_code, _json(resp)


def api_validate_token(token: str, use_query: bool = False) -> Optional[ApiResult]:
    """
    Asks the gateway to validate a token, sent as a Bearer header or as
    the `token` query parameter.
    """
    url = f"{BASE_URL}/api/validate-token"
    headers = {}
    params = {}
    if use_query:
        params["token"] = token
    else:
        headers["Authorization"] = f"Bearer {token}"

    try:
        resp = requests.get(url, headers=headers, params=params, timeout=TIMEOUT)
    except requests.RequestException as e:
        logger.debug(f"GET {url} failed: {e}")
        return None
    return resp.status_code, _json(resp)
