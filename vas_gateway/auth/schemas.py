from typing import Any, Dict, List

from ..core.errors import ErrorKind, GatewayError
from ..models.AccessToken import TokenRequest

# (field, required) for every field of an issuance request. All are non-empty strings.
TOKEN_REQUEST_FIELDS = (
    ("clientId", True),
    ("clientSecret", True),
    ("app", True),
    ("sessionID", True),
    ("userId", False),
)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def token_request_issues(body: Any) -> List[Dict[str, Any]]:
    """
    Structural check of an issuance request body.
    Returns one issue per offending field; an empty list means the body is valid.
    Unknown fields are ignored.
    """
    if not isinstance(body, dict):
        return [{
            "code": "invalid_type",
            "expected": "object",
            "received": _type_name(body),
            "path": [],
            "message": f"Expected object, received {_type_name(body)}",
        }]

    issues = []
    for field, required in TOKEN_REQUEST_FIELDS:
        if field not in body:
            if required:
                issues.append({
                    "code": "invalid_type",
                    "expected": "string",
                    "received": "undefined",
                    "path": [field],
                    "message": "Required",
                })
            continue

        value = body[field]
        if not isinstance(value, str):
            issues.append({
                "code": "invalid_type",
                "expected": "string",
                "received": _type_name(value),
                "path": [field],
                "message": f"Expected string, received {_type_name(value)}",
            })
        elif len(value) < 1:
            issues.append({
                "code": "too_small",
                "minimum": 1,
                "type": "string",
                "path": [field],
                "message": "String must contain at least 1 character(s)",
            })
    return issues


def check_token_request(body: Any) -> TokenRequest | GatewayError:
    issues = token_request_issues(body)
    if issues:
        return GatewayError(ErrorKind.INVALID_REQUEST, "Invalid request body", issues)
    return TokenRequest(**{field: body[field] for field, _ in TOKEN_REQUEST_FIELDS if field in body})
