import json
from typing import Optional

import typer

from vas_cli.core.api import api_request_token, api_validate_token
from vas_cli.core.session import clear_token, load_token, save_token

app = typer.Typer(help="Token commands (request, validate, clear)")


def _print_body(body: dict) -> None:
    typer.echo(json.dumps(body, indent=2))


@app.command("request")
def request_token(
    client_id: str = typer.Option(..., "--client-id", "-c", prompt=True, help="Client identifier"),
    client_secret: str = typer.Option(..., "--client-secret", "-s", prompt=True, hide_input=True, help="Client secret"),
    app_key: str = typer.Option("bill-payments", "--app", "-a", help="Target application"),
    session_id: str = typer.Option(..., "--session-id", prompt="Session ID", help="Caller session identifier"),
    user_id: Optional[str] = typer.Option(None, "--user-id", "-u", help="Optional user identifier"),
):
    """
    Request an access token and keep it for `token validate`.
    """
    token_request = {
        "clientId": client_id,
        "clientSecret": client_secret,
        "app": app_key,
        "sessionID": session_id,
    }
    if user_id is not None:
        token_request["userId"] = user_id

    result = api_request_token(token_request)
    if result is None:
        typer.echo("Could not reach the gateway.")
        raise typer.Exit(code=1)

    status_code, body = result
    if status_code != 200 or not body.get("success"):
        typer.echo(f"Token request failed ({status_code}): {body.get('code', 'UNKNOWN')}")
        _print_body(body)
        raise typer.Exit(code=1)

    save_token(body["token"], body.get("app"))
    typer.echo(f"Token issued for '{body['app']}' (expires in {body['expiresIn']}s).")
    typer.echo(f"Base URL: {body['baseUrl']}")
    typer.echo(body["token"])


@app.command("validate")
def validate_token(
    token: Optional[str] = typer.Argument(None, help="Token to check (defaults to the stored one)"),
    use_query: bool = typer.Option(False, "--query", help="Send the token as a query parameter"),
):
    """
    Validate a token against the gateway and print its claims.
    """
    token = token or load_token()
    if not token:
        typer.echo("No token given and none stored. Run `vas-gateway token request` first.")
        raise typer.Exit(code=1)

    result = api_validate_token(token, use_query=use_query)
    if result is None:
        typer.echo("Could not reach the gateway.")
        raise typer.Exit(code=1)

    status_code, body = result
    if status_code != 200 or not body.get("valid"):
        typer.echo(f"Token rejected ({status_code}): {body.get('code', 'UNKNOWN')}")
        raise typer.Exit(code=1)

    typer.echo("Token is valid.")
    _print_body(body["payload"])


@app.command("clear")
def clear():
    """
    Delete the stored token.
    """
    clear_token()
    typer.echo("Stored token removed.")
