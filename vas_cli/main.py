# vas_cli/main.py


from typing import Optional

import typer
import uvicorn

from vas_cli.token.commands import app as token_app
from vas_gateway.core.settings import get_settings

app = typer.Typer(help="VAS Gateway: access tokens for downstream applications")
app.add_typer(token_app, name="token")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, help="Port (defaults to PORT from settings)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """
    Run the gateway with uvicorn.
    """
    settings = get_settings()
    uvicorn.run(
        "vas_gateway.main:app",
        host=host,
        port=port or settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    app()
