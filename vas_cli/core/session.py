# vas_cli/core/session.py
import json
from typing import Optional

from .config import APP_DIR, SESSION_FILE


def save_token(token: str, app: str | None = None) -> None:
    """
    Stores the last issued token (SESSION_FILE).
    """
    APP_DIR.mkdir(parents=True, exist_ok=True)
    with open(SESSION_FILE, "w", encoding="utf-8") as f:
        json.dump({"token": token, "app": app}, f)


def load_token() -> Optional[str]:
    """
    Reads the stored token. None if there is no readable session file.
    """
    if not SESSION_FILE.exists():
        return None

    try:
        with open(SESSION_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    return data.get("token") if isinstance(data, dict) else None


def clear_token() -> None:
    if SESSION_FILE.exists():
        SESSION_FILE.unlink()
