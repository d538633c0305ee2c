# vas_cli/core/config.py
from pathlib import Path
import os

# Base URL of the gateway
BASE_URL = os.environ.get("VAS_GATEWAY_URL", "http://localhost:3000").rstrip("/")

# Seconds to wait for the gateway before giving up
TIMEOUT = float(os.environ.get("VAS_GATEWAY_TIMEOUT", "10"))

# Local folder for the last issued token
APP_DIR = Path.home() / ".vas-gateway"
SESSION_FILE = APP_DIR / "session.json"
