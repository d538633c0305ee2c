import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    uptime = int(time.monotonic() - request.app.state.started_at)
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"status": "ok", "uptime": uptime, "timestamp": timestamp}
