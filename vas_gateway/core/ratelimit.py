import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict

from fastapi import Request, Response

from .errors import RATE_LIMITED, GatewayError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_in_seconds: int

    def headers(self) -> Dict[str, str]:
        headers = {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_in_seconds),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.reset_in_seconds)
        return headers


class RateLimitExceeded(Exception):
    def __init__(self, decision: RateLimitDecision):
        self.decision = decision
        self.error: GatewayError = RATE_LIMITED
        super().__init__(self.error.message)


class SlidingWindowRateLimiter:
    """
    In-process sliding window log.

    Each key keeps the timestamps of its admitted requests inside the
    current window; a request is admitted while fewer than `limit`
    timestamps remain after discarding those older than `window_seconds`.
    Keys with no timestamp left in the window are swept at most once per window.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep: float | None = None

    def hit(self, key: str, limit: int, window_seconds: float) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            self._sweep(now, window_seconds)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()

            allowed = len(hits) < limit
            if allowed:
                hits.append(now)

            oldest = hits[0] if hits else now
            reset = max(0, math.ceil(oldest + window_seconds - now))
            return RateLimitDecision(
                allowed=allowed,
                limit=limit,
                remaining=max(0, limit - len(hits)),
                reset_in_seconds=reset,
            )

    def _sweep(self, now: float, window_seconds: float) -> None:
        if self._last_sweep is None:
            self._last_sweep = now
        if now - self._last_sweep < window_seconds:
            return

        cutoff = now - window_seconds
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now

    def __len__(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_address(request: Request, trust_proxy: bool = True) -> str:
    """
    The caller's network origin. Behind one trusted proxy this is the
    hop the proxy appended last to X-Forwarded-For.
    """
    if trust_proxy:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
            if hops:
                return hops[-1]
    if request.client:
        return request.client.host
    return "unknown"


class RateLimit:
    """
    FastAPI dependency admitting or rejecting a request for one scope.
    `limit_setting` names the Settings field holding the per-window limit.
    """

    def __init__(self, scope: str, limit_setting: str):
        self.scope = scope
        self.limit_setting = limit_setting

    def __call__(self, request: Request, response: Response) -> RateLimitDecision:
        settings = request.app.state.settings
        limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter

        address = client_address(request, settings.TRUST_PROXY)
        decision = limiter.hit(
            f"{self.scope}:{address}",
            getattr(settings, self.limit_setting),
            settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        if not decision.allowed:
            logger.warning(f"Rate limit '{self.scope}' exceeded for {address}")
            raise RateLimitExceeded(decision)

        response.headers.update(decision.headers())
        return decision
