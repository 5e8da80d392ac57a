"""
Admin authentication and rate limiting for the public waiting list
"""

import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from theater_admin.core.config import settings

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials != settings.ADMIN_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

class RateLimiter:
    """Sliding-window request counter per client IP.

    An IP whose requests have all left the window is forgotten, so the
    table only holds clients seen during the last window.
    """

    def __init__(self, limit: Optional[int] = None, window: float = 60.0,
                 clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window = window
        self.clock = clock
        self.requests: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def _sweep(self, cutoff: float) -> None:
        stale = [ip for ip, times in self.requests.items() if not times or times[-1] <= cutoff]
        for ip in stale:
            del self.requests[ip]

    def allow(self, client_ip: str) -> bool:
        now = self.clock()
        cutoff = now - self.window
        if now - self._last_sweep >= self.window:
            self._sweep(cutoff)
            self._last_sweep = now

        times = self.requests.get(client_ip)
        if times is not None:
            while times and times[0] <= cutoff:
                times.popleft()
            if not times:
                del self.requests[client_ip]
                times = None

        limit = self.limit if self.limit is not None else settings.RATE_LIMIT_PER_MINUTE
        if times is not None and len(times) >= limit:
            return False
        self.requests.setdefault(client_ip, deque()).append(now)
        return True

# Shared by the public waiting list sign-up
waitlist_limiter = RateLimiter()

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    # Reverse proxy headers first
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
