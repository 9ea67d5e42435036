"""
Security utilities and authentication
"""

import time
from typing import Dict, List

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from wedding_dates.core.config import settings
from wedding_dates.schemas.guest import SessionContext
from wedding_dates.utils.responses import unauthorized_error

# In-memory request timestamps per client IP
rate_limiter: Dict[str, List[float]] = {}

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials != settings.ADMIN_TOKEN:
        unauthorized_error("Invalid admin token")
    return credentials.credentials

def get_admin_session(token: str = Depends(verify_admin_token)) -> SessionContext:
    """Session context for an authenticated administrator"""
    return SessionContext(is_admin=True)

def _purge_idle_clients(window_start: float) -> None:
    """Drop clients with no requests inside the window"""
    for client_ip in [ip for ip, times in rate_limiter.items() if not times or times[-1] <= window_start]:
        del rate_limiter[client_ip]

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Sliding one-minute rate limit per client IP"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    _purge_idle_clients(minute_ago)
    recent = [req_time for req_time in rate_limiter.get(client_ip, []) if req_time > minute_ago]

    if len(recent) >= limit:
        rate_limiter[client_ip] = recent
        return False

    recent.append(current_time)
    rate_limiter[client_ip] = recent
    return True

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
