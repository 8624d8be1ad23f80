"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in both api/main.py (to mount as middleware) and
api/routes/auth.py (to apply per-route limits with @limiter.limit()).

Using a single shared instance ensures all routes share the same in-memory
counter store. If this were instantiated in each module separately, each
module would get its own isolated counter and rate limits would never trigger.

application_limits is one bucket per client IP across every route (the
global API limit); auth routes add a stricter per-route limit on top.
RATE_LIMIT_ENABLED=false turns both off (test suites, local load tests).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[_settings.api_rate_limit],
    storage_uri="memory://",
    enabled=_settings.rate_limit_enabled,
)
