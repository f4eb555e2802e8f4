"""
Shared slowapi limiter.

Applied to the unauthenticated login/register routes, keyed on the client
address. Disable with RATE_LIMIT_ENABLED=0.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core import config


limiter = Limiter(key_func=get_remote_address, enabled=config.RATE_LIMIT_ENABLED)
