"""
Auth Module - API key credentials and per-identity rate limiting.
"""

from core.auth.credentials import CredentialStore, CredentialIdentity, LastUsedRecorder
from core.auth.rate_limiter import (
    RateLimiter,
    RateLimitResult,
    RateWindowStore,
    InMemoryRateWindowStore,
    RedisRateWindowStore,
)

__all__ = [
    'CredentialStore',
    'CredentialIdentity',
    'LastUsedRecorder',
    'RateLimiter',
    'RateLimitResult',
    'RateWindowStore',
    'InMemoryRateWindowStore',
    'RedisRateWindowStore',
]
