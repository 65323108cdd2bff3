#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import logging
from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.auth import CredentialIdentity
from core.config_loader import get_config
from .exceptions import AuthenticationException, ForbiddenException, RateLimitExceededException

logger = logging.getLogger(__name__)


@lru_cache()
def get_app_context() -> AppContext:
    """Wired services, built once per process."""
    return AppContext.build(get_config())


def get_db(ctx: AppContext = Depends(get_app_context)) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    session = ctx.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    ctx: AppContext = Depends(get_app_context)
) -> CredentialIdentity:
    """Resolve the Bearer API key to its owner."""
    if not authorization or not authorization.startswith('Bearer '):
        raise AuthenticationException('Missing API key. Use Authorization: Bearer <key>')

    identity = ctx.credentials.validate(authorization[len('Bearer '):].strip())
    if identity is None:
        raise AuthenticationException('Invalid, revoked or expired API key')

    request.state.identity = identity
    return identity


def enforce_rate_limit(
    request: Request,
    identity: CredentialIdentity = Depends(get_current_identity),
    ctx: AppContext = Depends(get_app_context)
) -> CredentialIdentity:
    """
    Charge one request to the caller's global window.

    The result is kept on request.state so the headers middleware can emit
    X-RateLimit-* on every response, including errors.
    """
    budget = ctx.config.rate_limit
    result = ctx.rate_limiter.check(f"{identity.user_id}:global", budget.max_requests, budget.window_seconds)
    request.state.rate_limit = result

    if not result.allowed:
        raise RateLimitExceededException(
            'Rate limit exceeded',
            headers=result.headers(),
            retry_after_seconds=result.retry_after_seconds(ctx.rate_limiter.clock())
        )
    return identity


def require_job_seeker(identity: CredentialIdentity = Depends(enforce_rate_limit)) -> CredentialIdentity:
    if identity.role != 'job_seeker':
        raise ForbiddenException('Only job seekers can access this endpoint')
    return identity


def require_employer(identity: CredentialIdentity = Depends(enforce_rate_limit)) -> CredentialIdentity:
    if identity.role != 'employer':
        raise ForbiddenException('Only employers can access this endpoint')
    return identity
