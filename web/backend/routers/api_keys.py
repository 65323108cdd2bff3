#!/usr/bin/env python3
"""
API key endpoints - issue, list and revoke the caller's keys.
"""

import uuid
import logging
from fastapi import APIRouter, Depends

from core.app_context import AppContext
from core.auth import CredentialIdentity
from ..dependencies import get_app_context, enforce_rate_limit
from ..exceptions import NotFoundException
from ..models.requests import ApiKeyCreate
from ..models.responses import ApiKeyCreatedResponse, ApiKeyListResponse, RevokeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth/api-keys", tags=["auth"])


@router.get("", response_model=ApiKeyListResponse)
def list_api_keys(
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    ctx: AppContext = Depends(get_app_context)
):
    """List the caller's keys (prefix and metadata only)."""
    return ApiKeyListResponse(data=ctx.credentials.list(identity.user_id))


@router.post("", response_model=ApiKeyCreatedResponse, status_code=201)
def create_api_key(
    body: ApiKeyCreate,
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    ctx: AppContext = Depends(get_app_context)
):
    """Issue a key. The raw key is in this response only."""
    secret, record = ctx.credentials.issue(identity.user_id, body.name, expires_at=body.expires_at)
    return ApiKeyCreatedResponse(key=secret, api_key=record)


@router.delete("/{key_id}", response_model=RevokeResponse)
def revoke_api_key(
    key_id: uuid.UUID,
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    ctx: AppContext = Depends(get_app_context)
):
    """Revoke one of the caller's keys. Revoking twice is fine."""
    if not ctx.credentials.revoke(key_id, identity.user_id):
        raise NotFoundException('API key not found')
    return RevokeResponse(success=True, id=str(key_id))
