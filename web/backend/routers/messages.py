#!/usr/bin/env python3
"""
Message endpoints - conversation attached to each application.
"""

import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.auth import CredentialIdentity
from ..dependencies import get_app_context, get_db, enforce_rate_limit
from ..models.requests import MessageCreate
from ..models.responses import MessageResponse, MarkReadResponse
from ..services import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("/{conversation_id}", response_model=List[MessageResponse])
def list_messages(
    conversation_id: uuid.UUID,
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    db: Session = Depends(get_db)
):
    """Messages in a conversation the caller takes part in, oldest first."""
    return ConversationService(db).list_messages(conversation_id, identity.user_id, identity.role)


@router.post("/{conversation_id}", response_model=MessageResponse, status_code=201)
def post_message(
    conversation_id: uuid.UUID,
    body: MessageCreate,
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    ctx: AppContext = Depends(get_app_context),
    db: Session = Depends(get_db)
):
    """Send a message; the other side's agent is woken with new_message."""
    service = ConversationService(db, notifier=ctx.notification_service)
    return service.post_message(
        conversation_id,
        identity.user_id,
        identity.role,
        body.content,
        api_key_id=identity.credential_id
    )


@router.post("/{conversation_id}/read", response_model=MarkReadResponse)
def mark_read(
    conversation_id: uuid.UUID,
    identity: CredentialIdentity = Depends(enforce_rate_limit),
    db: Session = Depends(get_db)
):
    """Mark the other side's messages as read."""
    marked = ConversationService(db).mark_read(conversation_id, identity.user_id, identity.role)
    return MarkReadResponse(success=True, marked=marked)
