#!/usr/bin/env python3
"""
Employer endpoints - screen and act on applications to the employer's postings.
"""

import uuid
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.auth import CredentialIdentity
from ..dependencies import get_app_context, get_db, require_employer
from ..models.requests import StatusUpdate
from ..models.responses import ApplicationSummary, ApplicationsResponse
from ..services import ApplicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/employer", tags=["employer"])


@router.get("/applications", response_model=ApplicationsResponse)
def list_applications(
    job_id: Optional[uuid.UUID] = Query(default=None, description="Only applications to this posting"),
    status: Optional[str] = Query(default=None, description="Filter by application status"),
    sort_by: str = Query(default="created_at", description="created_at or match_score"),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=100),
    identity: CredentialIdentity = Depends(require_employer),
    db: Session = Depends(get_db)
):
    """
    List applications to the caller's postings.

    sort_by=match_score orders by the score frozen when the application
    was admitted, highest first.
    """
    service = ApplicationService(db)
    return service.list_for_employer(
        identity.user_id,
        job_id=job_id,
        status=status,
        sort_by=sort_by,
        page=page,
        per_page=per_page
    )


@router.put("/applications/{application_id}/status", response_model=ApplicationSummary)
def update_application_status(
    application_id: uuid.UUID,
    body: StatusUpdate,
    identity: CredentialIdentity = Depends(require_employer),
    ctx: AppContext = Depends(get_app_context),
    db: Session = Depends(get_db)
):
    """
    Move an application forward, or to accepted / rejected.

    The seeker's agent is woken with application_status_changed.
    """
    service = ApplicationService(db, notifier=ctx.notification_service)
    return service.update_status(
        identity.user_id,
        application_id,
        body.status,
        employer_notes=body.employer_notes,
        api_key_id=identity.credential_id
    )
